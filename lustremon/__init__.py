"""Read Lustre and host statistics from a proc tree, track them as rates, and record and play back metrics."""

__version__ = "0.1.0"