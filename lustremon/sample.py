"""Two-point samples used to compute values and rates over time."""

from __future__ import annotations


class Sample:
    """Holds the two most recent (time, value) points of a counter."""

    def __init__(self, stale_secs: int) -> None:
        self.stale_secs = stale_secs
        self.valid = 0
        self._vals = [0.0, 0.0]
        self._times = [0, 0]

    def copy(self) -> Sample:
        """Return an independent copy."""
        dup = Sample(self.stale_secs)
        dup.valid = self.valid
        dup._vals = list(self._vals)
        dup._times = list(self._times)
        return dup

    def invalidate(self) -> None:
        """Discard both data points."""
        self.valid = 0

    def update(self, val: float, t: int) -> None:
        """Record *val* at time *t*; points not newer than the last are ignored."""
        if self.valid == 0:
            self._times[1] = t
            self._vals[1] = val
            self.valid = 1
        elif self._times[1] < t:
            self._times[0] = self._times[1]
            self._vals[0] = self._vals[1]
            self._times[1] = t
            self._vals[1] = val
            if self.valid < 2:
                self.valid += 1

    def _aligned(self, other: Sample) -> bool:
        if self.valid != other.valid:
            return False
        if self.valid > 0 and self._times[1] != other._times[1]:
            return False
        if self.valid > 1 and self._times[0] != other._times[0]:
            return False
        return True

    def _combine(self, other: Sample, op) -> None:
        if not self._aligned(other):
            return
        if self.valid > 0:
            self._vals[1] = op(self._vals[1], other._vals[1])
        if self.valid > 1:
            self._vals[0] = op(self._vals[0], other._vals[0])

    def add(self, other: Sample) -> None:
        """Add *other* into this sample if both were taken at the same times."""
        self._combine(other, lambda a, b: a + b)

    def max(self, other: Sample) -> None:
        """Keep the larger points if both were taken at the same times."""
        self._combine(other, max)

    def min(self, other: Sample) -> None:
        """Keep the smaller points if both were taken at the same times."""
        self._combine(other, min)

    def rate(self, tnow: int) -> float:
        """Return change in value per second; 0 if stale, short of data or negative."""
        val = 0.0
        if self.valid == 2 and tnow - self._times[1] <= self.stale_secs:
            val = (self._vals[1] - self._vals[0]) / (self._times[1] - self._times[0])
        return max(val, 0.0)

    def value(self, tnow: int) -> float:
        """Return the newest value, or 0 if stale or empty."""
        if self.valid > 0 and tnow - self._times[1] <= self.stale_secs:
            return self._vals[1]
        return 0


def _cmp(a: float, b: float) -> int:
    return 0 if a == b else (-1 if a < b else 1)


def val_cmp(s1: Sample, s2: Sample, tnow: int) -> int:
    """Compare current values, returning -1, 0 or 1."""
    return _cmp(s1.value(tnow), s2.value(tnow))


def rate_cmp(s1: Sample, s2: Sample, tnow: int) -> int:
    """Compare current rates, returning -1, 0 or 1."""
    return _cmp(s1.rate(tnow), s2.rate(tnow))