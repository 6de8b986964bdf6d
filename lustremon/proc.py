"""Read access to files and directories under a proc-style tree."""

from __future__ import annotations

import enum
import errno
import os
from pathlib import Path
from typing import IO, Iterator


class ProcParseError(OSError):
    """A proc file exists but does not hold what was expected."""

    def __init__(self, message: str) -> None:
        super().__init__(errno.EIO, message)


class ReaddirFlag(enum.IntFlag):
    """Filters applied when listing a proc directory."""

    NONE = 0
    NODIR = 1
    NOFILE = 2


class ProcFS:
    """A proc file system rooted at an arbitrary directory."""

    def __init__(self, root: str | os.PathLike[str] = "/proc") -> None:
        self.root = Path(root)

    def path(self, relpath: str) -> Path:
        """Return the full path of *relpath* below the root."""
        return self.root / str(relpath).lstrip("/")

    def open(self, relpath: str) -> IO[str]:
        """Open a proc file for reading as text."""
        return open(self.path(relpath), encoding="utf-8", errors="replace")

    def read(self, relpath: str) -> str:
        """Return the whole contents of a proc file."""
        with self.open(relpath) as f:
            return f.read()

    def readline(self, relpath: str) -> str:
        """Return the first line of a proc file without its newline.

        Raises EOFError if the file is empty.
        """
        with self.open(relpath) as f:
            line = f.readline()
        if not line:
            raise EOFError(f"{self.path(relpath)}: end of file")
        return line.removesuffix("\n")

    def lines(self, relpath: str) -> Iterator[str]:
        """Yield the lines of a proc file without their newlines."""
        with self.open(relpath) as f:
            for line in f:
                yield line.removesuffix("\n")

    def exists(self, relpath: str) -> bool:
        """Tell whether a file or directory exists below the root."""
        return self.path(relpath).exists()

    def listdir(self, relpath: str, flag: ReaddirFlag = ReaddirFlag.NONE) -> list[str]:
        """Return the sorted entry names of a directory.

        Names starting with a dot are skipped.  NODIR drops directories,
        NOFILE drops everything that is not a directory.
        """
        names = []
        with os.scandir(self.path(relpath)) as entries:
            for entry in entries:
                if entry.name.startswith("."):
                    continue
                is_dir = entry.is_dir(follow_symlinks=False)
                if flag & ReaddirFlag.NODIR and is_dir:
                    continue
                if flag & ReaddirFlag.NOFILE and not is_dir:
                    continue
                names.append(entry.name)
        return sorted(names)