"""System memory and CPU figures read from proc."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .proc import ProcFS, ProcParseError

_MEMINFO = "meminfo"
_STAT = "stat"

_U64 = 1 << 64

_MEMTOTAL_RE = re.compile(r"\s*MemTotal:\s*(\d+)\s*kB")
_MEMFREE_RE = re.compile(r"\s*MemFree:\s*(\d+)\s*kB")
_CPU_RE = re.compile(r"\s*cpu +" + r"\s+".join([r"(\d+)"] * 7))


def read_meminfo(proc: ProcFS) -> tuple[int, int]:
    """Return (MemTotal, MemFree) in kilobytes from the meminfo file."""
    text = proc.read(_MEMINFO)
    total = _MEMTOTAL_RE.match(text)
    if not total:
        raise ProcParseError("meminfo: MemTotal not found")
    free = _MEMFREE_RE.match(text, total.end())
    if not free:
        raise ProcParseError("meminfo: MemFree not found")
    return int(total.group(1)), int(free.group(1))


@dataclass(frozen=True)
class CpuStat:
    """Aggregate CPU time counters from the first line of the stat file."""

    usr: int
    nice: int
    sys: int
    idle: int
    iowait: int
    irq: int
    softirq: int

    @property
    def usage(self) -> int:
        return self.usr + self.nice + self.sys + self.irq + self.softirq

    @property
    def total(self) -> int:
        return self.usage + self.idle + self.iowait


def read_cpu_stat(proc: ProcFS) -> CpuStat:
    """Parse the aggregate cpu line of the stat file."""
    match = _CPU_RE.match(proc.read(_STAT))
    if not match:
        raise ProcParseError("stat: aggregate cpu line not found")
    return CpuStat(*(int(g) for g in match.groups()))


class CpuUtilization:
    """Percent CPU utilisation between successive readings.

    The first update reports utilisation since boot.
    """

    def __init__(self) -> None:
        self.usage = 0
        self.total = 0

    def update(self, proc: ProcFS) -> float:
        """Read the stat file and return percent use since the last call."""
        stat = read_cpu_stat(proc)
        usage, total = stat.usage, stat.total
        delta_total = (total - self.total) % _U64
        if delta_total > 0:
            pct = ((usage - self.usage) % _U64) / delta_total * 100.0
        else:
            pct = 0.0
        self.usage = usage
        self.total = total
        return pct