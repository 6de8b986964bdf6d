"""Lustre operation statistics and recovery status read from proc."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .proc import ProcFS, ProcParseError
from .targets import (
    LUSTRE_2_0,
    mdt_dir,
    mdt_export_list,
    packed_lustre_version,
    packed_version,
    parse_stat_line,
    read_keyvals,
)

OST_STATS = "fs/lustre/obdfilter/{}/stats"
MDT_STATS_1_8 = "{}/stats"
MDT_STATS_2_0 = "{}/md_stats"
MDT_EXPORT_STATS = "{}/{}/exports/{}/stats"
OST_RECOVERY_STATUS = "fs/lustre/obdfilter/{}/recovery_status"
MDT_RECOVERY_STATUS = "{}/recovery_status"

# Before this version the MDT lost its aggregate operation counters, so
# they are rebuilt from the per-export counters.
_AGGREGATE_BEFORE = packed_version(2, 0, 56, 0)

_U64 = 1 << 64
_NUM_RE = re.compile(r"\s*\+?(\d+)")
_SAMPLES_RE = re.compile(r"\s*samples")
_UNIT_RE = re.compile(r"\s*\S+")


@dataclass(frozen=True)
class StatCounter:
    """One stats entry: <count> samples [<unit>] <min> <max> <sum> <sumsq>."""

    count: int = 0
    min: int = 0
    max: int = 0
    sum: int = 0
    sumsq: int = 0

    def __add__(self, other: StatCounter) -> StatCounter:
        if not isinstance(other, StatCounter):
            return NotImplemented
        return StatCounter(
            (self.count + other.count) % _U64,
            (self.min + other.min) % _U64,
            (self.max + other.max) % _U64,
            (self.sum + other.sum) % _U64,
            (self.sumsq + other.sumsq) % _U64,
        )

    def format(self) -> str:
        """Render in the stats file value format with a [reqs] unit."""
        return (
            f"{self.count} samples [reqs] "
            f"{self.min} {self.max} {self.sum} {self.sumsq}"
        )


def parse_stat_value(val: str) -> StatCounter:
    """Parse the value part of a stats line; only the count is required."""
    match = _NUM_RE.match(val)
    if not match:
        raise ProcParseError(f"bad stats value {val!r}")
    fields = [int(match.group(1)) % _U64]
    samples = _SAMPLES_RE.match(val, match.end())
    if samples:
        unit = _UNIT_RE.match(val, samples.end())
        if unit:
            pos = unit.end()
            for _ in range(4):
                num = _NUM_RE.match(val, pos)
                if not num:
                    break
                fields.append(int(num.group(1)) % _U64)
                pos = num.end()
    return StatCounter(*fields)


def _version(proc: ProcFS) -> int:
    try:
        return packed_lustre_version(proc)
    except OSError:
        return -1


def _stats_path(proc: ProcFS, name: str, version: int) -> str:
    if "-MDT" in name:
        tmpl = MDT_STATS_2_0 if version >= LUSTRE_2_0 else MDT_STATS_1_8
        return f"{mdt_dir(proc)}/{tmpl.format(name)}"
    if "-OST" in name:
        return OST_STATS.format(name)
    raise ValueError(f"{name}: not an OST or MDT target")


def _aggregate_export_stats(proc: ProcFS, name: str, stats: dict[str, str]) -> None:
    try:
        exports = mdt_export_list(proc, name)
    except OSError:
        return
    base = mdt_dir(proc)
    for export in exports:
        relpath = MDT_EXPORT_STATS.format(base, name, export)
        try:
            lines = list(proc.lines(relpath))
        except FileNotFoundError:
            # Some versions have no per-export stats; stop collecting.
            return
        for line in lines:
            key, value = parse_stat_line(line)
            if key == "snapshot_time":
                continue
            try:
                new = parse_stat_value(value)
                old = parse_stat_value(stats[key]) if key in stats else StatCounter()
            except ProcParseError:
                return
            stats[key] = (old + new).format()


def hash_stats(proc: ProcFS, name: str) -> dict[str, str]:
    """Return the operation stats of an OST or MDT keyed by operation name.

    On Lustre 2.x MDTs the "mds_" prefix is dropped from the keys, and
    before 2.0.56 the per-export counters are summed in.
    """
    version = _version(proc) if "-MDT" in name else -1
    stats = read_keyvals(proc, _stats_path(proc, name, version))
    if "-MDT" in name and version >= LUSTRE_2_0:
        if version < _AGGREGATE_BEFORE:
            _aggregate_export_stats(proc, name, stats)
        stats = {key.removeprefix("mds_"): val for key, val in stats.items()}
    return stats


def hash_recovery(proc: ProcFS, name: str) -> dict[str, str]:
    """Return the recovery_status entries of an OST or MDT."""
    if "-OST" in name:
        relpath = OST_RECOVERY_STATUS.format(name)
    elif "-MDT" in name:
        relpath = f"{mdt_dir(proc)}/{MDT_RECOVERY_STATUS.format(name)}"
    else:
        raise ValueError(f"{name}: not an OST or MDT target")
    return read_keyvals(proc, relpath)


def parse_stat(stats: dict[str, str], key: str) -> StatCounter:
    """Return the parsed counter for *key*; KeyError if it is absent."""
    if key not in stats:
        raise KeyError(key)
    return parse_stat_value(stats[key])