"""Recording and playback of metric records for later replay."""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass
from typing import IO

_RECORD_RE = re.compile(
    r"\s*(\d+)\s+(\d+)\s+(\S{1,64})\s+(\S{1,16})\s+(\S[^\n]*)"
)
_VERSION_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class MetricRecord:
    """One metric as received: wall clock time, receive time, node, name, value."""

    tnow: int
    trcv: int
    node: str
    name: str
    value: str

    @property
    def version(self) -> float:
        """The protocol version that leads the metric value."""
        match = _VERSION_RE.match(self.value)
        if not match:
            raise ValueError(f"no metric version in {self.value!r}")
        return float(match.group(0))


def format_record(record: MetricRecord) -> str:
    """Render a record as one line of a recording, without the newline."""
    return (
        f"{record.tnow} {record.trcv} {record.node} {record.name} {record.value}"
    )


def parse_record(line: str) -> MetricRecord:
    """Parse one line of a recording."""
    match = _RECORD_RE.match(line)
    if not match:
        raise ValueError(f"bad playback record {line!r}")
    tnow, trcv, node, name, value = match.groups()
    return MetricRecord(int(tnow), int(trcv), node, name, value)


def write_record(stream: IO[str], record: MetricRecord) -> None:
    """Append a record as a line to a recording."""
    stream.write(format_record(record) + "\n")


class Playback:
    """Reads a recording back one batch at a time.

    Records sharing the same wall clock time form a batch.  The start of
    every batch read is remembered so that playback can be rewound.
    """

    def __init__(self, stream: IO[str]) -> None:
        self.stream = stream
        self.tnow = 0
        self.tdiff = 0
        self.eof = False
        self.time_series: deque[tuple[int, int]] = deque()

    def _next_line(self) -> tuple[int, str | None]:
        while True:
            pos = self.stream.tell()
            line = self.stream.readline()
            if not line:
                return pos, None
            if line.strip():
                return pos, line

    def read_batch(self) -> list[MetricRecord]:
        """Return the records of the next batch; empty once the end is reached.

        Sets tnow to the batch's time and, unless the end was reached,
        tdiff to the gap to the following batch.
        """
        if self.eof:
            return []
        batch: list[MetricRecord] = []
        tmark: int | None = None
        start = 0
        tdiff = 0
        while True:
            pos, line = self._next_line()
            if line is None:
                self.eof = True
                break
            try:
                record = parse_record(line)
            except ValueError:
                self.stream.seek(pos)
                break
            if tmark is not None and record.tnow != tmark:
                self.stream.seek(pos)
                tdiff = record.tnow - tmark
                break
            try:
                record.version
            except ValueError as exc:
                raise ValueError(
                    "Parse error reading metric version in playback file"
                ) from exc
            if tmark is None:
                start = pos
            batch.append(record)
            tmark = record.tnow
        if tmark is None:
            raise ValueError("Error parsing playback file")
        self.tnow = tmark
        if not self.eof:
            self.tdiff = tdiff
        self.time_series.appendleft((start, tmark))
        return batch

    def rewind(self, count: int) -> int:
        """Step back up to *count* batches; return how many were stepped."""
        done = 0
        while done < count and self.time_series:
            pos, _ = self.time_series.popleft()
            self.stream.seek(pos)
            self.eof = False
            done += 1
        return done

    def rewind_to(self, target: int) -> None:
        """Step back batch by batch until one no later than *target* is reached."""
        while self.time_series:
            pos, t = self.time_series.popleft()
            self.stream.seek(pos)
            self.eof = False
            if t <= target:
                break