"""Command that prints system utilisation metrics read from proc."""

from __future__ import annotations

import argparse
import math
import re
import sys
import time

from .proc import ProcFS
from .sysinfo import CpuUtilization, read_meminfo

PROG = "lmtmetric"
METRICS = ("sysstat",)

USAGE = (
    "Usage: lmtmetric [OPTIONS]\n"
    "   -m,--metric NAME            select sysstat\n"
    "   -r,--proc-root DIR          select proc root other than /proc\n"
    "   -t,--update-period SECS     [default: run once]\n"
)

_UINT_RE = re.compile(r"\s*\+?(\d+)")


def sysstat(proc: ProcFS, cpu: CpuUtilization) -> str:
    """Return CPU and memory utilisation as a metric string."""
    cpupct = cpu.update(proc)
    ktot, kfree = read_meminfo(proc)
    if ktot:
        mempct = (ktot - kfree) / ktot * 100.0
    else:
        mempct = math.nan if kfree == 0 else math.inf
    return f"cpu_util: {cpupct:.2f}% mem_util: {mempct:.2f}%"


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        sys.stderr.write(USAGE)
        raise SystemExit(1)


def _seconds(text: str) -> int:
    match = _UINT_RE.match(text)
    return int(match.group(1)) if match else 0


def main(argv: list[str] | None = None) -> int:
    """Print the selected metric once, or every update period."""
    parser = _Parser(prog=PROG, add_help=False)
    parser.add_argument("-m", "--metric", default=None)
    parser.add_argument("-r", "--proc-root", default="/proc")
    parser.add_argument("-t", "--update-period", type=_seconds, default=0)
    args = parser.parse_args(argv)
    metric = args.metric or "sysstat"
    if metric not in METRICS:
        parser.error(f"unknown metric {metric}")

    proc = ProcFS(args.proc_root)
    cpu = CpuUtilization()
    while True:
        try:
            print(f"{metric}: {sysstat(proc, cpu)}", flush=True)
        except EOFError:
            print(f"{PROG}: {metric} metric information unavailable", file=sys.stderr)
        except (OSError, ValueError) as exc:
            print(f"{PROG}: {metric} metric: {exc}", file=sys.stderr)
        if args.update_period <= 0:
            break
        time.sleep(args.update_period)
    return 0