"""Single-value Lustre and LNET figures read from proc."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .proc import ProcFS, ProcParseError
from .targets import mdt_dir, osd_dir

OST_FILESFREE = "fs/lustre/obdfilter/{}/filesfree"
OST_FILESTOTAL = "fs/lustre/obdfilter/{}/filestotal"
MDT_FILESFREE = "{}/filesfree"
MDT_FILESTOTAL = "{}/filestotal"

OST_KBYTESFREE = "fs/lustre/obdfilter/{}/kbytesfree"
OST_KBYTESTOTAL = "fs/lustre/obdfilter/{}/kbytestotal"
MDT_KBYTESFREE = "{}/kbytesfree"
MDT_KBYTESTOTAL = "{}/kbytestotal"

OST_UUID = "fs/lustre/obdfilter/{}/uuid"
MDT_UUID = "{}/uuid"

OSC_OST_SERVER_UUID = "fs/lustre/osc/{}/ost_server_uuid"

OST_NUM_EXPORTS = "fs/lustre/obdfilter/{}/num_exports"
MDT_NUM_EXPORTS = "{}/num_exports"

OST_LDLM_LOCK_COUNT = "fs/lustre/ldlm/namespaces/filter-{}_UUID/lock_count"
OST_LDLM_GRANT_RATE = "fs/lustre/ldlm/namespaces/filter-{}_UUID/pool/grant_rate"
OST_LDLM_CANCEL_RATE = "fs/lustre/ldlm/namespaces/filter-{}_UUID/pool/cancel_rate"
MDT_LDLM_LOCK_COUNT = "fs/lustre/ldlm/namespaces/mds-{}_UUID/lock_count"
MDT_LDLM_GRANT_RATE = "fs/lustre/ldlm/namespaces/mds-{}_UUID/pool/grant_rate"
MDT_LDLM_CANCEL_RATE = "fs/lustre/ldlm/namespaces/mds-{}_UUID/pool/cancel_rate"

LNET_ROUTES = "sys/lnet/routes"
LNET_STATS = "sys/lnet/stats"

_INT_RE = re.compile(r"\s*(\d+)")
_STR_RE = re.compile(r"\s*(\S{1,255})")
_OSC_RE = re.compile(r"\s*(\S{1,31})\s*(\S{1,31})")
_NEWBYTES_RE = re.compile(r"\s*(?:\d+\s+){9}(\d+)")


@dataclass(frozen=True)
class OscInfo:
    """The server an OSC is connected to and the connection state."""

    uuid: str
    state: str


def _pick(name: str, ost_tmpl: str, mdt_tmpl: str) -> str:
    if "-OST" in name:
        return ost_tmpl
    if "-MDT" in name:
        return mdt_tmpl
    raise ValueError(f"{name}: not an OST or MDT target")


def _target_path(proc: ProcFS, tmpl: str, name: str, use_osd: bool) -> str:
    if "-MDT" in name:
        if use_osd and ("/files" in tmpl or "/kbytes" in tmpl):
            tmpl = f"{osd_dir(proc)}/{tmpl}"
        else:
            tmpl = f"{mdt_dir(proc)}/{tmpl}"
    return tmpl.format(name)


def _read_int(proc: ProcFS, tmpl: str, name: str) -> int:
    relpath = _target_path(proc, tmpl, name, use_osd=True)
    match = _INT_RE.match(proc.read(relpath))
    if not match:
        raise ProcParseError(f"{relpath}: no integer value")
    return int(match.group(1))


def _read_str(proc: ProcFS, tmpl: str, name: str) -> str:
    relpath = _target_path(proc, tmpl, name, use_osd=False)
    match = _STR_RE.match(proc.read(relpath))
    if not match:
        raise ProcParseError(f"{relpath}: no value")
    return match.group(1)


def _trim_uuid(s: str) -> str:
    return s.removesuffix("_UUID")


def files(proc: ProcFS, name: str) -> tuple[int, int]:
    """Return (free, total) inode counts of an OST or MDT."""
    tmplf = _pick(name, OST_FILESFREE, MDT_FILESFREE)
    tmplt = _pick(name, OST_FILESTOTAL, MDT_FILESTOTAL)
    return _read_int(proc, tmplf, name), _read_int(proc, tmplt, name)


def kbytes(proc: ProcFS, name: str) -> tuple[int, int]:
    """Return (free, total) space in kilobytes of an OST or MDT."""
    tmplf = _pick(name, OST_KBYTESFREE, MDT_KBYTESFREE)
    tmplt = _pick(name, OST_KBYTESTOTAL, MDT_KBYTESTOTAL)
    return _read_int(proc, tmplf, name), _read_int(proc, tmplt, name)


def num_exports(proc: ProcFS, name: str) -> int:
    """Return the number of client exports of an OST or MDT."""
    return _read_int(proc, _pick(name, OST_NUM_EXPORTS, MDT_NUM_EXPORTS), name)


def _ldlm(proc: ProcFS, name: str, ost_tmpl: str, mdt_tmpl: str) -> int:
    tmpl = _pick(name, ost_tmpl, mdt_tmpl)
    try:
        return _read_int(proc, tmpl, name)
    except FileNotFoundError:
        # Some Lustre versions lack these files; report zero.
        return 0


def ldlm_lock_count(proc: ProcFS, name: str) -> int:
    """Return the lock manager lock count of a target, 0 if not available."""
    return _ldlm(proc, name, OST_LDLM_LOCK_COUNT, MDT_LDLM_LOCK_COUNT)


def ldlm_grant_rate(proc: ProcFS, name: str) -> int:
    """Return the lock grant rate of a target, 0 if not available."""
    return _ldlm(proc, name, OST_LDLM_GRANT_RATE, MDT_LDLM_GRANT_RATE)


def ldlm_cancel_rate(proc: ProcFS, name: str) -> int:
    """Return the lock cancel rate of a target, 0 if not available."""
    return _ldlm(proc, name, OST_LDLM_CANCEL_RATE, MDT_LDLM_CANCEL_RATE)


def uuid(proc: ProcFS, name: str) -> str:
    """Return the uuid of an OST or MDT without its _UUID suffix."""
    return _trim_uuid(_read_str(proc, _pick(name, OST_UUID, MDT_UUID), name))


def osc_info(proc: ProcFS, name: str) -> OscInfo:
    """Return the server uuid and connection state of an OSC."""
    relpath = OSC_OST_SERVER_UUID.format(name)
    match = _OSC_RE.match(proc.read(relpath))
    if not match:
        raise ProcParseError(f"{relpath}: expected uuid and state")
    return OscInfo(uuid=_trim_uuid(match.group(1)), state=match.group(2))


def lnet_newbytes(proc: ProcFS) -> int:
    """Return the byte counter in the tenth field of the LNET stats file."""
    match = _NEWBYTES_RE.match(proc.read(LNET_STATS))
    if not match:
        raise ProcParseError(f"{LNET_STATS}: too few fields")
    return int(match.group(1))


def lnet_routing_enabled(proc: ProcFS) -> bool:
    """Tell whether LNET routing is enabled."""
    try:
        line = proc.readline(LNET_ROUTES)
    except EOFError as exc:
        raise ProcParseError(f"{LNET_ROUTES}: empty") from exc
    if line == "Routing enabled":
        return True
    if line == "Routing disabled":
        return False
    raise ProcParseError(f"{LNET_ROUTES}: unexpected line {line!r}")