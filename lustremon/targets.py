"""Lustre version detection, key/value proc files and target discovery."""

from __future__ import annotations

import enum
import re

from .proc import ProcFS, ProcParseError, ReaddirFlag

OST_DIR = "fs/lustre/obdfilter"
OSC_DIR = "fs/lustre/osc"
MDT_DIR_1_8 = "fs/lustre/mds"
MDT_DIR_2_0 = "fs/lustre/mdt"
LDISKFS_OSD_DIR_1_8 = MDT_DIR_1_8
LDISKFS_OSD_DIR_2_0 = "fs/lustre/osd-ldiskfs"
ZFS_OSD_DIR_2_0 = "fs/lustre/osd-zfs"
VERSION_FILE = "fs/lustre/version"

_WS = " \t\n\v\f\r"
_KEY_RE = re.compile(r"([^ \t\n\v\f\r]*)[ \t\n\v\f\r]")
_VERSION_RE = re.compile(r"\s*([+-]?\d+)\.\s*([+-]?\d+)\.\s*([+-]?\d+)")
_FIX_RE = re.compile(r"\.\s*([+-]?\d+)")


class BackFs(enum.Enum):
    """Back-end file system used by the object storage devices."""

    LDISKFS = "ldiskfs"
    ZFS = "zfs"


def packed_version(major: int, minor: int, patch: int, fix: int) -> int:
    """Pack version components into a single comparable integer."""
    return (major << 24) + (minor << 16) + (patch << 8) + fix


LUSTRE_1_8 = packed_version(1, 8, 0, 0)
LUSTRE_2_0 = packed_version(2, 0, 0, 0)


def parse_stat_line(line: str) -> tuple[str, str]:
    """Split a "key <whitespace> value" line into its key and value."""
    match = _KEY_RE.match(line)
    if not match:
        raise ProcParseError(f"no value in line {line!r}")
    value = line[match.end():].lstrip(_WS)
    if not value:
        raise ProcParseError(f"no value in line {line!r}")
    return match.group(1), value


def _collect(proc: ProcFS, relpath: str, strict: bool) -> dict[str, str]:
    result: dict[str, str] = {}
    for line in proc.lines(relpath):
        try:
            key, value = parse_stat_line(line)
        except ProcParseError:
            if strict:
                raise
            break
        result[key] = value
    return result


def read_keyvals(proc: ProcFS, relpath: str) -> dict[str, str]:
    """Read a file of "key value" lines; a repeated key keeps its last value."""
    return _collect(proc, relpath, strict=True)


def lustre_version(proc: ProcFS) -> tuple[int, int, int, int]:
    """Return (major, minor, patch, fix) from the Lustre version file."""
    entries = _collect(proc, VERSION_FILE, strict=False)
    version = entries.get("lustre:")
    if version is None:
        raise ProcParseError(f"{VERSION_FILE}: no lustre version entry")
    match = _VERSION_RE.match(version)
    if not match:
        raise ProcParseError(f"{VERSION_FILE}: bad version {version!r}")
    major, minor, patch = (int(g) for g in match.groups())
    fix_match = _FIX_RE.match(version, match.end())
    fix = int(fix_match.group(1)) if fix_match else 0
    return major, minor, patch, fix


def packed_lustre_version(proc: ProcFS) -> int:
    """Return the running Lustre version packed into one integer."""
    return packed_version(*lustre_version(proc))


def _packed_or_unknown(proc: ProcFS) -> int:
    try:
        return packed_lustre_version(proc)
    except OSError:
        return -1


def backfs_type(proc: ProcFS) -> BackFs:
    """Tell whether the OSDs are backed by zfs or ldiskfs."""
    return BackFs.ZFS if proc.exists(ZFS_OSD_DIR_2_0) else BackFs.LDISKFS


def mdt_dir(proc: ProcFS) -> str:
    """Return the MDT directory for the running Lustre version."""
    if _packed_or_unknown(proc) >= LUSTRE_2_0:
        return MDT_DIR_2_0
    return MDT_DIR_1_8


def osd_dir(proc: ProcFS) -> str:
    """Return the OSD directory for the running version and back-end."""
    if _packed_or_unknown(proc) >= LUSTRE_2_0:
        if backfs_type(proc) is BackFs.ZFS:
            return ZFS_OSD_DIR_2_0
        return LDISKFS_OSD_DIR_2_0
    return LDISKFS_OSD_DIR_1_8


def _subdir_list(proc: ProcFS, relpath: str) -> list[str]:
    # Client-instantiated osc's such as lc1-OST0005-osc-ffff81007f018c00
    # are not targets of this server.
    return [
        name
        for name in proc.listdir(relpath, ReaddirFlag.NOFILE)
        if not ("-osc-" in name and "MDT" not in name)
    ]


def ost_list(proc: ProcFS) -> list[str]:
    """Return the sorted names of the OSTs served here."""
    return _subdir_list(proc, OST_DIR)


def mdt_list(proc: ProcFS) -> list[str]:
    """Return the sorted names of the MDTs served here."""
    return _subdir_list(proc, mdt_dir(proc))


def osc_list(proc: ProcFS) -> list[str]:
    """Return the sorted names of the OSCs on this server."""
    return _subdir_list(proc, OSC_DIR)


def mdt_export_list(proc: ProcFS, name: str) -> list[str]:
    """Return the sorted client export names of an MDT."""
    return _subdir_list(proc, f"{mdt_dir(proc)}/{name}/exports")