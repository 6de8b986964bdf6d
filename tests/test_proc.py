import errno

import pytest

from lustremon.proc import ProcFS, ProcParseError, ReaddirFlag


@pytest.fixture
def proc(tmp_path):
    (tmp_path / "fs").mkdir()
    (tmp_path / "fs" / "alpha").mkdir()
    (tmp_path / "fs" / "beta").mkdir()
    (tmp_path / "fs" / ".hidden").mkdir()
    (tmp_path / "fs" / "afile").write_text("x\n")
    (tmp_path / "multi").write_text("first\nsecond\nthird")
    (tmp_path / "empty").write_text("")
    return ProcFS(tmp_path)


def test_path_joins_root(proc, tmp_path):
    assert proc.path("fs/alpha") == tmp_path / "fs" / "alpha"
    assert proc.path("/fs/alpha") == tmp_path / "fs" / "alpha"


def test_read_returns_contents(proc):
    assert proc.read("multi") == "first\nsecond\nthird"


def test_readline_strips_newline(proc):
    assert proc.readline("multi") == "first"


def test_readline_empty_raises_eof(proc):
    with pytest.raises(EOFError):
        proc.readline("empty")


def test_lines_yields_each_line(proc):
    assert list(proc.lines("multi")) == ["first", "second", "third"]


def test_open_missing_raises(proc):
    with pytest.raises(FileNotFoundError):
        proc.read("nope")


def test_exists(proc):
    assert proc.exists("fs/alpha") is True
    assert proc.exists("multi") is True
    assert proc.exists("nope") is False


def test_listdir_skips_dot_entries(proc):
    assert proc.listdir("fs") == ["afile", "alpha", "beta"]


def test_listdir_nofile(proc):
    assert proc.listdir("fs", ReaddirFlag.NOFILE) == ["alpha", "beta"]


def test_listdir_nodir(proc):
    assert proc.listdir("fs", ReaddirFlag.NODIR) == ["afile"]


def test_listdir_on_file_raises(proc):
    with pytest.raises(NotADirectoryError):
        proc.listdir("multi")


def test_parse_error_is_eio():
    err = ProcParseError("bad")
    assert err.errno == errno.EIO
    assert isinstance(err, OSError)