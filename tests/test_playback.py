import io

import pytest

from lustremon.playback import (
    MetricRecord,
    Playback,
    format_record,
    parse_record,
    write_record,
)

R1A = MetricRecord(100, 99, "oss1", "lmt_ost", "2;oss1;0.100000;98.810898;")
R1B = MetricRecord(100, 98, "mds1", "lmt_mdt", "1;mds1;0.000000;1.561927;")
R2 = MetricRecord(105, 104, "oss1", "lmt_ost", "2;oss1;0.200000;98.810898;")
R3 = MetricRecord(110, 109, "mds1", "lmt_osc", "1;mds1;lc1-OST0000_UUID;FULL")


def _recording(*records):
    stream = io.StringIO()
    for record in records:
        write_record(stream, record)
    stream.seek(0)
    return stream


def test_format_record_layout():
    record = MetricRecord(1, 2, "node", "lmt_ost", "2;node")
    assert format_record(record) == "1 2 node lmt_ost 2;node"


def test_parse_round_trip():
    assert parse_record(format_record(R1A)) == R1A
    assert parse_record(format_record(R3) + "\n") == R3


def test_write_record_adds_newline():
    stream = io.StringIO()
    write_record(stream, R2)
    assert stream.getvalue() == format_record(R2) + "\n"


def test_parse_bad_line():
    with pytest.raises(ValueError):
        parse_record("not a record")


def test_version():
    assert R1A.version == 2.0
    assert R1B.version == 1.0
    with pytest.raises(ValueError):
        MetricRecord(1, 1, "n", "lmt_ost", "x;y").version


def test_batches():
    play = Playback(_recording(R1A, R1B, R2, R3))
    assert play.read_batch() == [R1A, R1B]
    assert play.tnow == 100
    assert play.tdiff == R2.tnow - R1A.tnow
    assert not play.eof
    assert play.read_batch() == [R2]
    assert play.tnow == 105
    assert play.read_batch() == [R3]
    assert play.eof
    assert play.tnow == 110


def test_read_after_eof_is_empty():
    play = Playback(_recording(R1A))
    assert play.read_batch() == [R1A]
    assert play.eof
    assert play.read_batch() == []


def test_rewind_replays_batch():
    play = Playback(_recording(R1A, R1B, R2, R3))
    play.read_batch()
    play.read_batch()
    assert play.rewind(1) == 1
    assert play.read_batch() == [R2]


def test_rewind_after_eof_clears_it():
    play = Playback(_recording(R1A, R2))
    play.read_batch()
    play.read_batch()
    assert play.eof
    assert play.rewind(2) == 2
    assert not play.eof
    assert play.read_batch() == [R1A]


def test_rewind_limited_by_history():
    play = Playback(_recording(R1A, R2, R3))
    play.read_batch()
    play.read_batch()
    assert play.rewind(5) == 2
    assert play.rewind(1) == 0


def test_rewind_to_target():
    play = Playback(_recording(R1A, R1B, R2, R3))
    play.read_batch()
    play.read_batch()
    play.read_batch()
    play.rewind_to(R2.tnow)
    assert play.read_batch() == [R2]
    play.rewind_to(0)
    assert play.read_batch() == [R1A, R1B]


def test_empty_recording_is_error():
    with pytest.raises(ValueError):
        Playback(io.StringIO("")).read_batch()


def test_bad_version_is_error():
    bad = MetricRecord(100, 99, "oss1", "lmt_ost", "bogus;oss1")
    with pytest.raises(ValueError):
        Playback(_recording(bad)).read_batch()


def test_blank_lines_skipped():
    text = "\n" + format_record(R1A) + "\n\n" + format_record(R2) + "\n"
    play = Playback(io.StringIO(text))
    assert play.read_batch() == [R1A]
    assert play.read_batch() == [R2]


def test_real_file(tmp_path):
    path = tmp_path / "ltop.log"
    with open(path, "w", encoding="utf-8") as f:
        for record in (R1A, R1B, R2):
            write_record(f, record)
    with open(path, encoding="utf-8") as f:
        play = Playback(f)
        first = play.read_batch()
        second = play.read_batch()
        play.rewind(2)
        again = play.read_batch()
    assert first == [R1A, R1B]
    assert second == [R2]
    assert again == first