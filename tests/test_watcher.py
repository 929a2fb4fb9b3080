"""Tests for the record dump watcher (polling step only, no thread)."""

import pytest

from xivchat.dump import format_dump_line
from xivchat.entry import DecodeStatus
from xivchat.watcher import MAX_LINE_SIZE, RecordDumpWatcher


def dump_line(text: bytes) -> str:
    return format_dump_line(b"5F0000000039:" + text) + "\n"


@pytest.fixture
def dump_file(tmp_path):
    path = tmp_path / "chatlog.dump"
    path.write_text("", encoding="ascii")
    return path


@pytest.fixture
def received():
    return []


@pytest.fixture
def watcher(dump_file, received):
    w = RecordDumpWatcher(dump_file, received.append)
    w._seek_to_end()
    return w


def append(path, text):
    with open(path, "a", encoding="ascii") as f:
        f.write(text)


class TestReadNewRecords:
    """Test decoding of records appended to the dump."""

    def test_no_change(self, watcher, received):
        assert watcher._read_new_records() == 0
        assert received == []

    def test_new_records_delivered(self, watcher, dump_file, received):
        append(dump_file, dump_line(b"one") + dump_line(b"two"))
        assert watcher._read_new_records() == 2
        assert [e.text for e in received] == ["one", "two"]

    def test_existing_content_skipped(self, tmp_path, received):
        path = tmp_path / "old.dump"
        path.write_text(dump_line(b"old"), encoding="ascii")
        w = RecordDumpWatcher(path, received.append)
        w._seek_to_end()
        append(path, dump_line(b"new"))
        w._read_new_records()
        assert [e.text for e in received] == ["new"]

    def test_partial_line_waits(self, watcher, dump_file, received):
        line = dump_line(b"split")
        append(dump_file, line[:10])
        assert watcher._read_new_records() == 0
        append(dump_file, line[10:])
        assert watcher._read_new_records() == 1
        assert received[0].text == "split"

    def test_bad_lines_skipped(self, watcher, dump_file, received):
        append(dump_file, "zz\n# note\n\n" + dump_line(b"ok"))
        assert watcher._read_new_records() == 1
        assert received[0].text == "ok"

    def test_incomplete_record_delivered(self, watcher, dump_file, received):
        append(dump_file, format_dump_line(b"short") + "\n")
        watcher._read_new_records()
        assert received[0].status == DecodeStatus.TOO_SHORT

    def test_truncation_resets(self, watcher, dump_file, received):
        append(dump_file, dump_line(b"first") + dump_line(b"second"))
        watcher._read_new_records()
        dump_file.write_text(dump_line(b"fresh"), encoding="ascii")
        watcher._read_new_records()
        assert [e.text for e in received] == ["first", "second", "fresh"]

    def test_missing_file(self, tmp_path, received):
        w = RecordDumpWatcher(tmp_path / "missing.dump", received.append)
        w._seek_to_end()
        assert w._read_new_records() == 0

    def test_oversized_unterminated_line_dropped(self, watcher, dump_file, received):
        append(dump_file, "41" * MAX_LINE_SIZE)
        assert watcher._read_new_records() == 0
        assert watcher._pending == b""
        append(dump_file, "4142\n" + dump_line(b"after"))
        assert watcher._read_new_records() == 1
        assert [e.text for e in received] == ["after"]

    def test_short_unterminated_line_kept(self, watcher, dump_file):
        append(dump_file, "4142")
        watcher._read_new_records()
        assert watcher._pending == b"4142"


class TestReadTail:
    """Test history loading."""

    def test_last_records(self, dump_file):
        dump_file.write_text(
            "".join(dump_line(f"msg{i}".encode()) for i in range(5)),
            encoding="ascii",
        )
        w = RecordDumpWatcher(dump_file, lambda _: None)
        assert [e.text for e in w.read_tail(max_records=2)] == ["msg3", "msg4"]

    def test_zero_records(self, dump_file):
        dump_file.write_text(dump_line(b"x"), encoding="ascii")
        w = RecordDumpWatcher(dump_file, lambda _: None)
        assert w.read_tail(max_records=0) == []

    def test_capped_at_chatlog_size(self, dump_file):
        dump_file.write_text(
            "".join(dump_line(b"m") for _ in range(1005)),
            encoding="ascii",
        )
        w = RecordDumpWatcher(dump_file, lambda _: None)
        assert len(w.read_tail(max_records=5000)) == 1000

    def test_missing_file(self, tmp_path):
        w = RecordDumpWatcher(tmp_path / "missing.dump", lambda _: None)
        assert w.read_tail() == []


class TestResumeAfterTail:
    """Test that records written between history load and start are not lost."""

    def test_records_after_tail_delivered(self, dump_file, received):
        dump_file.write_text(dump_line(b"history"), encoding="ascii")
        w = RecordDumpWatcher(dump_file, received.append)
        assert [e.text for e in w.read_tail()] == ["history"]
        append(dump_file, dump_line(b"late"))
        w._init_position()
        w._read_new_records()
        assert [e.text for e in received] == ["late"]

    def test_partial_tail_line_completed(self, dump_file, received):
        line = dump_line(b"split")
        dump_file.write_text(dump_line(b"history") + line[:10], encoding="ascii")
        w = RecordDumpWatcher(dump_file, received.append)
        assert [e.text for e in w.read_tail()] == ["history"]
        append(dump_file, line[10:])
        w._init_position()
        w._read_new_records()
        assert [e.text for e in received] == ["split"]

    def test_without_tail_starts_at_end(self, dump_file, received):
        dump_file.write_text(dump_line(b"old"), encoding="ascii")
        w = RecordDumpWatcher(dump_file, received.append)
        w._init_position()
        append(dump_file, dump_line(b"new"))
        w._read_new_records()
        assert [e.text for e in received] == ["new"]


class TestStartStop:
    """Test thread lifecycle."""

    def test_start_and_stop(self, dump_file, received):
        w = RecordDumpWatcher(dump_file, received.append, poll_interval=0.01)
        w.start()
        w.stop()
        assert received == []
