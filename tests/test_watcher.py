"""Tests for the event feed watcher (polling done by hand)."""

import time

import pytest

from chatter.watcher import EventFeedWatcher


@pytest.fixture
def feed(tmp_path):
    return tmp_path / "feed.jsonl"


@pytest.fixture
def lines():
    return []


def append(path, data: bytes):
    with open(path, "ab") as f:
        f.write(data)


class TestPoll:
    def test_missing_file(self, feed, lines):
        watcher = EventFeedWatcher(feed, lines.append)
        watcher.poll()
        assert lines == []

    def test_reads_new_lines(self, feed, lines):
        watcher = EventFeedWatcher(feed, lines.append)
        append(feed, b"one\ntwo\n")
        watcher.poll()
        append(feed, b"three\n")
        watcher.poll()
        assert lines == ["one", "two", "three"]

    def test_partial_line_waits(self, feed, lines):
        watcher = EventFeedWatcher(feed, lines.append)
        append(feed, b"hel")
        watcher.poll()
        assert lines == []
        append(feed, b"lo\n")
        watcher.poll()
        assert lines == ["hello"]

    def test_split_utf8_sequence(self, feed, lines):
        watcher = EventFeedWatcher(feed, lines.append)
        data = "привет\n".encode()
        append(feed, data[:3])
        watcher.poll()
        append(feed, data[3:])
        watcher.poll()
        assert lines == ["привет"]

    def test_blank_lines_skipped(self, feed, lines):
        watcher = EventFeedWatcher(feed, lines.append)
        append(feed, b"\n  \r\nx\r\n")
        watcher.poll()
        assert lines == ["x"]

    def test_truncation_restarts(self, feed, lines):
        watcher = EventFeedWatcher(feed, lines.append)
        append(feed, b"a long first line\n")
        watcher.poll()
        feed.write_bytes(b"new\n")
        watcher.poll()
        assert lines == ["a long first line", "new"]


class TestThread:
    def test_start_skips_existing_content(self, feed, lines):
        append(feed, b"old\n")
        watcher = EventFeedWatcher(feed, lines.append, poll_interval=0.01)
        watcher.start()
        try:
            append(feed, b"new\n")
            deadline = time.monotonic() + 5
            while not lines and time.monotonic() < deadline:
                time.sleep(0.01)
        finally:
            watcher.stop()
        assert lines == ["new"]
