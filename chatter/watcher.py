"""File watcher for the host bridge event feed using polling.

The bridge appends to the feed in bursts, so we simply poll the file size
every POLL_INTERVAL seconds. The polling thread is the only thread that
delivers events to the log manager.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5  # seconds


class EventFeedWatcher:
    """Monitors the feed file for new lines by polling file size.

    Usage:
        watcher = EventFeedWatcher(Path("chatter_feed.jsonl"), handle_line)
        watcher.start()
        # ... later ...
        watcher.stop()
    """

    def __init__(
        self,
        file_path: Path,
        on_new_line: Callable[[str], None],
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self._file_path = file_path.resolve()
        self._on_new_line = on_new_line
        self._poll_interval = poll_interval
        self._position: int = 0
        self._pending = b""
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def file_path(self) -> Path:
        return self._file_path

    def start(self, from_end: bool = True) -> None:
        """Start polling. With from_end, lines already in the file are skipped."""
        if from_end:
            self._seek_to_end()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._poll_loop, name="chatter-feed", daemon=True)
        self._thread.start()
        logger.info("Watching (poll) %s", self._file_path)

    def stop(self) -> None:
        """Stop polling."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5)
        logger.info("Stopped watching")

    def poll(self) -> None:
        """Read whatever was appended since the last call."""
        self._read_new_lines()

    def _seek_to_end(self) -> None:
        """Move position to end of file so we only get new lines."""
        try:
            self._position = self._file_path.stat().st_size
        except FileNotFoundError:
            self._position = 0
        self._pending = b""

    def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            self._read_new_lines()
            self._stop_event.wait(self._poll_interval)

    def _read_new_lines(self) -> None:
        try:
            size = self._file_path.stat().st_size
        except FileNotFoundError:
            return

        # File was truncated or recreated, start over
        if size < self._position:
            logger.info("Feed truncated or recreated, resetting position")
            self._position = 0
            self._pending = b""

        if size == self._position:
            return

        try:
            with open(self._file_path, "rb") as f:
                f.seek(self._position)
                data = f.read()
                self._position = f.tell()
        except OSError as e:
            logger.warning("Cannot read event feed: %s", e)
            return

        chunks = (self._pending + data).split(b"\n")
        # Keep a trailing partial line until the bridge finishes writing it
        self._pending = chunks.pop()
        for chunk in chunks:
            stripped = chunk.decode("utf-8", errors="replace").strip()
            if stripped:
                self._on_new_line(stripped)
