"""Chat logging pipeline: watcher -> parser -> chat manager / commands -> log files."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from chatter.chat_manager import ChatManager
from chatter.commands import COMMAND_DEBUG, DEBUG_CHAT_DUMP, CommandHandler
from chatter.config import Configuration
from chatter.dates import DateHelper
from chatter.files import FileHelper
from chatter.log_manager import ChatLogManager
from chatter.parser import ChatEvent, CommandEvent, PlayerEvent, parse_feed_line
from chatter.players import Myself
from chatter.watcher import EventFeedWatcher

logger = logging.getLogger(__name__)

DEFAULT_FEED_FILE = "chatter_feed.jsonl"


class ChatterPipeline:
    """Orchestrates the full logging pipeline.

    Flow: feed watcher -> line parser -> chat manager -> log manager -> files.
    Events arrive on the watcher thread. GUI calls take the same lock so the
    log manager only ever sees one caller at a time.
    """

    def __init__(
        self,
        config: Configuration,
        feed_path: Path = Path(DEFAULT_FEED_FILE),
        dates: DateHelper | None = None,
        file_helper: FileHelper | None = None,
        myself: Myself | None = None,
        open_settings: Callable[[], None] | None = None,
        on_debug_changed: Callable[[bool], None] | None = None,
    ) -> None:
        self._config = config
        self._lock = threading.Lock()
        self._dates = dates or DateHelper()
        self._file_helper = file_helper or FileHelper()
        self._myself = myself or Myself()

        self._log_manager = ChatLogManager(config, self._dates, self._file_helper, self._myself)
        self._chat_manager = ChatManager(config, self._log_manager, self._dates, self._myself)
        self._commands = CommandHandler(
            lambda: self._config, self._log_manager, open_settings, on_debug_changed
        )
        self._watcher = EventFeedWatcher(feed_path, self.process_line)

    @property
    def config(self) -> Configuration:
        return self._config

    @property
    def myself(self) -> Myself:
        return self._myself

    @property
    def log_manager(self) -> ChatLogManager:
        return self._log_manager

    def start(self) -> None:
        """Start watching the event feed."""
        self._watcher.start()
        logger.info("Pipeline started, feed %s", self._watcher.file_path)

    def stop(self) -> None:
        """Stop the watcher and close every open log."""
        self._watcher.stop()
        with self._lock:
            self._log_manager.close()
        logger.info("Pipeline stopped")

    def update_config(self, config: Configuration) -> None:
        """Hot-swap the configuration. Open logs are closed and reopen on the next message.

        Called from the main thread when the user saves settings.
        """
        with self._lock:
            self._config = config
            self._log_manager.update_configuration(config)
            self._chat_manager.update_configuration(config)
        logger.info("Configuration updated: %d logs", len(config.chat_logs))

    def dump_logs(self) -> None:
        self.run_command(COMMAND_DEBUG, DEBUG_CHAT_DUMP)

    def toggle_debug(self) -> bool:
        """Flip debug mode. Returns the new state."""
        self.run_command(COMMAND_DEBUG, "")
        return self._config.is_debug

    def run_command(self, command: str, args: str = "") -> bool:
        with self._lock:
            return self._commands.handle(command, args)

    def process_line(self, line: str) -> None:
        """Handle one feed line."""
        event = parse_feed_line(line)
        if event is None:
            return
        if isinstance(event, CommandEvent):
            if not self.run_command(event.command, event.args):
                logger.debug("Ignoring command %s", event.command)
            return
        with self._lock:
            if isinstance(event, PlayerEvent):
                self._myself.update(event.name, event.world)
            elif isinstance(event, ChatEvent):
                self._chat_manager.handle_chat_message(event.chat_type, event.sender_id, event.sender, event.body)
