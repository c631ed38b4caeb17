"""Single log channel writer: filtering, formatting, wrapping and file output."""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from chatter.dates import DEFAULT_DATETIME_FORMAT, DateHelper
from chatter.files import LOG_FILE_EXTENSION, EnsureCode, FileHelper
from chatter.text_utils import is_empty_or_whitespace, wrap_body

if TYPE_CHECKING:
    from chatter.config import ChatLogConfiguration
    from chatter.log_manager import LogFileInfo
    from chatter.message import ChatMessage
    from chatter.players import Myself

logger = logging.getLogger(__name__)

BANNER_RULE = "=" * 30


class LogKind(Enum):
    ALL = "all"
    GROUP = "group"
    EVENT = "event"


def kind_for(log_config: ChatLogConfiguration) -> LogKind:
    if log_config.is_all:
        return LogKind.ALL
    if log_config.is_event:
        return LogKind.EVENT
    return LogKind.GROUP


def default_format(kind: LogKind) -> str:
    """Template used when the log has no custom format.

    Slots: {0} and {1} label, {2} raw sender, {3} display sender,
    {4} "sender [label]", {5} first body line, {6} timestamp.
    """
    if kind is LogKind.ALL:
        return "{0}:{2}:{5}"
    return "{6:>22} {4:<30} {5}"


def should_log(
    kind: LogKind,
    log_config: ChatLogConfiguration,
    message: ChatMessage,
    myself: Myself,
    now: datetime,
) -> bool:
    """Decide whether a message goes into a log.

    Every log checks the active flag, the debug include-all flag, the label
    and the per-type flag. Group and event logs then require the sender to be
    one of their users (or the current player when include_me is set). Event
    logs finally reject, and deactivate, once the event is over.
    """
    if not log_config.is_active:
        return False
    if log_config.debug_include_all_messages:
        return True
    if is_empty_or_whitespace(message.type_label):
        return False
    if not log_config.chat_type_flags.get(message.chat_type, False):
        return False
    if kind is LogKind.ALL:
        return True

    if not log_config.include_all_users:
        full_sender = message.sender.as_text(True)
        if full_sender not in log_config.users and not (log_config.include_me and full_sender == myself.full_name):
            return False
    if kind is LogKind.GROUP:
        return True

    end = log_config.event_end
    if end is not None and now <= end:
        return True
    logger.info("Event for log %s is over, deactivating", log_config.name)
    log_config.is_active = False
    return False


def format_message(message: ChatMessage, sender: str, template: str, body: str, when: str) -> str:
    label = message.type_label
    return template.format(
        label,
        label,
        str(message.sender),
        sender,
        f"{sender} [{label}]",
        body,
        when,
    )


class ChatLog:
    """Writer for one configured log.

    The file is opened lazily on the first accepted line after a close. If the
    directory or file cannot be set up the log stops writing until the next
    close, which is when the manager rolls everything over.
    """

    def __init__(
        self,
        log_config: ChatLogConfiguration,
        kind: LogKind,
        file_helper: FileHelper,
        dates: DateHelper,
        myself: Myself,
    ) -> None:
        self._config = log_config
        self._kind = kind
        self._file_helper = file_helper
        self._dates = dates
        self._myself = myself
        self._stream: TextIO | None = None
        self._file_name = ""
        self._last_write: date | None = None
        self._failed = False

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def config(self) -> ChatLogConfiguration:
        return self._config

    @property
    def kind(self) -> LogKind:
        return self._kind

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    @property
    def file_name(self) -> str:
        return self._file_name

    def should_log(self, message: ChatMessage) -> bool:
        return should_log(self._kind, self._config, message, self._myself, self._dates.now())

    def log_info(self, message: ChatMessage, file_info: LogFileInfo) -> None:
        if not self.should_log(message):
            return
        sender = message.loggable_sender(self._config.include_server, self._config.users)
        body = message.loggable_body(self._config.include_server)
        self.write_log(message, sender, body, file_info)

    def write_log(self, message: ChatMessage, sender: str, body: str, file_info: LogFileInfo) -> None:
        """Format a message and append it, with continuation lines for wrapped text."""
        self._write_date_separator(file_info)
        parts = wrap_body(body, self._config.message_wrap_width)
        when = self._format_when(message.when)
        line = self._format(message, sender, parts[0], when)
        self._write_line(line, file_info)
        if self._config.message_wrap_indentation >= 0:
            indentation = self._config.message_wrap_indentation
        else:
            indentation = max(line.find(parts[0]), 0)
        padding = " " * indentation
        for part in parts[1:]:
            self._write_line(f"{padding}{part}", file_info)

    def close(self) -> None:
        if self._stream is not None:
            try:
                self._stream.close()
            except OSError as e:
                logger.warning("Error closing %s: %s", self._file_name, e)
            self._stream = None
            self._file_name = ""
        self._failed = False

    def dump_log(self, out: logging.Logger) -> None:
        out.info("%s", f"{self._config.name:<12}  {str(self.is_open):<5}  '{self._file_name}'")

    def _format(self, message: ChatMessage, sender: str, body: str, when: str) -> str:
        template = self._config.format or default_format(self._kind)
        try:
            return format_message(message, sender, template, body, when)
        except (IndexError, KeyError, ValueError) as e:
            logger.warning("Bad format %r for log %s: %s", template, self._config.name, e)
            return format_message(message, sender, default_format(self._kind), body, when)

    def _format_when(self, when: datetime) -> str:
        if self._config.datetime_format:
            return when.strftime(self._config.datetime_format)
        if self._kind is LogKind.ALL:
            return when.isoformat()
        return when.strftime(DEFAULT_DATETIME_FORMAT)

    def _write_date_separator(self, file_info: LogFileInfo) -> None:
        today = self._dates.current_date()
        if self._last_write is not None and today <= self._last_write:
            return
        self._last_write = today
        self._write_line(f"{BANNER_RULE} {today.isoformat()} {BANNER_RULE}", file_info)

    def _write_line(self, line: str, file_info: LogFileInfo) -> None:
        if self._failed:
            return
        self._open(file_info)
        if self._stream is None:
            return
        self._stream.write(line + "\n")
        self._stream.flush()

    def _open(self, file_info: LogFileInfo) -> None:
        if self._failed or self._stream is not None:
            return
        # Only used for names and directories, so the current time is fine if unset
        start = file_info.start_time or self._dates.now()

        code = self._file_helper.ensure_directory_exists(file_info.directory)
        if code is not EnsureCode.SUCCESS:
            logger.warning("Could not create logging directory '%s' because %s", file_info.directory, code.name)
            self._failed = True
            return

        directory = Path(file_info.directory)
        sub_directory = file_info.sub_directory_for(self._config.name, start)
        if sub_directory:
            directory = directory / sub_directory
            code = self._file_helper.ensure_directories_exist(directory)
            if code is not EnsureCode.SUCCESS:
                logger.warning("Could not create full logging directory '%s' because %s", directory, code.name)
                self._failed = True
                return

        name = file_info.file_name_for(self._config.name, start)
        self._file_name = self._file_helper.full_file_name(directory, name, LOG_FILE_EXTENSION)
        self._stream = self._file_helper.open_file(self._file_name, append=True)
        if self._stream is None:
            self._failed = True
            self._file_name = ""
            return
        logger.info("Opened log %s: %s", self._config.name, self._file_name)
