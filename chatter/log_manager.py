"""Owns the set of log writers and rolls them over together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import TYPE_CHECKING

from chatter.chat_log import ChatLog, kind_for
from chatter.config import DirectoryFormat, FileNameOrder
from chatter.dates import DEFAULT_TIME_TO_CLOSE, FILE_NAME_DATE_FORMAT, DateHelper
from chatter.files import FileHelper

if TYPE_CHECKING:
    from chatter.config import ChatLogConfiguration, Configuration
    from chatter.message import ChatMessage
    from chatter.players import Myself

logger = logging.getLogger(__name__)

DUMP_HEADER = "Prefix        Open   Path"
DUMP_RULE = "------------  -----  ----"


@dataclass
class LogFileInfo:
    """Rollover context shared by every writer of one manager."""

    directory: str = ""
    file_name_prefix: str = ""
    order: FileNameOrder = FileNameOrder.NONE
    directory_form: DirectoryFormat = DirectoryFormat.NONE
    time_to_close: time = DEFAULT_TIME_TO_CLOSE
    start_time: datetime | None = None

    def update_config_values(self, config: Configuration) -> bool:
        """Copy the file settings from config. True if any of them changed."""
        current = (
            config.log_directory,
            config.log_file_name_prefix,
            config.log_order,
            config.directory_form,
            config.time_to_close,
        )
        previous = (self.directory, self.file_name_prefix, self.order, self.directory_form, self.time_to_close)
        if current == previous:
            return False
        (
            self.directory,
            self.file_name_prefix,
            self.order,
            self.directory_form,
            self.time_to_close,
        ) = current
        return True

    @property
    def close_cutoff(self) -> datetime | None:
        """First time_to_close after start_time, None while nothing is open.

        The cutoff is a local wall-clock time, so an aware start is resolved
        through the local zone and a DST change in between does not shift it.
        """
        if self.start_time is None:
            return None
        aware = self.start_time.tzinfo is not None
        start = self.start_time.astimezone().replace(tzinfo=None) if aware else self.start_time
        cutoff = datetime.combine(start.date(), self.time_to_close)
        if cutoff <= start:
            cutoff += timedelta(days=1)
        return cutoff.astimezone() if aware else cutoff

    def file_name_for(self, group: str, start: datetime) -> str:
        stamp = start.strftime(FILE_NAME_DATE_FORMAT)
        if self.order is FileNameOrder.PREFIX_DATE_GROUP:
            return f"{self.file_name_prefix}-{stamp}-{group}"
        return f"{self.file_name_prefix}-{group}-{stamp}"

    def sub_directory_for(self, group: str, start: datetime) -> str:
        year_month = f"{start.year}/{start.month:02d}"
        form = self.directory_form
        if form is DirectoryFormat.GROUP:
            return group
        if form is DirectoryFormat.YEAR_MONTH:
            return year_month
        if form is DirectoryFormat.YEAR_MONTH_GROUP:
            return f"{year_month}/{group}"
        if form is DirectoryFormat.GROUP_YEAR_MONTH:
            return f"{group}/{year_month}"
        return ""


class ChatLogManager:
    """Dispatches each message to every configured log.

    Before dispatching it closes every open file if the file settings changed
    or the close time has passed, so all logs roll over together.
    """

    def __init__(
        self,
        config: Configuration,
        dates: DateHelper,
        file_helper: FileHelper,
        myself: Myself,
    ) -> None:
        self._config = config
        self._dates = dates
        self._file_helper = file_helper
        self._myself = myself
        self._file_info = LogFileInfo()
        self._logs: dict[str, ChatLog] = {}

    @property
    def file_info(self) -> LogFileInfo:
        return self._file_info

    @property
    def logs(self) -> dict[str, ChatLog]:
        return dict(self._logs)

    def __enter__(self) -> ChatLogManager:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def log_info(self, message: ChatMessage) -> None:
        """Send a message to every configured log. Each one applies its own filter."""
        if self._file_info.update_config_values(self._config):
            logger.info("Log file settings changed, closing logs")
            self._close_logs()
        now = self._dates.now()
        cutoff = self._file_info.close_cutoff
        if cutoff is not None and now > cutoff:
            logger.info("Passed close time %s, rolling over logs", cutoff.isoformat())
            self._close_logs()
        if self._file_info.start_time is None:
            self._file_info.start_time = now
        for log_config in list(self._config.chat_logs.values()):
            self._get_log(log_config).log_info(message, self._file_info)

    def update_configuration(self, config: Configuration) -> None:
        """Switch to a new configuration object, dropping every writer."""
        self._close_logs()
        self._logs.clear()
        self._config = config

    def dump_logs(self, out: logging.Logger) -> None:
        out.info(DUMP_HEADER)
        out.info(DUMP_RULE)
        for log in self._logs.values():
            log.dump_log(out)

    def close(self) -> None:
        self._close_logs()

    def _get_log(self, log_config: ChatLogConfiguration) -> ChatLog:
        log = self._logs.get(log_config.name)
        kind = kind_for(log_config)
        if log is not None and (log.config is not log_config or log.kind is not kind):
            log.close()
            log = None
        if log is None:
            log = ChatLog(log_config, kind, self._file_helper, self._dates, self._myself)
            self._logs[log_config.name] = log
        return log

    def _close_logs(self) -> None:
        for log in self._logs.values():
            log.close()
        self._file_info.start_time = None
