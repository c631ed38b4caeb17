"""Application configuration management."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, time, timedelta
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chatter.chat_types import DEFAULT_ENABLED_TYPES, ChatType, type_from_key, type_to_key
from chatter.dates import DEFAULT_TIME_TO_CLOSE, format_time_of_day, parse_time_of_day

if TYPE_CHECKING:
    from chatter.files import FileHelper

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
ALL_LOG_NAME = "all"


class FileNameOrder(Enum):
    NONE = 0  # same as PREFIX_GROUP_DATE
    PREFIX_GROUP_DATE = 1
    PREFIX_DATE_GROUP = 2


class DirectoryFormat(Enum):
    """Sub-directory layout under the log directory."""

    NONE = 0
    UNIFIED = 1
    GROUP = 2
    YEAR_MONTH = 3
    YEAR_MONTH_GROUP = 4
    GROUP_YEAR_MONTH = 5


def _enum_from(enum_cls: type[Enum], value: Any, default: Enum) -> Any:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str) and value in enum_cls.__members__:
        return enum_cls[value]
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Unknown %s value %r, using %s", enum_cls.__name__, value, default.name)
        return default


@dataclass
class ChatLogConfiguration:
    """Settings for one log channel."""

    name: str
    is_active: bool = False
    is_event: bool = False
    include_server: bool = False
    include_me: bool = True
    include_all_users: bool = False
    debug_include_all_messages: bool = False

    # Wrapping: width < 1 disables, negative indentation aligns under the body
    message_wrap_width: int = 0
    message_wrap_indentation: int = -1

    # Custom str.format template and strftime pattern, None for the defaults
    format: str | None = None
    datetime_format: str | None = None

    # Full name (Name@World) -> display name, blank keeps the original
    users: dict[str, str] = field(default_factory=dict)
    chat_type_flags: dict[int, bool] = field(default_factory=dict)

    event_start_time: datetime | None = None
    event_length_minutes: int = 0

    def __post_init__(self) -> None:
        self.initialize_type_flags()

    @property
    def is_all(self) -> bool:
        return self.name == ALL_LOG_NAME

    @property
    def title(self) -> str:
        return f"{self.name} (event)" if self.is_event else self.name

    @property
    def event_end(self) -> datetime | None:
        if self.event_start_time is None:
            return None
        return self.event_start_time + timedelta(minutes=self.event_length_minutes)

    def initialize_type_flags(self) -> None:
        """Turn on the default chat types that have no flag yet."""
        for chat_type in DEFAULT_ENABLED_TYPES:
            self.chat_type_flags.setdefault(int(chat_type), True)

    def sync_flags(self) -> None:
        """Outgoing tells follow incoming tells, custom emotes follow standard emotes."""
        self.chat_type_flags[int(ChatType.TELL_OUTGOING)] = self.chat_type_flags.get(
            int(ChatType.TELL_INCOMING), False
        )
        self.chat_type_flags[int(ChatType.CUSTOM_EMOTE)] = self.chat_type_flags.get(
            int(ChatType.STANDARD_EMOTE), False
        )

    def start_event(self, now: datetime, minutes: int) -> None:
        self.event_start_time = now
        self.event_length_minutes = minutes
        self.is_active = True
        logger.info("Event log %s started for %d minutes", self.name, minutes)

    def stop_event(self) -> None:
        self.is_active = False
        logger.info("Event log %s stopped", self.name)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["chat_type_flags"] = {type_to_key(code): value for code, value in self.chat_type_flags.items()}
        data["event_start_time"] = self.event_start_time.isoformat() if self.event_start_time else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatLogConfiguration:
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        flags: dict[int, bool] = {}
        for key, value in (values.pop("chat_type_flags", None) or {}).items():
            code = type_from_key(str(key))
            if code is None:
                logger.warning("Ignoring unknown chat type flag %r in log %s", key, data.get("name"))
                continue
            flags[code] = bool(value)
        start = values.pop("event_start_time", None)
        config = cls(**values, chat_type_flags=flags)
        if start:
            started = datetime.fromisoformat(start)
            # Hand-edited values may lack an offset, the clock is always aware
            if started.tzinfo is None:
                started = started.astimezone()
            config.event_start_time = started
        return config


@dataclass
class Configuration:
    """Application settings."""

    log_directory: str = ""
    log_file_name_prefix: str = "chatter"
    log_order: FileNameOrder = FileNameOrder.PREFIX_GROUP_DATE
    directory_form: DirectoryFormat = DirectoryFormat.NONE
    when_to_close_logs: str = ""
    chat_logs: dict[str, ChatLogConfiguration] = field(default_factory=dict)

    # Debug
    is_debug: bool = False

    version: int = 1

    @property
    def time_to_close(self) -> time:
        """Parsed when_to_close_logs, 06:00 when blank or invalid."""
        return parse_time_of_day(self.when_to_close_logs) or DEFAULT_TIME_TO_CLOSE

    def normalize_when_to_close(self) -> None:
        """Rewrite when_to_close_logs in canonical H:mm form."""
        self.when_to_close_logs = format_time_of_day(self.time_to_close)

    def initialize(self, file_helper: FileHelper) -> None:
        """Fill in defaults: log directory, the catch-all log, type flags."""
        if not self.log_directory.strip():
            self.log_directory = file_helper.initial_log_directory()
        all_log = self.chat_logs.get(ALL_LOG_NAME)
        if all_log is None:
            self.try_add_log(ChatLogConfiguration(ALL_LOG_NAME, is_active=True, include_all_users=True))
        else:
            all_log.include_all_users = True
        for log_config in self.chat_logs.values():
            log_config.initialize_type_flags()

    def try_add_log(self, log_config: ChatLogConfiguration) -> bool:
        """Add a log unless one with the same name exists."""
        if log_config.name in self.chat_logs:
            return False
        self.chat_logs[log_config.name] = log_config
        return True

    def add_log(self, log_config: ChatLogConfiguration) -> None:
        """Add or replace a log."""
        self.chat_logs[log_config.name] = log_config

    def remove_log(self, name: str) -> None:
        if name == ALL_LOG_NAME:
            logger.warning("The %s log cannot be removed", ALL_LOG_NAME)
            return
        self.chat_logs.pop(name, None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "log_directory": self.log_directory,
            "log_file_name_prefix": self.log_file_name_prefix,
            "log_order": self.log_order.name,
            "directory_form": self.directory_form.name,
            "when_to_close_logs": self.when_to_close_logs,
            "chat_logs": {name: log.to_dict() for name, log in self.chat_logs.items()},
            "is_debug": self.is_debug,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Configuration:
        defaults = cls()
        chat_logs: dict[str, ChatLogConfiguration] = {}
        for name, log_data in (data.get("chat_logs") or {}).items():
            log_data = {**log_data, "name": name}
            chat_logs[name] = ChatLogConfiguration.from_dict(log_data)
        return cls(
            log_directory=data.get("log_directory", defaults.log_directory),
            log_file_name_prefix=data.get("log_file_name_prefix", defaults.log_file_name_prefix),
            log_order=_enum_from(FileNameOrder, data.get("log_order", defaults.log_order), defaults.log_order),
            directory_form=_enum_from(
                DirectoryFormat, data.get("directory_form", defaults.directory_form), defaults.directory_form
            ),
            when_to_close_logs=data.get("when_to_close_logs", defaults.when_to_close_logs),
            chat_logs=chat_logs,
            is_debug=bool(data.get("is_debug", defaults.is_debug)),
            version=int(data.get("version", defaults.version)),
        )

    def save(self, path: str | Path = CONFIG_FILE) -> None:
        """Save config to JSON file."""
        Path(path).write_text(
            json.dumps(self.to_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    @classmethod
    def load(cls, path: str | Path = CONFIG_FILE) -> Configuration:
        """Load config from JSON file, using defaults for missing fields."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except FileNotFoundError:
            return cls()
        except json.JSONDecodeError as e:
            logger.error("Cannot parse configuration '%s': %s", path, e)
            return cls()
        try:
            return cls.from_dict(data)
        except (AttributeError, TypeError, ValueError) as e:
            logger.error("Invalid configuration '%s': %s", path, e)
            return cls()
