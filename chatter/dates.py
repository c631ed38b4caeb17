"""Clock access and time-of-day helpers."""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, datetime, time

DEFAULT_TIME_TO_CLOSE = time(6, 0)
FILE_NAME_DATE_FORMAT = "%Y%m%d-%H%M%S"
DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_RE_TIME_OF_DAY = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def _local_now() -> datetime:
    return datetime.now().astimezone()


class DateHelper:
    """Source of the current time. Tests pass their own clock."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _local_now

    def now(self) -> datetime:
        return self._clock()

    def current_date(self) -> date:
        return self.now().date()


def parse_time_of_day(text: str | None) -> time | None:
    """Parse an H:mm string. Returns None when it is blank or invalid."""
    if not text:
        return None
    m = _RE_TIME_OF_DAY.match(text)
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def format_time_of_day(value: time) -> str:
    """Inverse of parse_time_of_day."""
    return f"{value.hour}:{value.minute:02d}"
