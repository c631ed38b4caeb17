"""Tests for time-of-day parsing and the clock helper."""

from datetime import date, datetime, time

import pytest

from chatter.dates import DateHelper, format_time_of_day, parse_time_of_day


class TestParseTimeOfDay:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("6:00", time(6, 0)), ("06:45", time(6, 45)), ("23:59", time(23, 59)), (" 0:05 ", time(0, 5))],
    )
    def test_valid(self, text, expected):
        assert parse_time_of_day(text) == expected

    @pytest.mark.parametrize("text", [None, "", "6", "24:00", "6:60", "six:00", "6:5"])
    def test_invalid(self, text):
        assert parse_time_of_day(text) is None

    def test_format(self):
        assert format_time_of_day(time(6, 5)) == "6:05"


class TestDateHelper:
    def test_injected_clock(self):
        helper = DateHelper(lambda: datetime(2024, 3, 15, 23, 59))
        assert helper.now() == datetime(2024, 3, 15, 23, 59)
        assert helper.current_date() == date(2024, 3, 15)

    def test_default_clock_is_aware(self):
        assert DateHelper().now().tzinfo is not None
