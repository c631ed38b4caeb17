"""Tests for dispatch and rollover of the log manager."""

import logging
import time as systime
from datetime import datetime, time, timedelta, timezone

import pytest

from chatter.config import ChatLogConfiguration, Configuration, DirectoryFormat, FileNameOrder
from chatter.log_manager import DUMP_HEADER, DUMP_RULE, ChatLogManager, LogFileInfo

BANNER = "=" * 30 + " 2024-03-15 " + "=" * 30


@pytest.fixture
def config(tmp_path, file_helper):
    c = Configuration(log_directory=str(tmp_path / "logs"))
    c.initialize(file_helper)
    return c


@pytest.fixture
def manager(config, dates, file_helper, myself):
    with ChatLogManager(config, dates, file_helper, myself) as m:
        yield m


def log_files(tmp_path):
    return sorted(p.name for p in (tmp_path / "logs").rglob("*.log"))


class TestEndToEnd:
    def test_catch_all_log(self, manager, make_message, tmp_path):
        manager.log_info(make_message())
        path = tmp_path / "logs" / "chatter-all-20240315-120000.log"
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == BANNER
        assert lines[1] == "say:Wolf Gold@Zalera:This is the body."

    def test_every_log_filters_independently(self, manager, config, make_message, tmp_path):
        config.add_log(ChatLogConfiguration("friends", is_active=True, users={"Bob Jones@Zalera": ""}))
        manager.log_info(make_message())
        assert log_files(tmp_path) == ["chatter-all-20240315-120000.log"]
        manager.log_info(make_message(name="Bob Jones"))
        assert log_files(tmp_path) == ["chatter-all-20240315-120000.log", "chatter-friends-20240315-120000.log"]

    def test_prefix_date_group_order(self, manager, config, make_message, tmp_path):
        config.log_order = FileNameOrder.PREFIX_DATE_GROUP
        manager.log_info(make_message())
        assert log_files(tmp_path) == ["chatter-20240315-120000-all.log"]


class TestRollover:
    """Test that logs close together and reopen under new names."""

    def test_prefix_change_closes_logs(self, manager, config, make_message, clock, tmp_path):
        manager.log_info(make_message())
        first = manager.logs["all"].file_name
        config.log_file_name_prefix = "renamed"
        clock.advance(minutes=5)
        manager.log_info(make_message())
        second = manager.logs["all"].file_name
        assert first != second
        assert log_files(tmp_path) == ["chatter-all-20240315-120000.log", "renamed-all-20240315-120500.log"]

    def test_directory_change_closes_logs(self, manager, config, make_message, tmp_path):
        manager.log_info(make_message())
        config.log_directory = str(tmp_path / "other")
        manager.log_info(make_message())
        assert manager.logs["all"].file_name.startswith(str(tmp_path / "other"))

    def test_order_change_closes_logs(self, manager, config, make_message, clock, tmp_path):
        manager.log_info(make_message())
        log = manager.logs["all"]
        stream = log._stream
        config.log_order = FileNameOrder.PREFIX_DATE_GROUP
        clock.advance(minutes=5)
        manager.log_info(make_message())
        assert stream.closed
        assert log.file_name.endswith("chatter-20240315-120500-all.log")
        assert log_files(tmp_path) == ["chatter-20240315-120500-all.log", "chatter-all-20240315-120000.log"]

    def test_close_time_change_closes_logs(self, manager, config, make_message, clock, tmp_path):
        manager.log_info(make_message())
        log = manager.logs["all"]
        stream = log._stream
        config.when_to_close_logs = "7:30"
        clock.advance(minutes=5)
        manager.log_info(make_message())
        assert stream.closed
        assert manager.file_info.time_to_close == time(7, 30)
        assert log.file_name.endswith("chatter-all-20240315-120500.log")
        assert log_files(tmp_path) == ["chatter-all-20240315-120000.log", "chatter-all-20240315-120500.log"]

    def test_same_config_keeps_file(self, manager, make_message, clock):
        manager.log_info(make_message())
        first = manager.logs["all"].file_name
        clock.advance(hours=3)
        manager.log_info(make_message())
        assert manager.logs["all"].file_name == first

    def test_close_time_rolls_over(self, manager, make_message, clock, tmp_path):
        manager.log_info(make_message())
        clock.now = datetime(2024, 3, 16, 5, 59)
        manager.log_info(make_message())
        assert log_files(tmp_path) == ["chatter-all-20240315-120000.log"]
        clock.now = datetime(2024, 3, 16, 6, 1)
        manager.log_info(make_message())
        assert log_files(tmp_path) == ["chatter-all-20240315-120000.log", "chatter-all-20240316-060100.log"]

    def test_close_resets_start_time(self, manager, make_message):
        manager.log_info(make_message())
        assert manager.file_info.start_time is not None
        manager.close()
        assert manager.file_info.start_time is None
        assert not manager.logs["all"].is_open

    def test_update_configuration_drops_writers(self, manager, make_message, tmp_path, file_helper):
        manager.log_info(make_message())
        new_config = Configuration(log_directory=str(tmp_path / "logs"), log_file_name_prefix="new")
        new_config.initialize(file_helper)
        manager.update_configuration(new_config)
        assert manager.logs == {}
        manager.log_info(make_message())
        assert manager.logs["all"].file_name.endswith("new-all-20240315-120000.log")


class TestDump:
    def test_dump_table(self, manager, make_message, caplog):
        manager.log_info(make_message())
        out = logging.getLogger("test.dump")
        with caplog.at_level(logging.INFO, logger="test.dump"):
            manager.dump_logs(out)
        messages = [r.getMessage() for r in caplog.records if r.name == "test.dump"]
        assert messages[0] == DUMP_HEADER
        assert messages[1] == DUMP_RULE
        assert messages[2].startswith("all          ")
        assert "True" in messages[2]

    def test_dump_after_change_shows_closed(self, manager, config, make_message, caplog):
        config.add_log(ChatLogConfiguration("friends", is_active=True, users={"Nobody@Nowhere": ""}))
        manager.log_info(make_message())
        out = logging.getLogger("test.dump")
        with caplog.at_level(logging.INFO, logger="test.dump"):
            manager.dump_logs(out)
        rows = [r.getMessage() for r in caplog.records if r.name == "test.dump"][2:]
        assert rows[1] == "friends" + " " * 5 + "  False  ''"


class TestLogFileInfo:
    def test_update_config_values(self):
        info = LogFileInfo()
        config = Configuration(log_directory="/logs", log_file_name_prefix="p")
        assert info.update_config_values(config)
        assert not info.update_config_values(config)
        config.when_to_close_logs = "7:30"
        assert info.update_config_values(config)
        assert info.time_to_close == time(7, 30)

    def test_close_cutoff_same_day(self):
        info = LogFileInfo(start_time=datetime(2024, 3, 15, 3, 0))
        assert info.close_cutoff == datetime(2024, 3, 15, 6, 0)

    def test_close_cutoff_next_day(self):
        info = LogFileInfo(start_time=datetime(2024, 3, 15, 6, 0))
        assert info.close_cutoff == datetime(2024, 3, 16, 6, 0)

    @pytest.mark.skipif(not hasattr(systime, "tzset"), reason="needs time.tzset")
    def test_close_cutoff_keeps_wall_time_across_dst(self, monkeypatch):
        # US eastern time springs forward at 02:00 on 2024-03-10
        monkeypatch.setenv("TZ", "EST5EDT,M3.2.0,M11.1.0")
        systime.tzset()
        try:
            info = LogFileInfo(start_time=datetime(2024, 3, 9, 12, 0, tzinfo=timezone(timedelta(hours=-5))))
            cutoff = info.close_cutoff
            assert cutoff == datetime(2024, 3, 10, 10, 0, tzinfo=timezone.utc)
            assert cutoff.utcoffset() == timedelta(hours=-4)
        finally:
            monkeypatch.undo()
            systime.tzset()

    def test_no_cutoff_when_closed(self):
        assert LogFileInfo().close_cutoff is None

    @pytest.mark.parametrize(
        ("form", "expected"),
        [
            (DirectoryFormat.NONE, ""),
            (DirectoryFormat.UNIFIED, ""),
            (DirectoryFormat.GROUP, "raid"),
            (DirectoryFormat.YEAR_MONTH, "2024/03"),
            (DirectoryFormat.YEAR_MONTH_GROUP, "2024/03/raid"),
            (DirectoryFormat.GROUP_YEAR_MONTH, "raid/2024/03"),
        ],
    )
    def test_sub_directory(self, form, expected):
        info = LogFileInfo(directory_form=form)
        assert info.sub_directory_for("raid", datetime(2024, 3, 15)) == expected
