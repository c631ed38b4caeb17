"""Tests for directory checks and unique log file names."""

import pytest

from chatter.files import EnsureCode, FileHelper


@pytest.fixture
def helper(tmp_path):
    return FileHelper(documents_path=tmp_path)


class TestEnsureDirectoryExists:
    def test_existing(self, helper, tmp_path):
        assert helper.ensure_directory_exists(tmp_path) is EnsureCode.SUCCESS

    def test_creates_leaf(self, helper, tmp_path):
        assert helper.ensure_directory_exists(tmp_path / "logs") is EnsureCode.SUCCESS
        assert (tmp_path / "logs").is_dir()

    def test_missing_parent(self, helper, tmp_path):
        assert helper.ensure_directory_exists(tmp_path / "a" / "b") is EnsureCode.PARENT_DOES_NOT_EXIST
        assert not (tmp_path / "a").exists()

    def test_path_is_file(self, helper, tmp_path):
        (tmp_path / "f").write_text("x", encoding="utf-8")
        assert helper.ensure_directory_exists(tmp_path / "f") is EnsureCode.FILE_EXISTS


class TestEnsureDirectoriesExist:
    def test_creates_all(self, helper, tmp_path):
        assert helper.ensure_directories_exist(tmp_path / "a" / "b" / "c") is EnsureCode.SUCCESS
        assert (tmp_path / "a" / "b" / "c").is_dir()

    def test_file_in_the_way(self, helper, tmp_path):
        (tmp_path / "f").write_text("x", encoding="utf-8")
        assert helper.ensure_directories_exist(tmp_path / "f") is EnsureCode.FILE_EXISTS


class TestFullFileName:
    def test_unused_name(self, helper, tmp_path):
        assert helper.full_file_name(tmp_path, "log") == str(tmp_path / "log.log")

    def test_counter_appended(self, helper, tmp_path):
        (tmp_path / "log.log").touch()
        (tmp_path / "log-1.log").touch()
        assert helper.full_file_name(tmp_path, "log") == str(tmp_path / "log-2.log")

    def test_custom_extension(self, helper, tmp_path):
        assert helper.full_file_name(tmp_path, "log", ".txt") == str(tmp_path / "log.txt")

    def test_counter_exhausted(self, helper, tmp_path, monkeypatch):
        monkeypatch.setattr("chatter.files.MAX_NAME_COUNTER", 3)
        for name in ("log.log", "log-1.log", "log-2.log"):
            (tmp_path / name).touch()
        with pytest.raises(IndexError):
            helper.full_file_name(tmp_path, "log")


class TestOpenFile:
    def test_append(self, helper, tmp_path):
        path = tmp_path / "out.log"
        path.write_text("one\n", encoding="utf-8")
        with helper.open_file(path) as f:
            f.write("two\n")
        assert path.read_text(encoding="utf-8") == "one\ntwo\n"

    def test_failure_returns_none(self, helper, tmp_path):
        assert helper.open_file(tmp_path) is None

    def test_initial_directory(self, helper, tmp_path):
        assert helper.initial_log_directory() == str(tmp_path / "FFXIV Chatter")
