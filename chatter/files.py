"""File system helpers for the log writers."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)

LOG_FILE_EXTENSION = ".log"
DEFAULT_DIRECTORY = "FFXIV Chatter"

# Largest counter tried before giving up on a unique name
MAX_NAME_COUNTER = 2**31 - 1


class EnsureCode(Enum):
    """Result of FileHelper.ensure_directory_exists."""

    SUCCESS = 0
    FILE_EXISTS = 1  # the path is a regular file
    PARENT_DOES_NOT_EXIST = 2
    SYSTEM_ERROR = 3


class FileHelper:
    """Directory checks, unique file names and opening log streams."""

    def __init__(self, documents_path: Path | None = None) -> None:
        self._documents_path = documents_path

    @property
    def documents_path(self) -> Path:
        return self._documents_path or Path.home() / "Documents"

    def initial_log_directory(self) -> str:
        """Where logs go before the user picks a directory."""
        return str(self.documents_path / DEFAULT_DIRECTORY)

    def ensure_directory_exists(self, directory: str | Path) -> EnsureCode:
        """Create the directory if missing.

        Only the last component is created. If the parent is missing too this
        fails with PARENT_DOES_NOT_EXIST.
        """
        path = Path(directory)
        if path.is_dir():
            return EnsureCode.SUCCESS
        if path.exists():
            return EnsureCode.FILE_EXISTS
        if not path.parent.is_dir():
            return EnsureCode.PARENT_DOES_NOT_EXIST
        try:
            path.mkdir()
        except OSError as e:
            logger.warning("Cannot create directory %s: %s", path, e)
            return EnsureCode.SYSTEM_ERROR
        return EnsureCode.SUCCESS

    def ensure_directories_exist(self, directory: str | Path) -> EnsureCode:
        """Create the directory and every missing parent."""
        path = Path(directory)
        if path.is_dir():
            return EnsureCode.SUCCESS
        if path.exists():
            return EnsureCode.FILE_EXISTS
        try:
            path.mkdir(parents=True, exist_ok=True)
        except FileExistsError:
            return EnsureCode.FILE_EXISTS
        except OSError as e:
            logger.warning("Cannot create directories %s: %s", path, e)
            return EnsureCode.SYSTEM_ERROR
        return EnsureCode.SUCCESS

    def full_file_name(self, directory: str | Path, name: str, extension: str = LOG_FILE_EXTENSION) -> str:
        """Return a path in directory that does not exist yet.

        Tries name first, then name-1, name-2, ... Raises IndexError if every
        counter value is taken.
        """
        base = Path(directory)
        candidate = base / f"{name}{extension}"
        if not candidate.exists():
            return str(candidate)
        for i in range(1, MAX_NAME_COUNTER):
            candidate = base / f"{name}-{i}{extension}"
            if not candidate.exists():
                return str(candidate)
        raise IndexError(f"More than {MAX_NAME_COUNTER} log files named {name} in {base}")

    def open_file(self, path: str | Path, append: bool = True) -> TextIO | None:
        """Open a UTF-8 text stream. Returns None if the file cannot be opened."""
        try:
            return open(path, "a" if append else "w", encoding="utf-8")  # noqa: SIM115
        except OSError as e:
            logger.warning("Cannot open log file %s: %s", path, e)
            return None
