"""Slash commands: /chatter, /chattercfg and /chatterdebug."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chatter.config import Configuration
    from chatter.log_manager import ChatLogManager

logger = logging.getLogger(__name__)

COMMAND_CHATTER = "/chatter"
COMMAND_CHATTER_CONFIG = "/chattercfg"
COMMAND_DEBUG = "/chatterdebug"

DEBUG_CHAT_DUMP = "chatdump"
DEBUG_LIST = "list"

HELP = {
    COMMAND_CHATTER: "Opens the Chatter main window.",
    COMMAND_CHATTER_CONFIG: "Opens the Chatter configuration window.",
    COMMAND_DEBUG: "Executes debug commands",
}


class CommandHandler:
    """Routes slash commands. All output goes to the chatter.commands logger."""

    def __init__(
        self,
        get_config: Callable[[], Configuration],
        log_manager: ChatLogManager,
        open_settings: Callable[[], None] | None = None,
        on_debug_changed: Callable[[bool], None] | None = None,
    ) -> None:
        self._get_config = get_config
        self._log_manager = log_manager
        self._open_settings = open_settings
        self._on_debug_changed = on_debug_changed
        self._debug_flags: dict[str, Callable[[], bool]] = {
            "debug": lambda: self._get_config().is_debug,
        }

    @property
    def commands(self) -> tuple[str, ...]:
        return tuple(HELP)

    def handle(self, command: str, arguments: str = "") -> bool:
        """Run a command. Returns False if it is not one of ours."""
        command = command.strip().lower()
        if command in (COMMAND_CHATTER, COMMAND_CHATTER_CONFIG):
            if self._open_settings is not None:
                self._open_settings()
            return True
        if command == COMMAND_DEBUG:
            self._on_debug(arguments)
            return True
        return False

    def _on_debug(self, arguments: str) -> None:
        args = arguments.split()
        if not args:
            config = self._get_config()
            config.is_debug = not config.is_debug
            logger.info("Debug mode is %s", "on" if config.is_debug else "off")
            if self._on_debug_changed is not None:
                self._on_debug_changed(config.is_debug)
            logger.info("")
            logger.info("Sub-commands are: %s, %s", DEBUG_CHAT_DUMP, DEBUG_LIST)
            return
        sub_command = args[0].lower()
        if sub_command == DEBUG_CHAT_DUMP:
            self._log_manager.dump_logs(logger)
        elif sub_command == DEBUG_LIST:
            self._list_debug_flags()
        else:
            logger.info("Debug command not recognized: '%s'", sub_command)

    def _list_debug_flags(self) -> None:
        width = max(len(name) for name in self._debug_flags)
        logger.info("%s  on/off", "Flag".ljust(width))
        logger.info("%s  ------", "-" * width)
        for name, value in self._debug_flags.items():
            logger.info("%s  %s", name.ljust(width), "on" if value() else "off")
