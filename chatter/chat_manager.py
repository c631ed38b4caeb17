"""Turns raw host chat events into ChatMessages for the log manager."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from chatter.chat_string import ChatString, Payload
from chatter.chat_types import IGNORED_TYPES, SUPPORTED_TYPES, ChatTypeHelper
from chatter.message import ChatMessage

if TYPE_CHECKING:
    from chatter.config import Configuration
    from chatter.dates import DateHelper
    from chatter.log_manager import ChatLogManager
    from chatter.players import Myself

logger = logging.getLogger(__name__)


class ChatManager:
    """Entry point for chat events delivered by the host."""

    def __init__(
        self,
        config: Configuration,
        log_manager: ChatLogManager,
        dates: DateHelper,
        myself: Myself,
        type_helper: ChatTypeHelper | None = None,
    ) -> None:
        self._config = config
        self._log_manager = log_manager
        self._dates = dates
        self._myself = myself
        self._type_helper = type_helper or ChatTypeHelper()
        self._alerted: set[int] = set()

    def update_configuration(self, config: Configuration) -> None:
        self._config = config

    def handle_chat_message(
        self,
        chat_type: int,
        sender_id: int,
        sender_payloads: Sequence[Payload],
        body_payloads: Sequence[Payload],
    ) -> bool:
        """Classify and log one chat event.

        Returns the host's "handled" flag. We never suppress the host's own
        display, so this is always False.
        """
        if chat_type in IGNORED_TYPES:
            return False
        body = ChatString.from_payloads(body_payloads)
        if chat_type not in SUPPORTED_TYPES and chat_type not in self._alerted:
            self._alerted.add(chat_type)
            logger.debug("Unsupported chat type %d: %r", chat_type, str(body))

        sender = self._clean_up_sender(ChatString.from_payloads(sender_payloads), body)
        label = self._type_helper.type_to_name(chat_type, self._config.is_debug)
        message = ChatMessage(chat_type, label, sender_id, sender, body, self._dates.now())
        self._log_manager.log_info(message)
        return False

    def _clean_up_sender(self, sender: ChatString, body: ChatString) -> ChatString:
        """Use the body's leading player when the sender has none.

        Emotes and some system lines arrive with the speaker only in the body.
        """
        if not sender.has_initial_player() and body.has_initial_player():
            return ChatString.from_item(body.get_initial_player_item(str(sender), self._myself.home_world))
        return sender
