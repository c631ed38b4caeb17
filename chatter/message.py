"""Normalized chat message passed to every log."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

from chatter.chat_string import ChatString


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One inbound chat event, classified and cleaned."""

    chat_type: int
    type_label: str
    sender_id: int
    sender: ChatString
    body: ChatString
    when: datetime

    def loggable_sender(self, include_world: bool, users: Mapping[str, str]) -> str:
        """Sender as it should appear in a log.

        The display override is looked up by the full Name@World string. A
        missing or blank override falls back to the rendered sender.
        """
        cleaned = self.sender.as_text(include_world)
        result = users.get(str(self.sender), cleaned)
        if not result or not result.strip():
            result = cleaned
        return result

    def loggable_body(self, include_world: bool) -> str:
        return self.body.as_text(include_world)
