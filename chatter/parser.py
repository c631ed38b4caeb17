"""Parser for the host bridge event feed.

The bridge appends one JSON object per line:

    {"event": "chat", "type": 10, "sender_id": 123,
     "sender": [{"kind": "player", "name": "Wolf Gold", "world": "Zalera"},
                {"kind": "text", "text": "Wolf Gold"}],
     "body": [{"kind": "text", "text": "This is the body."}]}
    {"event": "command", "command": "/chatterdebug", "args": "chatdump"}
    {"event": "player", "name": "Bob Jones", "world": "Zalera"}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Union

from chatter.chat_string import AutoTranslatePayload, Payload, PlayerPayload, TextPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChatEvent:
    """Raw chat event, payloads not yet folded into a ChatString."""

    chat_type: int
    sender_id: int
    sender: tuple[Payload, ...] = field(default_factory=tuple)
    body: tuple[Payload, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class CommandEvent:
    command: str
    args: str = ""


@dataclass(frozen=True, slots=True)
class PlayerEvent:
    """The logged-in player changed."""

    name: str
    world: str


FeedEvent = Union[ChatEvent, CommandEvent, PlayerEvent]


def parse_payload(data: dict[str, Any]) -> Payload | None:
    """Convert one payload object. Unknown kinds return None."""
    kind = data.get("kind")
    if kind == "text":
        return TextPayload(str(data.get("text", "")))
    if kind == "player":
        return PlayerPayload(str(data.get("name", "")), str(data.get("world", "")))
    if kind == "autotranslate":
        return AutoTranslatePayload(str(data.get("text", "")))
    return None


def _parse_payloads(items: Any) -> tuple[Payload, ...]:
    if items is None:
        return ()
    if isinstance(items, str):
        # Plain string shorthand
        return (TextPayload(items),)
    payloads = []
    for item in items:
        payload = parse_payload(item) if isinstance(item, dict) else None
        if payload is None:
            logger.debug("Skipping unknown payload: %r", item)
            continue
        payloads.append(payload)
    return tuple(payloads)


def parse_feed_line(line: str) -> FeedEvent | None:
    """Parse a single feed line.

    Returns None if the line is blank, not JSON, or not an event we know.
    """
    line = line.strip()
    if not line:
        return None
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        logger.warning("Cannot parse feed line (%s): %s", e, line[:150])
        return None
    if not isinstance(data, dict):
        logger.warning("Feed line is not an object: %s", line[:150])
        return None

    event = data.get("event")
    try:
        if event == "chat":
            return ChatEvent(
                chat_type=int(data["type"]),
                sender_id=int(data.get("sender_id", 0)),
                sender=_parse_payloads(data.get("sender")),
                body=_parse_payloads(data.get("body")),
            )
        if event == "command":
            return CommandEvent(str(data["command"]), str(data.get("args", "")))
        if event == "player":
            return PlayerEvent(str(data["name"]), str(data.get("world", "")))
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Malformed %s event (%s): %s", event, e, line[:150])
        return None

    logger.debug("Unknown feed event %r", event)
    return None
