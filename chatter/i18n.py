"""Internationalization: layered JSON message resources and plural messages.

Messages live in chatter/resources as messages.json (base), messages-ll.json
(language) and messages-ll-CC.json (regional). Later layers override earlier
ones. Each file looks like:

    {"messages": [{"key": "settings.title", "message": "Chatter Settings"}]}
"""

from __future__ import annotations

import json
import locale
import logging
from collections.abc import Callable
from pathlib import Path
from typing import ClassVar

logger = logging.getLogger(__name__)

RESOURCE_DIR = Path(__file__).parent / "resources"

MessageReader = Callable[[str], "str | None"]


def read_resource(name: str) -> str | None:
    """Default reader: load chatter/resources/<name>.json, None if missing."""
    path = RESOURCE_DIR / f"{name}.json"
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.error("Cannot read message resource '%s': %s", name, e)
        return None


def _system_locale() -> tuple[str, str]:
    tag = locale.getlocale()[0] or "en_US"
    language, _, country = tag.partition("_")
    return language.lower() or "en", country.upper() or "US"


def _parse_messages(name: str, text: str | None) -> dict[str, str]:
    if not text or not text.strip():
        return {}
    try:
        data = json.loads(text)
        return {str(m["key"]): str(m["message"]) for m in data.get("messages", [])}
    except (json.JSONDecodeError, AttributeError, KeyError, TypeError) as e:
        logger.error("Cannot parse JSON message resource: '%s': %s", name, e)
        return {}


class Loc:
    """Message catalog for one language and country."""

    def __init__(self, language: str | None = None, country: str | None = None) -> None:
        if language is None and country is None:
            language, country = _system_locale()
        if not language or not language.strip():
            raise ValueError("language cannot be empty")
        if not country or not country.strip():
            raise ValueError("country cannot be empty")
        self.language = language
        self.country = country
        self._messages: dict[str, str] = {}

    @property
    def language_tag(self) -> str:
        return f"{self.language}-{self.country}"

    def __len__(self) -> int:
        return len(self._messages)

    def load(self, reader: MessageReader | None = None) -> Loc:
        reader = reader or read_resource
        messages: dict[str, str] = {}
        for name in ("messages", f"messages-{self.language}", f"messages-{self.language_tag}"):
            messages.update(_parse_messages(name, reader(name)))
        self._messages = messages
        logger.debug("Loaded %d messages for %s", len(messages), self.language_tag)
        return self

    def message(self, key: str) -> str:
        message = self._messages.get(key)
        return f"??[[{key}]]??" if message is None else message

    def message_plural(self, key: str) -> PluralMessage:
        message = self._messages.get(key)
        if message is None:
            return PluralMessage.missing(key)
        return PluralMessage.parse(key, message, self)


class PluralMessage:
    """Chooses a message by count.

    The pattern is a comma separated list of value|key pairs, with * as the
    fallback: "1|logs.one,*|logs.many". The count is {0} in the chosen message.
    """

    def __init__(self, exact: dict[int, str], default: str) -> None:
        self._exact = exact
        self._default = default

    @classmethod
    def missing(cls, key: str) -> PluralMessage:
        return cls({}, f"??[[plural {{0}}: {key}]]??")

    @classmethod
    def parse(cls, key: str, pattern: str, loc: Loc) -> PluralMessage:
        exact: dict[int, str] = {}
        default: str | None = None
        for part in pattern.split(","):
            pieces = part.split("|")
            if len(pieces) != 2:
                logger.error("Invalid plural pattern for %s: '%s'", key, part)
                default = loc.message(pieces[-1].strip())
                continue
            value, message_key = pieces[0].strip(), pieces[1].strip()
            if value == "*":
                default = loc.message(message_key)
                continue
            try:
                exact[int(value)] = loc.message(message_key)
            except ValueError:
                logger.error("Pattern match value must be a valid integer: '%s'", value)
        if default is None:
            logger.error("Missing default pattern for key %s", key)
            default = f"Missing default pattern for key {key}"
        return cls(exact, default)

    def format(self, count: int, *args: object) -> str:
        return self._exact.get(count, self._default).format(count, *args)


class tr:
    """Simple translation helper. Call tr("key") to get localized string."""

    _loc: ClassVar[Loc | None] = None

    @classmethod
    def set_language(cls, language: str | None = None, country: str | None = None) -> None:
        cls._loc = Loc(language, country or "US").load() if language else Loc().load()

    @classmethod
    def loc(cls) -> Loc:
        if cls._loc is None:
            cls._loc = Loc("en", "US").load()
        return cls._loc

    @classmethod
    def plural(cls, key: str, count: int, *args: object) -> str:
        return cls.loc().message_plural(key).format(count, *args)

    def __new__(cls, key: str, **kwargs: object) -> str:  # type: ignore[misc]
        text = cls.loc().message(key)
        if kwargs:
            text = text.format(**kwargs)
        return text
