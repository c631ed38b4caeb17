"""Structured chat strings: ordered runs of player references and plain text.

The host hands us names and bodies as payload lists. A player payload is
followed by the name repeated as text and then the world name glued onto the
next text run. ChatString folds that back into clean segments.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Union

from chatter import special_chars

if TYPE_CHECKING:
    from chatter.players import Player


@dataclass(frozen=True, slots=True)
class TextPayload:
    """Plain text run from the host."""

    text: str


@dataclass(frozen=True, slots=True)
class PlayerPayload:
    """Player reference from the host."""

    name: str
    world: str


@dataclass(frozen=True, slots=True)
class AutoTranslatePayload:
    """Auto-translate phrase from the host, already resolved to text."""

    text: str


Payload = Union[TextPayload, PlayerPayload, AutoTranslatePayload]


@dataclass(frozen=True, slots=True)
class PlayerItem:
    name: str
    world: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", special_chars.clean(self.name))

    def as_text(self, include_world: bool) -> str:
        return f"{self.name}@{self.world}" if include_world else self.name

    def __str__(self) -> str:
        return f"{self.name}@{self.world}"


@dataclass(frozen=True, slots=True)
class TextItem:
    text: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", special_chars.replace(self.text))

    def as_text(self, include_world: bool) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


Item = Union[PlayerItem, TextItem]


class _NameState(Enum):
    NOTHING = auto()
    LOOKING_FOR_NAME = auto()
    LOOKING_FOR_WORLD = auto()


@dataclass(frozen=True)
class ChatString:
    """Immutable sequence of player and text segments."""

    items: tuple[Item, ...] = field(default_factory=tuple)

    @classmethod
    def from_payloads(cls, payloads: Iterable[Payload]) -> ChatString:
        """Build segments from a host payload list."""
        items: list[Item] = []
        state = _NameState.NOTHING
        player: PlayerItem | None = None

        for payload in payloads:
            if isinstance(payload, PlayerPayload):
                player = PlayerItem(payload.name, payload.world)
                items.append(player)
                state = _NameState.LOOKING_FOR_NAME
            elif isinstance(payload, AutoTranslatePayload):
                if payload.text and payload.text.strip():
                    items.append(TextItem(payload.text))
                state = _NameState.NOTHING
                player = None
            elif isinstance(payload, TextPayload):
                text = payload.text or ""
                if state is _NameState.LOOKING_FOR_NAME and player is not None:
                    state = _NameState.NOTHING
                    # endswith: the name can carry icon characters in front
                    if text == player.name or text.endswith(player.name):
                        state = _NameState.LOOKING_FOR_WORLD
                        continue
                elif state is _NameState.LOOKING_FOR_WORLD and player is not None:
                    state = _NameState.NOTHING
                    if text.startswith(player.world):
                        text = text[len(player.world):]
                    player = None
                if text.strip():
                    items.append(TextItem(text))

        return cls(tuple(items))

    @classmethod
    def from_item(cls, item: Item) -> ChatString:
        return cls((item,))

    @classmethod
    def from_player(cls, player: Player) -> ChatString:
        return cls.from_item(PlayerItem(player.name, player.home_world))

    @classmethod
    def from_text(cls, text: str) -> ChatString:
        return cls.from_item(TextItem(text))

    def has_initial_player(self) -> bool:
        return bool(self.items) and isinstance(self.items[0], PlayerItem)

    def get_initial_player_item(self, name: str, world: str) -> PlayerItem:
        """Leading player segment, or a new one built from name and world."""
        if self.has_initial_player():
            return self.items[0]  # type: ignore[return-value]
        return PlayerItem(name, world)

    def as_text(self, include_world: bool) -> str:
        return "".join(item.as_text(include_world) for item in self.items)

    def __str__(self) -> str:
        return "".join(str(item) for item in self.items)
