"""Player identities."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Who am I?"
UNKNOWN_WORLD = "Where am I?"


@dataclass(frozen=True, slots=True)
class Player:
    name: str
    home_world: str

    @property
    def full_name(self) -> str:
        return f"{self.name}@{self.home_world}"


class Myself:
    """The logged-in player. Updated by the host bridge on login."""

    def __init__(self, name: str = "", home_world: str = "") -> None:
        self._name = name
        self._home_world = home_world

    @property
    def name(self) -> str:
        return self._name or UNKNOWN_NAME

    @property
    def home_world(self) -> str:
        return self._home_world or UNKNOWN_WORLD

    @property
    def full_name(self) -> str:
        return f"{self.name}@{self.home_world}"

    def update(self, name: str, home_world: str) -> None:
        if (name, home_world) != (self._name, self._home_world):
            logger.info("Current player: %s@%s", name, home_world)
        self._name = name
        self._home_world = home_world
