"""Handling for the game's private-use-area characters.

The Unicode block U+E000..U+F8FF is reserved for applications. The game puts
its icons and markers there, so outside the game they render as garbage. We
swap the ones we know for reasonable Unicode look-alikes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

logger = logging.getLogger(__name__)

_SPECIAL_FIRST = "\ue000"
_SPECIAL_LAST = "\uf8ff"

_SPECIAL_CHARACTER_MAP: Mapping[str, str] = MappingProxyType({
    "\ue03c": "❇",  # Flower separator between names and worlds
    "\ue03d": "▣",  # Box
    "\ue040": "[",  # Open double arrow around auto-translate words
    "\ue041": "]",  # Close double arrow around auto-translate words
    "\ue049": "○",  # Controller circle button
    "\ue04a": "◻",  # Controller square button
    "\ue04b": "✖",  # Controller x button
    "\ue04c": "➕",  # Controller triangle button
    "\ue04d": "△",  # Controller + button
    "\ue05b": "⛨",  # Cross on shield
    "\ue05c": "⌂",  # House
    "\ue05d": "✿",  # Flower
    "\ue05e": "\U0001f441",  # Eye
    "\ue06d": "㏂",  # AM
    "\ue06e": "㏘",  # PM
    "\ue06f": "\U0001f816",  # Arrow right
    # Boxed letters A-Z
    **{chr(0xE071 + i): chr(0x24B6 + i) for i in range(26)},
    "\ue08f": "⓪",  # Number 0
    # Circled numbers 1-20
    **{chr(0xE090 + i): chr(0x2460 + i) for i in range(20)},
    "\ue0af": "⨁",  # Plus in filled square
    # Filled circles 1-9
    **{chr(0xE0B1 + i): chr(0x2776 + i) for i in range(9)},
    "\ue0bb": "ʢ",  # Filled arrow in front of links
    "\ue0bc": "⌽",  # Swoop in square
    "\ue0bd": "⧳",  # Swoop in filled square
    "\ue0be": "⬇",  # Down arrow in filled square
    "\ue0bf": "❎",  # X in filled square rotated
    "\ue0c0": "✪",  # Star in filled square
    # Roman numerals I-VI
    **{chr(0xE0C1 + i): chr(0x2160 + i) for i in range(6)},
})

_reported: set[str] = set()


def is_special(ch: str) -> bool:
    """True if the character sits in the private-use area."""
    return _SPECIAL_FIRST <= ch <= _SPECIAL_LAST


def clean(text: str) -> str:
    """Drop every special character. Used for player names."""
    return "".join(ch for ch in text if not is_special(ch))


def replace(text: str) -> str:
    """Swap known special characters for readable ones, keep the rest as-is."""
    return "".join(_replacement(ch) for ch in text)


def _replacement(ch: str) -> str:
    mapped = _SPECIAL_CHARACTER_MAP.get(ch)
    if mapped is not None:
        return mapped
    if is_special(ch) and ch not in _reported:
        _reported.add(ch)
        logger.debug("Unhandled special character: (\\u%04X)", ord(ch))
    return ch
