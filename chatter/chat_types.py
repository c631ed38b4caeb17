"""Chat categories delivered by the host and their short labels."""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from types import MappingProxyType


class ChatType(IntEnum):
    NONE = 0
    DEBUG = 1
    URGENT = 2
    NOTICE = 3
    SAY = 10
    SHOUT = 11
    TELL_OUTGOING = 12
    TELL_INCOMING = 13
    PARTY = 14
    ALLIANCE = 15
    LS1 = 16
    LS2 = 17
    LS3 = 18
    LS4 = 19
    LS5 = 20
    LS6 = 21
    LS7 = 22
    LS8 = 23
    FREE_COMPANY = 24
    NOVICE_NETWORK = 27
    CUSTOM_EMOTE = 28
    STANDARD_EMOTE = 29
    YELL = 30
    CROSS_PARTY = 32
    PVP_TEAM = 36
    CROSS_LINKSHELL_1 = 37
    ECHO = 56
    SYSTEM_MESSAGE = 57
    SYSTEM_ERROR = 58
    GATHERING_SYSTEM_MESSAGE = 59
    ERROR_MESSAGE = 60
    NPC_DIALOGUE = 61
    NPC_DIALOGUE_ANNOUNCEMENTS = 68
    RETAINER_SALE = 71
    CROSS_LINKSHELL_2 = 101
    CROSS_LINKSHELL_3 = 102
    CROSS_LINKSHELL_4 = 103
    CROSS_LINKSHELL_5 = 104
    CROSS_LINKSHELL_6 = 105
    CROSS_LINKSHELL_7 = 106
    CROSS_LINKSHELL_8 = 107


# Slugs the host assigns to its chat types. Categories missing here have no name.
DEFAULT_TYPE_NAMES: Mapping[int, str] = MappingProxyType({
    ChatType.DEBUG: "debug",
    ChatType.URGENT: "urgent",
    ChatType.NOTICE: "notice",
    ChatType.SAY: "say",
    ChatType.SHOUT: "shout",
    ChatType.TELL_OUTGOING: "tell",
    ChatType.TELL_INCOMING: "tell",
    ChatType.PARTY: "party",
    ChatType.ALLIANCE: "alliance",
    ChatType.LS1: "ls1",
    ChatType.LS2: "ls2",
    ChatType.LS3: "ls3",
    ChatType.LS4: "ls4",
    ChatType.LS5: "ls5",
    ChatType.LS6: "ls6",
    ChatType.LS7: "ls7",
    ChatType.LS8: "ls8",
    ChatType.FREE_COMPANY: "fc",
    ChatType.NOVICE_NETWORK: "nn",
    ChatType.CUSTOM_EMOTE: "emote",
    ChatType.STANDARD_EMOTE: "emote",
    ChatType.YELL: "yell",
    ChatType.CROSS_PARTY: "party",
    ChatType.PVP_TEAM: "pvpteam",
    ChatType.CROSS_LINKSHELL_1: "cw1",
    ChatType.CROSS_LINKSHELL_2: "cw2",
    ChatType.CROSS_LINKSHELL_3: "cw3",
    ChatType.CROSS_LINKSHELL_4: "cw4",
    ChatType.CROSS_LINKSHELL_5: "cw5",
    ChatType.CROSS_LINKSHELL_6: "cw6",
    ChatType.CROSS_LINKSHELL_7: "cw7",
    ChatType.CROSS_LINKSHELL_8: "cw8",
    ChatType.ECHO: "echo",
    ChatType.SYSTEM_MESSAGE: "system",
    ChatType.SYSTEM_ERROR: "error",
})

# Our own names, these win over the host defaults
SHORT_NAME_OVERRIDES: Mapping[int, str] = MappingProxyType({
    ChatType.TELL_OUTGOING: "tellOut",
    ChatType.CUSTOM_EMOTE: "emote",
})

SUPPORTED_TYPES: frozenset[int] = frozenset({
    ChatType.ALLIANCE,
    ChatType.CROSS_LINKSHELL_1, ChatType.CROSS_LINKSHELL_2, ChatType.CROSS_LINKSHELL_3,
    ChatType.CROSS_LINKSHELL_4, ChatType.CROSS_LINKSHELL_5, ChatType.CROSS_LINKSHELL_6,
    ChatType.CROSS_LINKSHELL_7, ChatType.CROSS_LINKSHELL_8,
    ChatType.CROSS_PARTY, ChatType.CUSTOM_EMOTE, ChatType.ECHO, ChatType.FREE_COMPANY,
    ChatType.LS1, ChatType.LS2, ChatType.LS3, ChatType.LS4,
    ChatType.LS5, ChatType.LS6, ChatType.LS7, ChatType.LS8,
    ChatType.NOTICE, ChatType.NOVICE_NETWORK, ChatType.PARTY, ChatType.PVP_TEAM,
    ChatType.SAY, ChatType.SHOUT, ChatType.STANDARD_EMOTE, ChatType.SYSTEM_ERROR,
    ChatType.SYSTEM_MESSAGE, ChatType.TELL_INCOMING, ChatType.TELL_OUTGOING,
    ChatType.URGENT, ChatType.YELL,
})

# Codes we have looked at and never want, mostly system spam
IGNORED_TYPES: frozenset[int] = frozenset({
    72,    # Of the X parties currently recruiting...
    2091,  # You use Teleport.
    2092,  # You use a venture coffer.
    2105,  # You spent X gil.
    2110,  # You obtain XXX from a venture
    2219,  # You ready Teleport.
    2220,  # You ready a venture coffer.
    2622,  # You obtain dye.
    3129,  # You pay ventures.
    8236,  # Someone uses an item.
    8750,  # Someone gains the effect of Well Fed.
    ChatType.RETAINER_SALE,
})

# Enabled on every new log configuration
DEFAULT_ENABLED_TYPES: tuple[ChatType, ...] = (
    ChatType.SAY,
    ChatType.TELL_OUTGOING,
    ChatType.TELL_INCOMING,
    ChatType.SHOUT,
    ChatType.PARTY,
    ChatType.ALLIANCE,
    ChatType.LS1, ChatType.LS2, ChatType.LS3, ChatType.LS4,
    ChatType.LS5, ChatType.LS6, ChatType.LS7, ChatType.LS8,
    ChatType.FREE_COMPANY,
    ChatType.NOVICE_NETWORK,
    ChatType.CUSTOM_EMOTE,
    ChatType.STANDARD_EMOTE,
    ChatType.YELL,
    ChatType.CROSS_PARTY,
    ChatType.PVP_TEAM,
    ChatType.CROSS_LINKSHELL_1, ChatType.CROSS_LINKSHELL_2, ChatType.CROSS_LINKSHELL_3,
    ChatType.CROSS_LINKSHELL_4, ChatType.CROSS_LINKSHELL_5, ChatType.CROSS_LINKSHELL_6,
    ChatType.CROSS_LINKSHELL_7, ChatType.CROSS_LINKSHELL_8,
)


def type_to_key(code: int) -> str:
    """Stable configuration key for a chat type: the enum name, or the number."""
    try:
        return ChatType(code).name
    except ValueError:
        return str(code)


def type_from_key(key: str) -> int | None:
    """Inverse of type_to_key. Returns None for keys we cannot make sense of."""
    member = ChatType.__members__.get(key)
    if member is not None:
        return int(member)
    try:
        return int(key)
    except ValueError:
        return None


class ChatTypeHelper:
    """Maps chat type codes to the short labels written into the logs."""

    def __init__(self, default_names: Mapping[int, str] | None = None) -> None:
        self._default_names = DEFAULT_TYPE_NAMES if default_names is None else default_names

    def type_to_name(self, chat_type: int, show_unknown: bool = False) -> str:
        """Return the label for a chat type.

        The override table is checked first, then the host names. Unnamed types
        give "" or, when show_unknown is set, a placeholder like "?59?".
        """
        name = SHORT_NAME_OVERRIDES.get(chat_type)
        if name is not None:
            return name
        slug = self._default_names.get(chat_type, "")
        if slug and slug.strip():
            return slug
        return f"?{int(chat_type)}?" if show_unknown else ""
