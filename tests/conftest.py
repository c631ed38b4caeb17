"""Shared fixtures: a controllable clock and a chat message factory."""

from datetime import datetime, timedelta

import pytest

from chatter.chat_string import ChatString, PlayerItem, TextItem
from chatter.chat_types import ChatType
from chatter.dates import DateHelper
from chatter.files import FileHelper
from chatter.message import ChatMessage
from chatter.players import Myself


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 12, 0, 0))


@pytest.fixture
def dates(clock):
    return DateHelper(clock)


@pytest.fixture
def file_helper(tmp_path):
    return FileHelper(documents_path=tmp_path)


@pytest.fixture
def myself():
    return Myself("Bob Jones", "Zalera")


@pytest.fixture
def make_message(clock):
    """Build a ChatMessage from a player sender and a text body."""

    def _make(
        body: str = "This is the body.",
        name: str = "Wolf Gold",
        world: str = "Zalera",
        chat_type: int = ChatType.SAY,
        label: str = "say",
    ) -> ChatMessage:
        return ChatMessage(
            chat_type=int(chat_type),
            type_label=label,
            sender_id=0,
            sender=ChatString.from_item(PlayerItem(name, world)),
            body=ChatString.from_item(TextItem(body)),
            when=clock(),
        )

    return _make
