"""Tests for turning host chat events into messages."""

import logging

import pytest

from chatter.chat_manager import ChatManager
from chatter.chat_string import AutoTranslatePayload, PlayerItem, PlayerPayload, TextPayload
from chatter.chat_types import ChatType
from chatter.config import Configuration


class RecordingLogManager:
    def __init__(self):
        self.messages = []

    def log_info(self, message):
        self.messages.append(message)


@pytest.fixture
def recorder():
    return RecordingLogManager()


@pytest.fixture
def chat_manager(recorder, dates, myself):
    return ChatManager(Configuration(), recorder, dates, myself)


class TestHandleChatMessage:
    def test_say_message(self, chat_manager, recorder, clock):
        handled = chat_manager.handle_chat_message(
            ChatType.SAY,
            1234,
            [PlayerPayload("Wolf Gold", "Zalera"), TextPayload("Wolf Gold")],
            [TextPayload("This is the body.")],
        )
        assert handled is False
        message = recorder.messages[0]
        assert message.type_label == "say"
        assert message.sender_id == 1234
        assert str(message.sender) == "Wolf Gold@Zalera"
        assert message.loggable_body(False) == "This is the body."
        assert message.when == clock()

    def test_ignored_type_dropped(self, chat_manager, recorder):
        chat_manager.handle_chat_message(2105, 0, [], [TextPayload("You spent 100 gil.")])
        assert recorder.messages == []

    def test_unsupported_type_reported_once(self, chat_manager, recorder, caplog):
        with caplog.at_level(logging.DEBUG, logger="chatter.chat_manager"):
            chat_manager.handle_chat_message(ChatType.GATHERING_SYSTEM_MESSAGE, 0, [], [TextPayload("a")])
            chat_manager.handle_chat_message(ChatType.GATHERING_SYSTEM_MESSAGE, 0, [], [TextPayload("b")])
        assert len([r for r in caplog.records if "Unsupported chat type" in r.getMessage()]) == 1
        assert len(recorder.messages) == 2
        assert recorder.messages[0].type_label == ""

    def test_unsupported_label_in_debug(self, recorder, dates, myself):
        manager = ChatManager(Configuration(is_debug=True), recorder, dates, myself)
        manager.handle_chat_message(ChatType.GATHERING_SYSTEM_MESSAGE, 0, [], [TextPayload("a")])
        assert recorder.messages[0].type_label == "?59?"

    def test_outgoing_tell_label(self, chat_manager, recorder):
        chat_manager.handle_chat_message(ChatType.TELL_OUTGOING, 0, [TextPayload("Bob Jones")], [TextPayload("hi")])
        assert recorder.messages[0].type_label == "tellOut"


class TestSenderCleanUp:
    def test_emote_sender_taken_from_body(self, chat_manager, recorder):
        chat_manager.handle_chat_message(
            ChatType.STANDARD_EMOTE,
            0,
            [],
            [PlayerPayload("Wolf Gold", "Zalera"), TextPayload("Wolf Gold"), TextPayload(" waves.")],
        )
        assert recorder.messages[0].sender.items == (PlayerItem("Wolf Gold", "Zalera"),)

    def test_player_sender_kept(self, chat_manager, recorder):
        chat_manager.handle_chat_message(
            ChatType.SAY,
            0,
            [PlayerPayload("Bob Jones", "Zalera")],
            [PlayerPayload("Wolf Gold", "Zalera"), AutoTranslatePayload("Hello!")],
        )
        assert str(recorder.messages[0].sender) == "Bob Jones@Zalera"

    def test_text_sender_without_body_player(self, chat_manager, recorder):
        chat_manager.handle_chat_message(ChatType.SHOUT, 0, [TextPayload("Someone")], [TextPayload("hey")])
        assert str(recorder.messages[0].sender) == "Someone"
