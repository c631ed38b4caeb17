"""Tests for the event feed parser."""

import json
import logging

from chatter.chat_string import AutoTranslatePayload, PlayerPayload, TextPayload
from chatter.parser import ChatEvent, CommandEvent, PlayerEvent, parse_feed_line, parse_payload


class TestParseFeedLine:
    """Test parsing of each event kind."""

    def test_chat_event(self):
        line = json.dumps({
            "event": "chat",
            "type": 10,
            "sender_id": 42,
            "sender": [{"kind": "player", "name": "Wolf Gold", "world": "Zalera"}, {"kind": "text", "text": "Wolf Gold"}],
            "body": [{"kind": "text", "text": "This is the body."}],
        })
        event = parse_feed_line(line)
        assert event == ChatEvent(
            chat_type=10,
            sender_id=42,
            sender=(PlayerPayload("Wolf Gold", "Zalera"), TextPayload("Wolf Gold")),
            body=(TextPayload("This is the body."),),
        )

    def test_plain_string_body(self):
        event = parse_feed_line('{"event": "chat", "type": 10, "body": "hi"}')
        assert event.body == (TextPayload("hi"),)
        assert event.sender == ()
        assert event.sender_id == 0

    def test_command_event(self):
        event = parse_feed_line('{"event": "command", "command": "/chatterdebug", "args": "chatdump"}')
        assert event == CommandEvent("/chatterdebug", "chatdump")

    def test_player_event(self):
        assert parse_feed_line('{"event": "player", "name": "Bob Jones", "world": "Zalera"}') == PlayerEvent(
            "Bob Jones", "Zalera"
        )

    def test_blank_line(self):
        assert parse_feed_line("   ") is None


class TestMalformedLines:
    def test_not_json(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_feed_line("{oops") is None
        assert "Cannot parse feed line" in caplog.text

    def test_not_an_object(self):
        assert parse_feed_line("[1, 2]") is None

    def test_missing_type(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_feed_line('{"event": "chat"}') is None
        assert "Malformed chat event" in caplog.text

    def test_bad_type(self):
        assert parse_feed_line('{"event": "chat", "type": "say"}') is None

    def test_unknown_event(self):
        assert parse_feed_line('{"event": "dance"}') is None

    def test_unknown_payloads_skipped(self):
        event = parse_feed_line('{"event": "chat", "type": 10, "body": [{"kind": "icon"}, 5, {"kind": "text", "text": "x"}]}')
        assert event.body == (TextPayload("x"),)


class TestParsePayload:
    def test_autotranslate(self):
        assert parse_payload({"kind": "autotranslate", "text": "Hello!"}) == AutoTranslatePayload("Hello!")

    def test_unknown(self):
        assert parse_payload({"kind": "link"}) is None
