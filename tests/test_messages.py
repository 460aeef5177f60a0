"""Tests for wire message parsing and serialization."""

import json

import pytest
from pydantic import ValidationError

from roomrelay.models import (
    ChatEvent,
    ChatRequest,
    ErrorNotice,
    History,
    ImageEvent,
    ImageRequest,
    Joined,
    JoinRequest,
    SystemNotice,
    parse_inbound,
)


class TestParseInbound:
    def test_chat(self) -> None:
        message = parse_inbound('{"type": "chat", "message": "hi", "code": "1234"}')
        assert isinstance(message, ChatRequest)
        assert message.message == "hi"
        assert message.code == "1234"

    def test_image(self) -> None:
        message = parse_inbound(b'{"type": "image", "image": "data:image/png;base64,AAAA"}')
        assert isinstance(message, ImageRequest)
        assert message.image.startswith("data:")
        assert message.code is None

    def test_join_with_camel_case_identity(self) -> None:
        message = parse_inbound('{"type": "join", "code": "1234", "userId": "u1"}')
        assert isinstance(message, JoinRequest)
        assert message.user_id == "u1"

    def test_extra_keys_are_ignored(self) -> None:
        message = parse_inbound('{"type": "chat", "message": "hi", "color": "red"}')
        assert isinstance(message, ChatRequest)

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "",
            "[]",
            '"chat"',
            "{}",
            '{"type": "dance"}',
            '{"type": "joined", "code": "1234"}',
            '{"type": "chat"}',
            '{"type": "chat", "message": ""}',
            '{"type": "chat", "message": 42}',
            '{"type": "chat", "message": null}',
            '{"type": "image", "image": ""}',
            '{"type": "image"}',
            b"\xff\xfe\x00",
        ],
    )
    def test_malformed_frames_raise(self, raw: str | bytes) -> None:
        with pytest.raises(ValidationError):
            parse_inbound(raw)


class TestOutbound:
    def test_chat_event_uses_camel_case(self) -> None:
        event = ChatEvent(code="4821", user_id="u1", message="hi", ts=1_700_000_000_000)
        assert json.loads(event.to_json()) == {
            "type": "chat",
            "code": "4821",
            "userId": "u1",
            "message": "hi",
            "ts": 1_700_000_000_000,
        }

    def test_history_keeps_event_order_and_kind(self) -> None:
        history = History(
            messages=[
                ChatEvent(code="4821", user_id="u1", message="one", ts=1),
                ImageEvent(code="4821", user_id="u2", image="AAAA", ts=2),
            ]
        )
        payload = json.loads(history.to_json())
        assert payload["type"] == "history"
        assert [m["type"] for m in payload["messages"]] == ["chat", "image"]
        assert payload["messages"][1]["userId"] == "u2"

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            (Joined(code="0042"), {"type": "joined", "code": "0042"}),
            (
                SystemNotice(message="User u1 joined", ts=5),
                {"type": "system", "message": "User u1 joined", "ts": 5},
            ),
            (ErrorNotice(message="Room is full"), {"type": "error", "message": "Room is full"}),
        ],
    )
    def test_control_frames(self, message, expected) -> None:
        assert json.loads(message.to_json()) == expected
