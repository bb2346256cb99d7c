"""
Tests for WebSocket frame validation.
"""

import json

import pytest

from chatboard.exceptions import ErrorContext, ValidationError
from chatboard.realtime.message_validator import WebSocketMessageValidator
from chatboard.schemas.websocket_messages import (
    AuthenticateEvent,
    CreateBoardItemEvent,
    SendMessageEvent,
    UpdateBoardItemEvent,
)


class TestWebSocketMessageValidator:
    """Test suite for WebSocketMessageValidator."""

    def setup_method(self):
        """Set up test fixtures."""
        self.validator = WebSocketMessageValidator()

    def test_parse_authenticate(self):
        """Test that an authenticate frame becomes an AuthenticateEvent."""
        event = self.validator.parse('{"type": "authenticate", "data": {"token": "abc"}}')

        assert isinstance(event, AuthenticateEvent)
        assert event.data.token == "abc"

    def test_parse_without_data_uses_empty_payload(self):
        """Test that a frame without data still parses for kinds that need none."""
        event = self.validator.parse('{"type": "send_message"}')

        assert isinstance(event, SendMessageEvent)
        assert event.data.content is None

    def test_unknown_keys_are_ignored(self):
        """Test that extra payload keys do not fail validation."""
        event = self.validator.parse('{"type": "send_message", "data": {"content": "hi", "color": "red"}}')

        assert event.data.content == "hi"

    def test_create_board_item_column_optional(self):
        """Test that create_board_item accepts a missing or null column."""
        omitted = self.validator.parse('{"type": "create_board_item", "data": {"title": "t"}}')
        null = self.validator.parse('{"type": "create_board_item", "data": {"title": "t", "column": null}}')

        assert isinstance(omitted, CreateBoardItemEvent)
        assert isinstance(null, CreateBoardItemEvent)
        assert omitted.data.column is None
        assert null.data.column is None

    def test_update_tracks_sent_fields(self):
        """Test that the update payload records which fields were present."""
        event = self.validator.parse('{"type": "update_board_item", "data": {"id": 3, "assigned_to": null}}')

        assert isinstance(event, UpdateBoardItemEvent)
        assert event.data.model_fields_set == {"id", "assigned_to"}

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[1, 2, 3]",
            '"authenticate"',
            '{"data": {}}',
            '{"type": "shout", "data": {}}',
            '{"type": "delete_board_item", "data": {}}',
            '{"type": "delete_board_item", "data": {"id": "seven"}}',
            '{"type": "create_board_item", "data": {"title": "t", "column": "archive"}}',
        ],
    )
    def test_malformed_frames_rejected(self, raw):
        """Test that malformed or unknown frames raise a format error."""
        with pytest.raises(ValidationError) as exc_info:
            self.validator.parse(raw)

        assert exc_info.value.user_friendly == "Invalid message format"

    def test_oversized_frame_rejected(self):
        """Test that frames over the size limit are refused before parsing."""
        validator = WebSocketMessageValidator(max_message_size=64)
        raw = json.dumps({"type": "send_message", "data": {"content": "x" * 100}})

        with pytest.raises(ValidationError) as exc_info:
            validator.parse(raw)

        assert exc_info.value.user_friendly == "Message too large"
        assert exc_info.value.details["max_size"] == 64

    def test_size_counts_bytes_not_characters(self):
        """Test that multi-byte characters count by their encoded size."""
        validator = WebSocketMessageValidator(max_message_size=10)

        with pytest.raises(ValidationError):
            validator.validate_size("é" * 6)
        validator.validate_size("e" * 10)

    def test_deeply_nested_frame_rejected(self):
        """Test that excessive JSON nesting is refused."""
        nested: dict = {"leaf": 1}
        for _ in range(15):
            nested = {"n": nested}
        raw = json.dumps({"type": "send_message", "data": {"content": nested}})

        with pytest.raises(ValidationError):
            self.validator.parse(raw)

    def test_context_is_attached_to_errors(self):
        """Test that the caller's error context travels with the exception."""
        context = ErrorContext(session_id="s-1")

        with pytest.raises(ValidationError) as exc_info:
            self.validator.parse("{", context)

        assert exc_info.value.context.session_id == "s-1"
