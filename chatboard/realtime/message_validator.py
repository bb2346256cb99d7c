"""
WebSocket frame validation for ChatBoard.

Turns a raw text frame into a typed inbound event: size limit first, then JSON
parsing with a nesting depth limit, then the discriminated union of event
schemas. Every failure is a ValidationError reported to the sender only.
"""

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..error_types import ErrorMessages
from ..exceptions import ErrorContext, ValidationError
from ..schemas.websocket_messages import inbound_event_adapter
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class WebSocketMessageValidator:
    """Validates inbound frames and parses them into event models."""

    MAX_MESSAGE_SIZE = 10 * 1024  # 10KB
    MAX_JSON_DEPTH = 10

    def __init__(self, max_message_size: int | None = None, max_json_depth: int | None = None):
        """
        Initialize the validator.

        Args:
            max_message_size: Maximum frame size in bytes (default: 10KB)
            max_json_depth: Maximum JSON nesting depth (default: 10)
        """
        self.max_message_size = max_message_size or self.MAX_MESSAGE_SIZE
        self.max_json_depth = max_json_depth or self.MAX_JSON_DEPTH

    def validate_size(self, raw: str, context: ErrorContext | None = None) -> None:
        size = len(raw.encode("utf-8"))
        if size > self.max_message_size:
            raise ValidationError(
                f"Frame size {size} bytes exceeds maximum {self.max_message_size} bytes",
                context=context,
                details={"size": size, "max_size": self.max_message_size},
                user_friendly=ErrorMessages.FRAME_TOO_LARGE,
            )

    def _calculate_depth(self, obj: Any, current_depth: int = 0) -> int:
        if current_depth > self.max_json_depth:
            return current_depth
        if isinstance(obj, dict) and obj:
            return max(self._calculate_depth(v, current_depth + 1) for v in obj.values())
        if isinstance(obj, list) and obj:
            return max(self._calculate_depth(item, current_depth + 1) for item in obj)
        return current_depth

    def parse(self, raw: str, context: ErrorContext | None = None) -> Any:
        """
        Validate a raw frame and return the matching event model.

        Args:
            raw: Text frame as received
            context: Error context for logging

        Returns:
            One of the inbound event models

        Raises:
            ValidationError: Oversized frame, bad JSON, excessive nesting, or an
                unknown or malformed event
        """
        self.validate_size(raw, context)

        try:
            message = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Invalid JSON: {e.msg}",
                context=context,
                user_friendly=ErrorMessages.INVALID_FORMAT,
            ) from e

        depth = self._calculate_depth(message)
        if depth > self.max_json_depth:
            raise ValidationError(
                f"JSON depth {depth} exceeds maximum {self.max_json_depth}",
                context=context,
                user_friendly=ErrorMessages.INVALID_FORMAT,
            )

        try:
            return inbound_event_adapter.validate_python(message)
        except PydanticValidationError as e:
            event_type = message.get("type") if isinstance(message, dict) else None
            raise ValidationError(
                f"Schema validation failed: {e.error_count()} error(s)",
                context=context,
                details={"event_type": event_type, "errors": e.errors(include_url=False, include_input=False)},
                user_friendly=ErrorMessages.INVALID_FORMAT,
            ) from e
