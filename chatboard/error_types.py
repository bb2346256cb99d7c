"""
Centralized error types and client-facing messages for ChatBoard.

Realtime errors reach the client as an ``error`` event with a ``message`` field;
HTTP errors as ``{"success": false, "error": ...}`` with a status code. Both draw
their wording from ErrorMessages so the two surfaces stay consistent.
"""

from enum import Enum
from typing import Any


class ErrorType(Enum):
    """Standardized error types for consistent categorization."""

    AUTHENTICATION_FAILED = "authentication_failed"
    NOT_AUTHENTICATED = "not_authenticated"
    INVALID_TOKEN = "invalid_token"
    VALIDATION_ERROR = "validation_error"
    INVALID_FORMAT = "invalid_format"
    RESOURCE_CONFLICT = "resource_conflict"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    DATABASE_ERROR = "database_error"
    INTERNAL_ERROR = "internal_error"


class ErrorMessages:
    """User-facing error messages."""

    NOT_AUTHENTICATED = "Not authenticated"
    ALREADY_AUTHENTICATED = "Already authenticated"
    INVALID_TOKEN = "Invalid token"
    INVALID_CREDENTIALS = "Invalid username or password"
    INVALID_USERNAME = "Invalid username (3-20 alphanumeric characters, '_' or '-')"
    PASSWORD_TOO_SHORT = "Password too short (min {min_length} characters)"
    USERNAME_TAKEN = "This username is already taken"
    RATE_LIMIT_EXCEEDED = "Too many messages. Slow down!"
    EMPTY_MESSAGE = "Empty message"
    TITLE_REQUIRED = "Title required"
    INVALID_FORMAT = "Invalid message format"
    FRAME_TOO_LARGE = "Message too large"
    INTERNAL_ERROR = "Server error"


def create_http_error_response(error_type: ErrorType, message: str) -> dict[str, Any]:
    """
    Build the JSON body returned by HTTP endpoints on failure.

    Args:
        error_type: Error category
        message: User-facing message

    Returns:
        Response body dictionary
    """
    return {"success": False, "error": message, "error_type": error_type.value}
