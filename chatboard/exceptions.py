"""
Exception hierarchy for the ChatBoard server.

Every error raised by the application derives from ChatBoardError, which
carries structured context for logging and a user-friendly message that is
safe to send back to the originating client.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ErrorContext:
    """Contextual information for error reporting and debugging."""

    username: str | None = None
    session_id: str | None = None
    event_type: str | None = None
    request_path: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for logging."""
        return {
            "username": self.username,
            "session_id": self.session_id,
            "event_type": self.event_type,
            "request_path": self.request_path,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class ChatBoardError(Exception):
    """
    Base exception for all ChatBoard errors.

    Subclasses set log_level to control how loudly the error is reported when
    it is created; client-caused errors log at warning, server faults at error.
    """

    log_level = "error"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        details: dict[str, Any] | None = None,
        user_friendly: str | None = None,
    ):
        """
        Initialize the error.

        Args:
            message: Technical error message
            context: Error context information
            details: Additional error details
            user_friendly: Message safe to show to the client
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.details = details or {}
        self.user_friendly = user_friendly or message

        self._log_error()

    def _log_error(self) -> None:
        log_method = getattr(logger, self.log_level, logger.error)
        log_method(
            "ChatBoard error occurred",
            error_type=self.__class__.__name__,
            message=self.message,
            context=self.context.to_dict(),
            details=self.details,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "user_friendly": self.user_friendly,
            "details": self.details,
        }


class ValidationError(ChatBoardError):
    """Bad input shape or length."""

    log_level = "warning"

    def __init__(self, message: str, context: ErrorContext | None = None, field: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.field = field
        if field:
            self.details["field"] = field


class AuthenticationError(ChatBoardError):
    """Bad credentials or an invalid session token."""

    log_level = "warning"

    def __init__(self, message: str, context: ErrorContext | None = None, auth_type: str = "unknown", **kwargs):
        super().__init__(message, context, **kwargs)
        self.auth_type = auth_type
        self.details["auth_type"] = auth_type


class AlreadyAuthenticatedError(AuthenticationError):
    """A session tried to bind a second identity."""

    def __init__(self, message: str = "Session is already authenticated", **kwargs):
        super().__init__(message, auth_type="session", **kwargs)


class ConflictError(ChatBoardError):
    """A unique resource (such as a username) already exists."""

    log_level = "warning"


class RateLimitError(ChatBoardError):
    """An identity exceeded its message budget."""

    log_level = "warning"

    def __init__(self, message: str, context: ErrorContext | None = None, limit: int | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.limit = limit
        if limit is not None:
            self.details["limit"] = limit


class DatabaseError(ChatBoardError):
    """A durable store operation failed."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        operation: str = "unknown",
        table: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.operation = operation
        self.table = table
        self.details["operation"] = operation
        if table:
            self.details["table"] = table
