"""
Logging processors for structlog event processing.

This module provides processors for redacting sensitive data and for
binding per-connection context to every log entry.
"""

import re
import uuid
from typing import Any

from structlog.contextvars import bind_contextvars, clear_contextvars

# Matched against lower-cased field names
SENSITIVE_PATTERNS = (
    r"\bpassword\b",
    r"password_hash",
    r"\btoken\b",
    r"\bsecret\b",
    r"_key\b",
    r"\bcredential\b",
    r"\bauthorization\b",
)

SAFE_FIELDS = frozenset({"message_id", "item_id"})


def sanitize_sensitive_data(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Remove sensitive data from log entries.

    Passwords, tokens and credentials are replaced with a redaction marker so
    that they never reach a log file, even when a caller passes them by mistake.

    Args:
        _logger: Logger instance (unused)
        _name: Logger name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Sanitized event dictionary
    """

    def sanitize_dict(d: dict[str, Any]) -> dict[str, Any]:
        sanitized: dict[str, Any] = {}
        for key, value in d.items():
            if isinstance(value, dict):
                sanitized[key] = sanitize_dict(value)
                continue
            key_lower = str(key).lower()
            if key_lower in SAFE_FIELDS:
                sanitized[key] = value
            elif any(re.search(pattern, key_lower) for pattern in SENSITIVE_PATTERNS):
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = value
        return sanitized

    return sanitize_dict(event_dict)


def bind_connection_context(
    session_id: str | None = None,
    username: str | None = None,
    correlation_id: str | None = None,
    **kwargs: Any,
) -> None:
    """
    Bind connection context to the current logging context.

    Every subsequent log entry emitted from the same task carries these keys.

    Args:
        session_id: Realtime session ID if available
        username: Authenticated username if available
        correlation_id: Correlation ID, generated when omitted
        **kwargs: Additional context variables
    """
    context_vars = {
        "correlation_id": correlation_id or str(uuid.uuid4()),
        "session_id": session_id,
        "username": username,
        **kwargs,
    }
    bind_contextvars(**{k: v for k, v in context_vars.items() if v is not None})


def clear_connection_context() -> None:
    """Clear the current connection context from logging."""
    clear_contextvars()
