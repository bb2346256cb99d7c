"""
Structlog-based logging configuration for the ChatBoard server.

This module is the single entry point for logging setup. Application code
obtains loggers through get_logger() and emits key-value events:

    logger = get_logger(__name__)
    logger.info("Message stored", username=username, message_id=message_id)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.stdlib import BoundLogger, LoggerFactory

from .logging_processors import sanitize_sensitive_data


class _LoggingState:
    """State container for logging initialization to avoid global statements."""

    initialized: bool = False
    signature: tuple[str, str, str] | None = None


_logging_state = _LoggingState()


def _build_renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"])


def configure_structlog(environment: str = "development", log_level: str = "INFO", log_format: str = "auto") -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        environment: Environment name; production defaults to JSON output
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: One of "json", "console", "keyvalue" or "auto"
    """
    if log_format == "auto":
        log_format = "json" if environment == "production" else "console"

    level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        # Security first - sanitize sensitive data
        sanitize_sensitive_data,
        merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _build_renderer(log_format),
    ]

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )


def setup_logging(
    environment: str = "development",
    log_level: str = "INFO",
    log_format: str = "auto",
    *,
    force_reconfigure: bool = False,
) -> None:
    """
    Set up logging once per process.

    Repeated calls with the same settings are ignored unless force_reconfigure
    is set, so the app factory can call this unconditionally.
    """
    signature = (environment, log_level, log_format)
    if _logging_state.initialized and _logging_state.signature == signature and not force_reconfigure:
        return

    configure_structlog(environment, log_level, log_format)
    _configure_uvicorn_logging()

    _logging_state.initialized = True
    _logging_state.signature = signature

    get_logger("chatboard.structured_logging").info(
        "Logging system initialized",
        environment=environment,
        log_level=log_level,
        log_format=log_format,
    )


def _configure_uvicorn_logging() -> None:
    """Route uvicorn's loggers through the root handler."""
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Get a structlog logger with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)
