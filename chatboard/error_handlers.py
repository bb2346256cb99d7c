"""
Centralized HTTP error handling for the ChatBoard FastAPI application.

Every failure on the HTTP surface becomes ``{"success": false, "error": ...}``
with a status code chosen from the exception type. Only user_friendly text
reaches the client; technical messages stay in the log.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .error_types import ErrorMessages, ErrorType, create_http_error_response
from .exceptions import (
    AuthenticationError,
    ChatBoardError,
    ConflictError,
    DatabaseError,
    RateLimitError,
    ValidationError,
)
from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def _get_status_and_type(error: ChatBoardError) -> tuple[int, ErrorType]:
    """Get HTTP status code and error category for an exception."""
    if isinstance(error, ValidationError):
        return 400, ErrorType.VALIDATION_ERROR
    if isinstance(error, AuthenticationError):
        return 401, ErrorType.AUTHENTICATION_FAILED
    if isinstance(error, ConflictError):
        return 409, ErrorType.RESOURCE_CONFLICT
    if isinstance(error, RateLimitError):
        return 429, ErrorType.RATE_LIMIT_EXCEEDED
    if isinstance(error, DatabaseError):
        return 500, ErrorType.DATABASE_ERROR
    return 500, ErrorType.INTERNAL_ERROR


async def chatboard_exception_handler(request: Request, exc: ChatBoardError) -> JSONResponse:
    """
    Handle ChatBoard-specific exceptions.

    Args:
        request: FastAPI request object
        exc: ChatBoard exception

    Returns:
        JSONResponse with the client-safe message
    """
    status_code, error_type = _get_status_and_type(exc)
    # Server faults never leak their technical text
    message = ErrorMessages.INTERNAL_ERROR if status_code >= 500 else exc.user_friendly

    logger.info(
        "ChatBoard exception handled",
        error_type=exc.__class__.__name__,
        path=request.url.path,
        method=request.method,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content=create_http_error_response(error_type, message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request bodies FastAPI could not parse."""
    logger.warning(
        "Request validation failed",
        path=request.url.path,
        method=request.method,
        error_count=len(exc.errors()),
    )
    return JSONResponse(
        status_code=400,
        content=create_http_error_response(ErrorType.INVALID_FORMAT, ErrorMessages.INVALID_FORMAT),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle anything that escaped the endpoint."""
    logger.error(
        "Unhandled exception in request",
        original_type=type(exc).__name__,
        original_message=str(exc),
        path=request.url.path,
        method=request.method,
        traceback=traceback.format_exc(),
    )
    return JSONResponse(
        status_code=500,
        content=create_http_error_response(ErrorType.INTERNAL_ERROR, ErrorMessages.INTERNAL_ERROR),
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all error handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ChatBoardError, chatboard_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)
    logger.info("Error handlers registered with FastAPI application")
