"""
Common plumbing for async repositories.

Repositories translate SQLAlchemy failures into DatabaseError so callers deal
with a single store error type.
"""

from typing import NoReturn

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...exceptions import DatabaseError


class BaseRepository:
    """Base class holding the session factory and the table name used in errors."""

    table: str = "unknown"

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    def _raise_database_error(self, error: SQLAlchemyError, operation: str, **details) -> NoReturn:
        raise DatabaseError(
            f"Database error during {operation}: {error}",
            operation=operation,
            table=self.table,
            details={"error_type": type(error).__name__, **details},
            user_friendly="Server error",
        ) from error
