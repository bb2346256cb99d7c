"""
Database configuration for ChatBoard.

DatabaseManager owns the async SQLAlchemy engine and session maker. One
instance is created by the application container at startup and disposed on
shutdown; nothing in this module is a process-wide singleton.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .exceptions import DatabaseError
from .models import Base
from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """
    Manages the database engine and session factory.

    In-memory SQLite URLs share a single connection through StaticPool so
    every session sees the same database.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        """
        Initialize the database manager.

        Args:
            database_url: Async SQLAlchemy URL (sqlite+aiosqlite://...)
            echo: Echo SQL statements to the log
        """
        self.database_url = database_url
        engine_kwargs: dict = {"echo": echo}
        if ":memory:" in database_url or database_url.endswith("sqlite+aiosqlite://"):
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            # A pooled connection can be left dead by a cancelled query; test it before reuse
            engine_kwargs["pool_pre_ping"] = True

        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Database engine created", database_url=database_url)

    async def create_tables(self) -> None:
        """
        Create all tables that do not exist yet.

        Raises:
            DatabaseError: If the schema cannot be created
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to create database tables: {e}",
                operation="create_tables",
                details={"database_url": self.database_url},
            ) from e
        logger.info("Database tables ready", tables=sorted(Base.metadata.tables))

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("Database engine disposed")
