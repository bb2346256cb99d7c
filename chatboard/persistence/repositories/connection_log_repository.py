"""Connection audit log repository."""

from sqlalchemy.exc import SQLAlchemyError

from ...models.connection_log import ConnectionLog
from .base_repository import BaseRepository


class ConnectionLogRepository(BaseRepository):
    """Writes connect / disconnect rows."""

    table = "connection_logs"

    async def insert(self, username: str, action: str) -> None:
        """Record that ``username`` performed ``action`` ("connect" or "disconnect")."""
        try:
            async with self._session_maker() as session:
                session.add(ConnectionLog(username=username, action=action))
                await session.commit()
        except SQLAlchemyError as e:
            self._raise_database_error(e, "insert_connection_log", username=username, action=action)
