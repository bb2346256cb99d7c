"""Chat message repository."""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ...models.message import Message
from .base_repository import BaseRepository


class MessageRepository(BaseRepository):
    """Append-only access to chat messages."""

    table = "messages"

    async def insert_message(self, username: str, content: str, timestamp: datetime) -> dict[str, Any]:
        """Persist a message and return its wire representation, including the new id."""
        try:
            async with self._session_maker() as session:
                message = Message(username=username, content=content, timestamp=timestamp)
                session.add(message)
                await session.commit()
                await session.refresh(message)
                return message.to_dict()
        except SQLAlchemyError as e:
            self._raise_database_error(e, "insert_message", username=username)

    async def list_recent(self, limit: int) -> list[dict[str, Any]]:
        """
        Return the most recent messages in chronological order.

        Args:
            limit: Maximum number of messages

        Returns:
            Up to ``limit`` messages, oldest first
        """
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(Message).order_by(Message.id.desc()).limit(limit))
                newest_first = result.scalars().all()
        except SQLAlchemyError as e:
            self._raise_database_error(e, "list_recent_messages", limit=limit)
        return [message.to_dict() for message in reversed(newest_first)]
