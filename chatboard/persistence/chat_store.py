"""
SQLAlchemy-backed implementation of ChatStoreProtocol.

ChatStore is a thin facade over the per-table repositories; it is the only
persistence object the rest of the application sees.
"""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models.user import User
from .protocols import UserRecord
from .repositories import BoardRepository, ConnectionLogRepository, MessageRepository, UserRepository


def _to_record(user: User | None) -> UserRecord | None:
    if user is None:
        return None
    return UserRecord(id=user.id, username=user.username, password_hash=user.password_hash, token=user.token)


class ChatStore:
    """Durable store for users, messages, connection logs and board items."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.users = UserRepository(session_maker)
        self.messages = MessageRepository(session_maker)
        self.connection_logs = ConnectionLogRepository(session_maker)
        self.board = BoardRepository(session_maker)

    async def insert_user(self, username: str, password_hash: str, token: str) -> UserRecord:
        user = await self.users.insert_user(username, password_hash, token)
        record = _to_record(user)
        assert record is not None
        return record

    async def find_user_by_credential(self, username: str) -> UserRecord | None:
        return _to_record(await self.users.find_by_username(username))

    async def find_user_by_token(self, token: str) -> UserRecord | None:
        return _to_record(await self.users.find_by_token(token))

    async def rotate_token(self, user_id: int, token: str) -> None:
        await self.users.rotate_token(user_id, token)

    async def insert_message(self, username: str, content: str, timestamp: datetime) -> dict[str, Any]:
        return await self.messages.insert_message(username, content, timestamp)

    async def list_recent_messages(self, limit: int) -> list[dict[str, Any]]:
        return await self.messages.list_recent(limit)

    async def insert_connection_log(self, username: str, action: str) -> None:
        await self.connection_logs.insert(username, action)

    async def insert_board_item(
        self,
        *,
        title: str,
        content: str | None,
        username: str,
        assigned_to: str | None,
        column_name: str,
        timestamp: datetime,
    ) -> dict[str, Any]:
        return await self.board.insert_item(
            title=title,
            content=content,
            username=username,
            assigned_to=assigned_to,
            column_name=column_name,
            timestamp=timestamp,
        )

    async def list_board_items(self) -> list[dict[str, Any]]:
        return await self.board.list_items()

    async def update_board_item(self, item_id: int, patch: dict[str, Any]) -> bool:
        return await self.board.update_item(item_id, patch)

    async def delete_board_item(self, item_id: int) -> bool:
        return await self.board.delete_item(item_id)
