"""
Store protocol for the ChatBoard persistence layer.

The realtime core and the account service depend on ChatStoreProtocol rather
than on the SQLAlchemy implementation, so tests can substitute an in-memory
store. Every method either succeeds or raises a ChatBoardError subclass
(DatabaseError for store failures).
"""

# pylint: disable=unnecessary-ellipsis  # Reason: Protocol method bodies use ... per typing.Protocol convention

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True)
class UserRecord:
    """Detached view of a user row."""

    id: int
    username: str
    password_hash: str
    token: str


class ChatStoreProtocol(Protocol):
    """Durable store operations used by the application."""

    async def insert_user(self, username: str, password_hash: str, token: str) -> UserRecord:
        """Create a user; raises ConflictError if the username exists."""
        ...

    async def find_user_by_credential(self, username: str) -> UserRecord | None:
        """Look up a user by username so the caller can verify the password."""
        ...

    async def find_user_by_token(self, token: str) -> UserRecord | None:
        """Look up the user currently holding a session token."""
        ...

    async def rotate_token(self, user_id: int, token: str) -> None:
        """Replace a user's session token."""
        ...

    async def insert_message(self, username: str, content: str, timestamp: datetime) -> dict[str, Any]:
        """Persist a chat message and return it with its id."""
        ...

    async def list_recent_messages(self, limit: int) -> list[dict[str, Any]]:
        """Return up to ``limit`` most recent messages, oldest first."""
        ...

    async def insert_connection_log(self, username: str, action: str) -> None:
        """Record a connect or disconnect."""
        ...

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
        """Persist a board item and return its full record."""
        ...

    async def list_board_items(self) -> list[dict[str, Any]]:
        """Return every board item ordered by id."""
        ...

    async def update_board_item(self, item_id: int, patch: dict[str, Any]) -> bool:
        """Apply a partial update; False if the id does not exist."""
        ...

    async def delete_board_item(self, item_id: int) -> bool:
        """Delete an item; False if the id does not exist."""
        ...
