"""
Board item repository.

Updates and deletes report whether a row was touched; callers decide what to
do with that (the realtime layer broadcasts regardless).
"""

from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from ...models.board_item import BoardItem
from .base_repository import BaseRepository

UPDATABLE_FIELDS = frozenset({"title", "content", "column_name", "assigned_to", "updated_at"})


class BoardRepository(BaseRepository):
    """Repository for kanban board items."""

    table = "board_items"

    async def insert_item(
        self,
        *,
        title: str,
        content: str | None,
        username: str,
        assigned_to: str | None,
        column_name: str,
        timestamp: datetime,
    ) -> dict[str, Any]:
        """Persist a new item and return its full record."""
        try:
            async with self._session_maker() as session:
                item = BoardItem(
                    title=title,
                    content=content,
                    username=username,
                    assigned_to=assigned_to,
                    column_name=column_name,
                    created_at=timestamp,
                    updated_at=timestamp,
                )
                session.add(item)
                await session.commit()
                await session.refresh(item)
                return item.to_dict()
        except SQLAlchemyError as e:
            self._raise_database_error(e, "insert_board_item", username=username)

    async def list_items(self) -> list[dict[str, Any]]:
        """Return every item ordered by id."""
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(BoardItem).order_by(BoardItem.id.asc()))
                return [item.to_dict() for item in result.scalars().all()]
        except SQLAlchemyError as e:
            self._raise_database_error(e, "list_board_items")

    async def update_item(self, item_id: int, patch: dict[str, Any]) -> bool:
        """
        Apply a partial update.

        Args:
            item_id: Item to update
            patch: Column values to set; keys outside UPDATABLE_FIELDS are rejected

        Returns:
            True if a row was updated, False if the id does not exist
        """
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update board item fields: {sorted(unknown)}")
        try:
            async with self._session_maker() as session:
                result = await session.execute(update(BoardItem).where(BoardItem.id == item_id).values(**patch))
                await session.commit()
                return bool(result.rowcount)
        except SQLAlchemyError as e:
            self._raise_database_error(e, "update_board_item", item_id=item_id)

    async def delete_item(self, item_id: int) -> bool:
        """Delete an item; returns False if the id does not exist."""
        try:
            async with self._session_maker() as session:
                result = await session.execute(delete(BoardItem).where(BoardItem.id == item_id))
                await session.commit()
                return bool(result.rowcount)
        except SQLAlchemyError as e:
            self._raise_database_error(e, "delete_board_item", item_id=item_id)
