"""
Kanban board item model.

Items live in one of three columns. Everything except ``id``, ``username`` (the
author) and ``created_at`` may change; ``updated_at`` moves on every mutation.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..utils.time_utils import format_timestamp, utc_now
from .base import Base


class BoardColumn(str, Enum):
    """Board columns, in display order."""

    TODO = "todo"
    IN_PROGRESS = "inprogress"
    DONE = "done"


class BoardItem(Base):
    """A card on the shared board."""

    __tablename__ = "board_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(length=500), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    username: Mapped[str] = mapped_column(String(length=20), nullable=False)
    assigned_to: Mapped[str | None] = mapped_column(String(length=20), nullable=True)
    column_name: Mapped[str] = mapped_column(String(length=16), nullable=False, default=BoardColumn.TODO.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=utc_now, nullable=False)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation used by board_items and board_item_created."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "username": self.username,
            "assigned_to": self.assigned_to,
            "column_name": self.column_name,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }
