"""Chat message model. Messages are append-only."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..utils.time_utils import format_timestamp, utc_now
from .base import Base


class Message(Base):
    """A broadcast chat message."""

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(length=20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(), default=utc_now, nullable=False)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation used by new_message and message_history."""
        return {
            "id": self.id,
            "username": self.username,
            "content": self.content,
            "timestamp": format_timestamp(self.timestamp),
        }
