"""Audit log of authenticated connects and disconnects."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..utils.time_utils import utc_now
from .base import Base


class ConnectionLog(Base):
    """One connect or disconnect event for a user."""

    __tablename__ = "connection_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(length=20), nullable=False)
    action: Mapped[str] = mapped_column(String(length=16), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(), default=utc_now, nullable=False)
