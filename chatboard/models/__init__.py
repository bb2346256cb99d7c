"""
SQLAlchemy models for ChatBoard.

Importing this package registers every table on Base.metadata.
"""

from .base import Base
from .board_item import BoardColumn, BoardItem
from .connection_log import ConnectionLog
from .message import Message
from .user import User

__all__ = ["Base", "BoardColumn", "BoardItem", "ConnectionLog", "Message", "User"]
