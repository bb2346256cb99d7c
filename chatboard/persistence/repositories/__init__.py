"""Async repositories, one per table."""

from .board_repository import BoardRepository
from .connection_log_repository import ConnectionLogRepository
from .message_repository import MessageRepository
from .user_repository import UserRepository

__all__ = ["BoardRepository", "ConnectionLogRepository", "MessageRepository", "UserRepository"]
