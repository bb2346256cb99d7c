"""Persistence layer: repositories, the ChatStore facade and its protocol."""

from .chat_store import ChatStore
from .protocols import ChatStoreProtocol, UserRecord

__all__ = ["ChatStore", "ChatStoreProtocol", "UserRecord"]
