"""
Rate limiting for chat messages.

Each identity gets a fixed window counter. Windows are keyed by identity
rather than by session, so several tabs of one user share a budget. Windows
are never expired on their own; forget() drops one explicitly.
"""

import time
from dataclasses import dataclass
from typing import Any

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class RateWindow:
    """Admitted count for the window ending at window_end (milliseconds)."""

    count: int
    window_end: float


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class RateLimiter:
    """
    Fixed-window admission control per identity.

    A burst of up to twice the limit is possible across a window boundary.
    """

    def __init__(self, window_ms: int = 1000, max_messages: int = 5) -> None:
        """
        Initialize the rate limiter.

        Args:
            window_ms: Window length in milliseconds (default: 1000)
            max_messages: Messages admitted per window (default: 5)
        """
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")
        if max_messages <= 0:
            raise ValueError("max_messages must be positive")
        self.window_ms = window_ms
        self.max_messages = max_messages
        self._windows: dict[str, RateWindow] = {}

    def admit(self, identity: str, now_ms: float | None = None) -> bool:
        """
        Check and consume one message from an identity's budget.

        Args:
            identity: Username the message is sent as
            now_ms: Current time in milliseconds; a monotonic clock when omitted

        Returns:
            bool: True if admitted, False if the identity is over its limit
        """
        now = _monotonic_ms() if now_ms is None else now_ms
        window = self._windows.get(identity)

        if window is None or now > window.window_end:
            self._windows[identity] = RateWindow(count=1, window_end=now + self.window_ms)
            return True

        if window.count >= self.max_messages:
            logger.warning("Rate limit exceeded", username=identity, count=window.count, limit=self.max_messages)
            return False

        window.count += 1
        return True

    def get_window(self, identity: str) -> RateWindow | None:
        """Return the current window for an identity, if one exists."""
        return self._windows.get(identity)

    def forget(self, identity: str) -> None:
        """Drop an identity's window."""
        self._windows.pop(identity, None)

    def stats(self) -> dict[str, Any]:
        return {
            "tracked_identities": len(self._windows),
            "window_ms": self.window_ms,
            "max_messages": self.max_messages,
        }
