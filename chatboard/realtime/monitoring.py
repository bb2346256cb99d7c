"""Process-wide monitoring counters."""

from dataclasses import dataclass
from typing import Any


@dataclass
class MonitoringCounters:
    """
    Connection and message counters.

    ``active_connections`` counts authenticated sessions; ``total_connections``
    counts every socket ever accepted.
    """

    active_connections: int = 0
    total_connections: int = 0
    messages_count: int = 0

    def connection_opened(self) -> None:
        self.total_connections += 1

    def session_authenticated(self) -> None:
        self.active_connections += 1

    def session_closed(self, authenticated: bool) -> None:
        if authenticated and self.active_connections > 0:
            self.active_connections -= 1

    def message_sent(self) -> None:
        self.messages_count += 1

    def snapshot(self) -> dict[str, Any]:
        """Return the counters under the keys clients expect."""
        return {
            "activeConnections": self.active_connections,
            "totalConnections": self.total_connections,
            "messagesCount": self.messages_count,
        }
