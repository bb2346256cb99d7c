"""
Broadcast fan-out for realtime events.

Publishing wraps the payload in an envelope once and queues it on every open
session. Queuing never suspends, so a publish is atomic with respect to other
handlers and every session sees publishes in the same order they were made.
"""

from typing import Any

from ..structured_logging.enhanced_logging_config import get_logger
from .connection_models import Session
from .envelope import EventSequencer, build_event
from .session_registry import SessionRegistry

logger = get_logger(__name__)


class BroadcastFanout:
    """Delivers events to all sessions or to one."""

    def __init__(self, registry: SessionRegistry, sequencer: EventSequencer | None = None) -> None:
        self.registry = registry
        self.sequencer = sequencer or EventSequencer()

    def build(self, event_type: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        return build_event(event_type, data, sequencer=self.sequencer)

    def publish(self, event_type: str, data: dict[str, Any] | None = None) -> int:
        """
        Send an event to every connected session, authenticated or not.

        Args:
            event_type: Outbound event kind
            data: Event payload

        Returns:
            int: Number of sessions the event was queued for
        """
        event = self.build(event_type, data)
        delivered = 0
        for session in self.registry.sessions():
            if session.deliver(event):
                delivered += 1
        logger.debug("Event broadcast", event_type=event_type, recipients=delivered)
        return delivered

    def send(self, session: Session, event_type: str, data: dict[str, Any] | None = None) -> bool:
        """Send an event to a single session."""
        return session.deliver(self.build(event_type, data))
