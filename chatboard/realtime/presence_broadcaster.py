"""
Presence broadcasting.

Each register or unregister pushes the full online list (as both ``user_list``
and ``connected_users``) to every session, followed by a ``user_joined`` /
``user_left`` delta so clients can show a notice without diffing lists. The
delta goes out for every session, so a second tab of an online user announces
a join again.
"""

from ..structured_logging.enhanced_logging_config import get_logger
from .message_broadcaster import BroadcastFanout
from .session_registry import PresenceChange, SessionRegistry

logger = get_logger(__name__)


class PresenceBroadcaster:
    """Publishes presence whenever the registry changes."""

    def __init__(self, registry: SessionRegistry, fanout: BroadcastFanout) -> None:
        self.registry = registry
        self.fanout = fanout

    def attach(self) -> None:
        """Subscribe to the registry's presence notifications."""
        self.registry.set_listener(self.announce)

    def online_users(self) -> list[str]:
        return sorted(self.registry.list_identities())

    def announce(self, change: PresenceChange, identity: str, membership_changed: bool = True) -> None:
        """
        Push the current online list, then the join or leave delta.

        Args:
            change: Whether a session joined or left
            identity: The identity whose session changed
            membership_changed: True when the identity entered or left the online set;
                only logged
        """
        users = self.online_users()
        self.fanout.publish("user_list", {"users": users})
        self.fanout.publish("connected_users", {"users": users})

        kind = "user_joined" if change is PresenceChange.JOINED else "user_left"
        self.fanout.publish(kind, {"username": identity})

        logger.debug(
            "Presence announced",
            change=change.value,
            username=identity,
            membership_changed=membership_changed,
            online=len(users),
        )
