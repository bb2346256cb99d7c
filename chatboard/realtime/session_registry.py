"""
Session registry: the source of truth for who is online.

The registry tracks every open session and, separately, which sessions are
bound to an identity. A listener (the presence broadcaster) is called
synchronously after every bind and unbind, so presence read right after a
mutation always agrees with the registry.
"""

from collections.abc import Callable
from enum import Enum

from ..error_types import ErrorMessages
from ..exceptions import AlreadyAuthenticatedError, ErrorContext
from ..structured_logging.enhanced_logging_config import get_logger
from .connection_models import Session

logger = get_logger(__name__)


class PresenceChange(str, Enum):
    JOINED = "joined"
    LEFT = "left"


# (change, identity, membership_changed)
PresenceListener = Callable[[PresenceChange, str, bool], None]


class SessionRegistry:
    """Maps live sessions to authenticated identities."""

    def __init__(self, listener: PresenceListener | None = None) -> None:
        self._sessions: dict[str, Session] = {}
        self._bound: dict[str, str] = {}  # session_id -> identity
        self._by_identity: dict[str, set[str]] = {}  # identity -> session_ids
        self._listener = listener

    def set_listener(self, listener: PresenceListener | None) -> None:
        self._listener = listener

    def add(self, session: Session) -> None:
        """Track a newly opened, not yet authenticated session."""
        self._sessions[session.session_id] = session

    def discard(self, session: Session) -> None:
        """Forget a closed session. Call unregister() first if it was bound."""
        self._sessions.pop(session.session_id, None)

    def sessions(self) -> list[Session]:
        """Snapshot of every open session, authenticated or not."""
        return list(self._sessions.values())

    def register(self, session: Session, identity: str) -> None:
        """
        Bind an identity to a session.

        Args:
            session: The session that passed authentication
            identity: The verified username

        Raises:
            AlreadyAuthenticatedError: If the session is already bound
        """
        if session.identity is not None or session.session_id in self._bound:
            raise AlreadyAuthenticatedError(
                context=ErrorContext(username=session.identity, session_id=session.session_id),
                user_friendly=ErrorMessages.ALREADY_AUTHENTICATED,
            )

        self._sessions.setdefault(session.session_id, session)
        session.identity = identity
        self._bound[session.session_id] = identity
        peers = self._by_identity.setdefault(identity, set())
        membership_changed = not peers
        peers.add(session.session_id)

        logger.info(
            "Session registered",
            session_id=session.session_id,
            username=identity,
            identity_sessions=len(peers),
        )
        self._notify(PresenceChange.JOINED, identity, membership_changed)

    def unregister(self, session: Session) -> bool:
        """
        Remove a session's binding. Calling it again is a no-op.

        Returns:
            True if a binding was removed
        """
        identity = self._bound.pop(session.session_id, None)
        if identity is None:
            return False

        peers = self._by_identity.get(identity, set())
        peers.discard(session.session_id)
        membership_changed = not peers
        if membership_changed:
            self._by_identity.pop(identity, None)

        logger.info(
            "Session unregistered",
            session_id=session.session_id,
            username=identity,
            identity_sessions=len(peers),
        )
        self._notify(PresenceChange.LEFT, identity, membership_changed)
        return True

    def list_identities(self) -> set[str]:
        """Distinct identities with at least one bound session."""
        return set(self._by_identity)

    def _notify(self, change: PresenceChange, identity: str, membership_changed: bool) -> None:
        if self._listener is not None:
            self._listener(change, identity, membership_changed)
