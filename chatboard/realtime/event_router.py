"""
Event routing for inbound WebSocket events.

The router maps each event model to one handler. Every kind except
``authenticate`` requires a bound identity. Errors stop at the handler
boundary: client mistakes become an ``error`` event for the sender only and
store failures are logged and dropped.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from ..auth.accounts import AccountService
from ..error_types import ErrorMessages
from ..exceptions import (
    AlreadyAuthenticatedError,
    AuthenticationError,
    DatabaseError,
    ErrorContext,
    RateLimitError,
    ValidationError,
)
from ..persistence.protocols import ChatStoreProtocol
from ..schemas.websocket_messages import (
    INBOUND_EVENT_TYPES,
    AuthenticateEvent,
    CreateBoardItemEvent,
    DeleteBoardItemEvent,
    GetBoardItemsEvent,
    GetConnectedUsersEvent,
    GetMonitoringEvent,
    PingLatencyEvent,
    SendMessageEvent,
    UpdateBoardItemEvent,
)
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.sanitization import DEFAULT_MAX_LENGTH, sanitize_input
from ..utils.time_utils import utc_now
from .board_pipeline import BoardMutationPipeline
from .connection_models import Session
from .message_broadcaster import BroadcastFanout
from .monitoring import MonitoringCounters
from .presence_broadcaster import PresenceBroadcaster
from .rate_limiter import RateLimiter
from .session_registry import SessionRegistry

logger = get_logger(__name__)

Handler = Callable[[Session, Any], Awaitable[None]]


class EventRouter:
    """Dispatches inbound events for one process."""

    def __init__(
        self,
        *,
        accounts: AccountService,
        store: ChatStoreProtocol,
        registry: SessionRegistry,
        fanout: BroadcastFanout,
        presence: PresenceBroadcaster,
        rate_limiter: RateLimiter,
        board: BoardMutationPipeline,
        counters: MonitoringCounters,
        history_limit: int = 50,
        max_content_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        self.accounts = accounts
        self.store = store
        self.registry = registry
        self.fanout = fanout
        self.presence = presence
        self.rate_limiter = rate_limiter
        self.board = board
        self.counters = counters
        self.history_limit = history_limit
        self.max_content_length = max_content_length

        self._handlers: dict[type, Handler] = {
            AuthenticateEvent: self._handle_authenticate,
            SendMessageEvent: self._handle_send_message,
            GetMonitoringEvent: self._handle_get_monitoring,
            PingLatencyEvent: self._handle_ping_latency,
            GetConnectedUsersEvent: self._handle_get_connected_users,
            GetBoardItemsEvent: self._handle_get_board_items,
            CreateBoardItemEvent: self._handle_create_board_item,
            UpdateBoardItemEvent: self._handle_update_board_item,
            DeleteBoardItemEvent: self._handle_delete_board_item,
        }
        missing = set(INBOUND_EVENT_TYPES) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for inbound events: {sorted(m.__name__ for m in missing)}")

    def send_error(self, session: Session, message: str) -> None:
        """Report an error to one session."""
        self.fanout.send(session, "error", {"message": message})

    async def dispatch(self, session: Session, event: Any) -> None:
        """
        Route one inbound event.

        Args:
            session: The originating session
            event: A validated inbound event model
        """
        handler = self._handlers[type(event)]

        if not isinstance(event, AuthenticateEvent) and not session.is_authenticated:
            logger.debug(
                "Rejected event from unauthenticated session",
                session_id=session.session_id,
                event_type=event.type,
            )
            self.send_error(session, ErrorMessages.NOT_AUTHENTICATED)
            return

        try:
            await handler(session, event)
        except (ValidationError, AuthenticationError, RateLimitError) as e:
            self.send_error(session, e.user_friendly)
        except DatabaseError as e:
            logger.error(
                "Store failure, event dropped",
                session_id=session.session_id,
                username=session.identity,
                event_type=event.type,
                operation=e.operation,
            )
        except Exception as e:  # pylint: disable=broad-exception-caught  # Reason: a failing handler must not take the connection down
            logger.error(
                "Unexpected error handling event",
                session_id=session.session_id,
                username=session.identity,
                event_type=event.type,
                error=str(e),
                exc_info=True,
            )
            self.send_error(session, ErrorMessages.INTERNAL_ERROR)

    def _context(self, session: Session, event_type: str) -> ErrorContext:
        return ErrorContext(username=session.identity, session_id=session.session_id, event_type=event_type)

    async def _handle_authenticate(self, session: Session, event: AuthenticateEvent) -> None:
        if session.is_authenticated:
            raise AlreadyAuthenticatedError(
                context=self._context(session, event.type),
                user_friendly=ErrorMessages.ALREADY_AUTHENTICATED,
            )

        try:
            identity = await self.accounts.verify_token(event.data.token)
        except AuthenticationError as e:
            self.fanout.send(session, "authenticated", {"success": False, "error": e.user_friendly})
            session.terminate()
            return

        if session.closed:
            logger.info("Session closed during authentication", session_id=session.session_id, username=identity)
            return

        self.fanout.send(session, "authenticated", {"success": True, "username": identity})

        # Broadcasts made while history loads wait behind message_history
        session.hold()
        self.registry.register(session, identity)
        self.counters.session_authenticated()

        history: list[dict[str, Any]] = []
        try:
            history = await self._load_history(session)
        finally:
            self._release_with_history(session, history)

        try:
            await self.store.insert_connection_log(identity, "connect")
        except DatabaseError:
            logger.warning("Connection log not written", username=identity, action="connect")

        logger.info("Session authenticated", session_id=session.session_id, username=identity)

    async def _load_history(self, session: Session) -> list[dict[str, Any]]:
        try:
            return await self.store.list_recent_messages(self.history_limit)
        except DatabaseError:
            logger.warning("Message history unavailable", session_id=session.session_id, username=session.identity)
            return []

    def _release_with_history(self, session: Session, history: list[dict[str, Any]]) -> None:
        """Queue message_history, then what was broadcast meanwhile; messages history already holds are never sent live."""
        last_id = max((m["id"] for m in history if m.get("id") is not None), default=None)

        def already_in_history(queued: dict[str, Any]) -> bool:
            if last_id is None or queued.get("event_type") != "new_message":
                return False
            message_id = queued["data"].get("id")
            return message_id is not None and message_id <= last_id

        session.release(
            lead=[self.fanout.build("message_history", {"messages": history})],
            drop=already_in_history,
        )

    async def _handle_send_message(self, session: Session, event: SendMessageEvent) -> None:
        identity = session.identity
        assert identity is not None

        if not self.rate_limiter.admit(identity):
            raise RateLimitError(
                "Message rate limit exceeded",
                context=self._context(session, event.type),
                limit=self.rate_limiter.max_messages,
                user_friendly=ErrorMessages.RATE_LIMIT_EXCEEDED,
            )

        content = sanitize_input(event.data.content, self.max_content_length)
        if not content:
            raise ValidationError(
                "Empty chat message",
                context=self._context(session, event.type),
                field="content",
                user_friendly=ErrorMessages.EMPTY_MESSAGE,
            )

        message = await self.store.insert_message(identity, content, utc_now())
        self.counters.message_sent()
        self.fanout.publish("new_message", message)
        logger.info("Chat message stored", username=identity, message_id=message["id"])

    async def _handle_get_monitoring(self, session: Session, event: GetMonitoringEvent) -> None:
        self.fanout.send(session, "monitoring_data", self.counters.snapshot())

    async def _handle_ping_latency(self, session: Session, event: PingLatencyEvent) -> None:
        self.fanout.send(session, "pong_latency", {"ts": event.data.ts})

    async def _handle_get_connected_users(self, session: Session, event: GetConnectedUsersEvent) -> None:
        self.fanout.send(session, "connected_users", {"users": self.presence.online_users()})

    async def _handle_get_board_items(self, session: Session, event: GetBoardItemsEvent) -> None:
        items = await self.store.list_board_items()
        self.fanout.send(session, "board_items", {"items": items})

    async def _handle_create_board_item(self, session: Session, event: CreateBoardItemEvent) -> None:
        assert session.identity is not None
        await self.board.create(session.identity, event.data)

    async def _handle_update_board_item(self, session: Session, event: UpdateBoardItemEvent) -> None:
        assert session.identity is not None
        await self.board.update(session.identity, event.data)

    async def _handle_delete_board_item(self, session: Session, event: DeleteBoardItemEvent) -> None:
        assert session.identity is not None
        await self.board.delete(session.identity, event.data)
