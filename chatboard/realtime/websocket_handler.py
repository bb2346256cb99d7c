"""
WebSocket handler for ChatBoard realtime communication.

One call to handle_websocket_connection serves one socket: it registers the
session, starts its writer task, reads frames until the peer leaves or the
session is terminated, and always unregisters on the way out.
"""

import asyncio
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from ..error_types import ErrorMessages
from ..exceptions import DatabaseError, ErrorContext, ValidationError
from ..persistence.protocols import ChatStoreProtocol
from ..structured_logging.enhanced_logging_config import get_logger
from ..structured_logging.logging_processors import bind_connection_context, clear_connection_context
from .connection_models import Session
from .event_router import EventRouter
from .message_validator import WebSocketMessageValidator
from .monitoring import MonitoringCounters
from .session_registry import SessionRegistry

logger = get_logger(__name__)

# Disconnect audit writes outlive a cancelled handler; hold references until they finish
_pending_audit_writes: set[asyncio.Task] = set()


async def _write_disconnect_log(store: ChatStoreProtocol, identity: str) -> None:
    try:
        await store.insert_connection_log(identity, "disconnect")
    except DatabaseError:
        logger.warning("Connection log not written", username=identity, action="disconnect")


def _schedule_disconnect_log(store: ChatStoreProtocol, identity: str) -> asyncio.Task:
    """Run the disconnect audit write as a tracked task that cancellation of the caller cannot interrupt."""
    task = asyncio.create_task(_write_disconnect_log(store, identity), name=f"disconnect-log-{identity}")
    _pending_audit_writes.add(task)
    task.add_done_callback(_pending_audit_writes.discard)
    return task


def _frame_text(message: dict[str, Any]) -> str | None:
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes")
    if data is None:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


async def _handle_websocket_message_loop(
    websocket: WebSocket,
    session: Session,
    router: EventRouter,
    validator: WebSocketMessageValidator,
) -> None:
    """Read and dispatch frames until disconnect or termination."""
    while not session.closed:
        try:
            message = await websocket.receive()
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.info("WebSocket receive ended", session_id=session.session_id, reason=str(e))
            break

        if message["type"] == "websocket.disconnect":
            logger.info("WebSocket disconnected", session_id=session.session_id, code=message.get("code"))
            break

        context = ErrorContext(username=session.identity, session_id=session.session_id)
        raw = _frame_text(message)
        try:
            if raw is None:
                raise ValidationError(
                    "Frame is not UTF-8 text",
                    context=context,
                    user_friendly=ErrorMessages.INVALID_FORMAT,
                )
            event = validator.parse(raw, context)
        except ValidationError as e:
            router.send_error(session, e.user_friendly)
            continue

        await router.dispatch(session, event)


async def handle_websocket_connection(
    websocket: WebSocket,
    *,
    registry: SessionRegistry,
    router: EventRouter,
    validator: WebSocketMessageValidator,
    counters: MonitoringCounters,
    store: ChatStoreProtocol,
) -> None:
    """
    Serve one WebSocket connection from accept to cleanup.

    Args:
        websocket: The accepted-to-be WebSocket
        registry: Process session registry
        router: Inbound event router
        validator: Frame validator
        counters: Monitoring counters
        store: Durable store, for the disconnect audit log
    """
    await websocket.accept()

    session = Session(connection=websocket)
    registry.add(session)
    counters.connection_opened()
    writer = asyncio.create_task(session.run_writer(), name=f"ws-writer-{session.session_id}")
    bind_connection_context(session_id=session.session_id)
    logger.info("WebSocket connection opened", session_id=session.session_id)

    try:
        await _handle_websocket_message_loop(websocket, session, router, validator)
    finally:
        session.close()
        identity = session.identity
        was_bound = registry.unregister(session)
        registry.discard(session)
        counters.session_closed(authenticated=was_bound)
        audit = _schedule_disconnect_log(store, identity) if was_bound and identity is not None else None

        await writer
        logger.info("WebSocket connection closed", session_id=session.session_id, username=identity)
        clear_connection_context()

        if audit is not None:
            await asyncio.shield(audit)
