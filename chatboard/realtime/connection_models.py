"""
Data models for realtime connection management.

A Session wraps one live WebSocket. Outbound events go through a per-session
FIFO drained by a single writer task, so publishing never awaits and every
session observes events in the order they were published.
"""

import asyncio
import time
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

# Policy violation; sent when authentication fails
CLOSE_CODE_POLICY_VIOLATION = 1008


class ConnectionProtocol(Protocol):
    """The subset of starlette.websockets.WebSocket a Session needs."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


@dataclass(frozen=True)
class _CloseSignal:
    """Queued after the last event; the writer closes the socket when code is set."""

    code: int | None


@dataclass(eq=False)
class Session:
    """
    A live connection and the identity bound to it, if any.

    ``identity`` is written only by SessionRegistry.register. Sessions compare
    by object identity so they can be stored in sets.
    """

    connection: ConnectionProtocol
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    identity: str | None = None
    connected_at: float = field(default_factory=time.time)
    closed: bool = False
    _outbox: asyncio.Queue = field(default_factory=asyncio.Queue, repr=False)
    _held: list[dict[str, Any]] | None = field(default=None, repr=False)
    _replay_filter: Callable[[dict[str, Any]], bool] | None = field(default=None, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def is_held(self) -> bool:
        return self._held is not None

    def deliver(self, event: dict[str, Any]) -> bool:
        """
        Queue an event for this session.

        Returns:
            False if the session is closed or the event was already replayed to it
        """
        if self.closed:
            return False
        if self._replay_filter is not None and self._replay_filter(event):
            return False
        if self._held is not None:
            self._held.append(event)
        else:
            self._outbox.put_nowait(event)
        return True

    def hold(self) -> None:
        """Buffer incoming events until release() is called."""
        if self._held is None:
            self._held = []

    def release(
        self,
        lead: Iterable[dict[str, Any]] = (),
        drop: Callable[[dict[str, Any]], bool] | None = None,
    ) -> int:
        """
        Stop buffering and queue the buffered events.

        ``drop`` keeps filtering later deliveries too, so an event that was
        already covered by ``lead`` is not repeated when its publish arrives late.

        Args:
            lead: Events queued ahead of everything that was buffered
            drop: Predicate selecting events to discard, now and afterwards

        Returns:
            Number of buffered events that were discarded
        """
        held, self._held = self._held or [], None
        if self.closed:
            return len(held)
        self._replay_filter = drop
        for event in lead:
            self._outbox.put_nowait(event)
        dropped = 0
        for event in held:
            if drop is not None and drop(event):
                dropped += 1
                continue
            self._outbox.put_nowait(event)
        return dropped

    def terminate(self, code: int = CLOSE_CODE_POLICY_VIOLATION) -> None:
        """Deliver what is already queued, then close the socket with ``code``."""
        self._shutdown(code)

    def close(self) -> None:
        """Drop undelivered events and stop the writer without touching the socket."""
        if not self.closed:
            self._discard_pending()
        self._shutdown(None)

    def _shutdown(self, code: int | None) -> None:
        if self.closed:
            return
        self.closed = True
        self._held = None
        self._outbox.put_nowait(_CloseSignal(code))

    async def flush(self) -> None:
        """Wait until the writer has processed everything queued so far."""
        await self._outbox.join()

    async def run_writer(self) -> None:
        """Send queued events until the session is closed or the socket fails."""
        while True:
            item = await self._outbox.get()
            try:
                if isinstance(item, _CloseSignal):
                    if item.code is not None:
                        await self.connection.close(code=item.code)
                    return
                await self.connection.send_json(item)
            except Exception as e:  # pylint: disable=broad-exception-caught  # Reason: socket libraries raise several unrelated types on a dead peer; any of them ends delivery for this session only
                logger.warning(
                    "Event delivery failed, closing session",
                    session_id=self.session_id,
                    username=self.identity,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                self.closed = True
                self._discard_pending()
                return
            finally:
                self._outbox.task_done()

    def _discard_pending(self) -> None:
        while not self._outbox.empty():
            self._outbox.get_nowait()
            self._outbox.task_done()
