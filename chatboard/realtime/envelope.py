"""
Event envelope utilities for ChatBoard real-time messages.

Every outbound event shares one schema:
- event_type: str
- timestamp: ISO 8601 UTC with 'Z'
- sequence_number: int (monotonic per-process when a sequencer is supplied)
- data: dict payload
"""

import itertools
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any


def utc_now_z() -> str:
    """Return current UTC time in ISO 8601 format with 'Z' suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class EventSequencer:
    """Hands out monotonically increasing sequence numbers."""

    def __init__(self, start: int = 1) -> None:
        self._counter: Iterator[int] = itertools.count(start)

    def next(self) -> int:
        return next(self._counter)


def build_event(
    event_type: str,
    data: dict[str, Any] | None = None,
    *,
    sequencer: EventSequencer | None = None,
) -> dict[str, Any]:
    """
    Create a normalized event envelope.

    Args:
        event_type: Type of event, e.g. "new_message"
        data: Event payload
        sequencer: Source of the sequence number; 0 when omitted

    Returns:
        The envelope dictionary, ready for send_json
    """
    return {
        "event_type": event_type,
        "timestamp": utc_now_z(),
        "sequence_number": sequencer.next() if sequencer is not None else 0,
        "data": data if data is not None else {},
    }
