"""Timestamp helpers shared by the store and the realtime layer."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC time as a naive datetime, the form persisted in the database."""
    return datetime.now(UTC).replace(tzinfo=None)


def format_timestamp(value: datetime | None) -> str | None:
    """Render a UTC datetime as ISO 8601 with millisecond precision and a 'Z' suffix."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"
