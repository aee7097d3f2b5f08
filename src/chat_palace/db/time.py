# src/chat_palace/db/time.py
"""Time utilities for database models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string, e.g. ``2024-05-01T09:30:00.123Z``."""
    return utcnow().isoformat(timespec="milliseconds").replace("+00:00", "Z")
