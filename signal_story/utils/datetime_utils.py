"""Utility functions for working with dates and times."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

__all__ = [
    "get_current_timestamp",
    "ensure_utc",
    "parse_timestamp",
    "date_key",
]


def get_current_timestamp() -> datetime:
    """Return the current UTC datetime.

    Stored directly in MongoDB it becomes a BSON Date.
    """
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(raw: object) -> Optional[datetime]:
    """Parse the ISO-8601 variants emitted by open-data portals.

    Socrata returns floating timestamps such as ``2026-10-18T22:14:05.000``;
    those are read as UTC. Returns ``None`` for anything unparsable.
    """
    if isinstance(raw, datetime):
        return ensure_utc(raw)
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        pass
    try:
        return ensure_utc(datetime.strptime(text[:10], "%m/%d/%Y"))
    except ValueError:
        return None


def date_key(value: datetime | date) -> str:
    """``YYYY-MM-DD`` for identity keys and log lines."""
    if isinstance(value, datetime):
        value = ensure_utc(value).date()
    return value.isoformat()
