"""Date and timestamp formatting shared by every memory-bank component.

All times are UTC. Components accept a ``clock`` callable so tests can pin
"now" to a fixed moment.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def date_string(moment: datetime) -> str:
    """Calendar date as ``YYYY-MM-DD``."""
    return _as_utc(moment).strftime("%Y-%m-%d")


def timestamp(moment: datetime) -> str:
    """Second-precision timestamp as ``YYYY-MM-DD HH:MM:SS``."""
    return _as_utc(moment).strftime("%Y-%m-%d %H:%M:%S")


def format_marker(moment: datetime) -> str:
    """ISO-8601 text stored in ``.last_update`` (``2026-02-18T09:30:00.000Z``)."""
    return _as_utc(moment).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_marker(text: str) -> datetime | None:
    """Parse a ``.last_update`` value. Returns None when unreadable."""
    text = text.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def session_stamp(moment: datetime) -> str:
    """Filename-safe ISO timestamp: ``2026-02-18T09-30-00-000Z``."""
    return format_marker(moment).replace(":", "-").replace(".", "-")
