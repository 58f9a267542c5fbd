"""Wall-clock helpers shared by the lifecycle services."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Normalise a potentially-naive timestamp (SQLite drops tzinfo) to UTC-aware."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def elapsed_hours(start: datetime, end: datetime) -> float:
    """Hours between two instants, rounded to 2 decimals and never negative."""
    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return round(max(0.0, seconds) / 3600, 2)
