# Rev 1.0.0

"""Timestamp helpers."""
from __future__ import annotations
from datetime import date, datetime, timedelta, timezone


def days_ago_iso(days: int, *, now: datetime | None = None) -> str:
    """Return the UTC ISO timestamp ``days`` days before ``now``."""
    reference = now or datetime.now(timezone.utc)
    return (reference - timedelta(days=days)).isoformat()


def day_end_iso(value: str) -> str:
    """Expand a ``YYYY-MM-DD`` date into the last instant of that day."""
    day = date.fromisoformat(value)
    return datetime(day.year, day.month, day.day, 23, 59, 59, 999999, tzinfo=timezone.utc).isoformat()


def day_start_iso(value: str) -> str:
    day = date.fromisoformat(value)
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc).isoformat()
