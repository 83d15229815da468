"""
Domain time utilities (pure).

Sale events are stamped with the moment the engine committed them.

Invariants:
- Timestamps must be timezone-aware.
- Timestamps must have UTC offset 0.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def require_utc_timestamp(name: str, value: datetime) -> None:
    """Raise ValueError unless `value` is a timezone-aware UTC timestamp."""

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
