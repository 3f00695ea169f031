from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError


def utc_now() -> datetime:
    """Current UTC time, second precision.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(microsecond=0)


def parse_iso_datetime(value: Any, *, reason: str = "bad_time") -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing ``Z``; naive values are taken as UTC.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(reason)
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(reason)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError("bad_date")


def to_db(value: Optional[datetime]) -> Optional[datetime]:
    """MySQL DATETIME columns hold naive UTC."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def from_db(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return from_db(value).isoformat().replace("+00:00", "Z")


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounded down, never negative."""
    seconds = (end - start).total_seconds()
    return max(int(seconds // 60), 0)
