"""
Shared utilities: clock and calendar helpers.

All timestamps are naive UTC datetimes, matching the DateTime columns.
"""
import math
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Optional, Tuple

SECONDS_PER_DAY = 24 * 60 * 60


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def days_since(value: Optional[datetime], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days elapsed since `value` (floored), or None without a date."""
    if value is None:
        return None
    now = now or utcnow()
    return math.floor((now - to_naive_utc(value)).total_seconds() / SECONDS_PER_DAY)


def days_until(value: Optional[datetime], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days remaining until `value` (rounded up), or None without a date."""
    if value is None:
        return None
    now = now or utcnow()
    return math.ceil((to_naive_utc(value) - now).total_seconds() / SECONDS_PER_DAY)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """First and last instant of a calendar day."""
    start = datetime.combine(day, time.min)
    end = datetime.combine(day, time.max)
    return start, end


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp_score(value: float) -> int:
    """Clamp a score into the 0-100 range."""
    return int(min(100, max(0, value)))


def apply_changes(obj: Any, changes: Dict[str, Any]) -> None:
    """Copy validated field values onto an ORM instance, normalizing datetimes."""
    for key, value in changes.items():
        if isinstance(value, datetime):
            value = to_naive_utc(value)
        setattr(obj, key, value)
