"""
Clock and calendar helpers.

Timestamps are stored as naive UTC datetimes.
"""
from datetime import datetime, date, time, timedelta, timezone
from typing import Tuple
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _local_midnight_as_utc(day: date, tz: ZoneInfo) -> datetime:
    local_midnight = datetime.combine(day, time.min, tzinfo=tz)
    return local_midnight.astimezone(timezone.utc).replace(tzinfo=None)


def local_day_window(now: datetime, tz_name: str, offset_days: int = 0) -> Tuple[datetime, datetime]:
    """
    Half-open window [start, end) covering one calendar day in a timezone.
    
    Args:
        now: Reference time (naive UTC)
        tz_name: IANA timezone name whose calendar defines the day
        offset_days: 0 for the day containing `now`, 1 for the next day, etc.
    
    Returns:
        (start, end) as naive UTC datetimes
    """
    tz = ZoneInfo(tz_name)
    local_today = now.replace(tzinfo=timezone.utc).astimezone(tz).date()
    day = local_today + timedelta(days=offset_days)
    return _local_midnight_as_utc(day, tz), _local_midnight_as_utc(day + timedelta(days=1), tz)
