"""
Time utility functions for normalizing Flick timestamps and look-back ranges.
Timestamps without an offset are interpreted in the configured source timezone.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

import pytz

from flick2influx.config import settings


def to_utc(value: datetime, source_timezone: Optional[str] = None) -> datetime:
    """
    Normalize a timestamp to an aware UTC datetime.
    
    Args:
        value: Timestamp from Flick, naive or aware
        source_timezone: Timezone assumed for naive values. Defaults to settings.source_timezone.
    
    Returns:
        Timezone-aware datetime in UTC
    """
    if value.tzinfo is None:
        local_tz = pytz.timezone(source_timezone or settings.source_timezone)
        value = local_tz.localize(value)
    return value.astimezone(pytz.UTC)


def local_now(source_timezone: Optional[str] = None) -> datetime:
    """Current time in the source timezone."""
    return datetime.now(pytz.timezone(source_timezone or settings.source_timezone))


def look_back_window(look_back_days: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Get the (start, end) range covering the last look_back_days days.
    
    Examples:
        - look_back_days=2, now=2024-03-10 08:00 -> (2024-03-08 08:00, 2024-03-10 08:00)
    """
    if now is None:
        now = local_now()
    return now - timedelta(days=look_back_days), now


def look_back_dates(look_back_days: int, now: Optional[datetime] = None) -> List[date]:
    """
    Get the calendar days from look_back_days ago up to and including today.
    
    Days are produced by counting down from look_back_days to 0, so the oldest
    day comes first and today comes last.
    
    Examples:
        - look_back_days=2, now=2024-03-10 -> [2024-03-08, 2024-03-09, 2024-03-10]
    """
    if now is None:
        now = local_now()
    return [(now - timedelta(days=days_ago)).date() for days_ago in range(look_back_days, -1, -1)]
