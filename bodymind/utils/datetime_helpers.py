"""
Standardized Date/Time Handling Utilities

This module provides centralized functions for date/time operations to ensure:
1. All stored timestamps are timezone-aware UTC
2. Calendar days (scores, streaks, duplicate checks) are evaluated in the
   user's timezone
3. Consistent date/time handling across the engine

CRITICAL RULES:
- Always store datetimes as UTC (use to_utc())
- Always derive a calendar day with local_date(), never with dt.date()
- Never mix naive and aware datetimes
"""

import logging
from datetime import datetime, date, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from bodymind import config

logger = logging.getLogger(__name__)

UTC = ZoneInfo("UTC")


def get_user_timezone(tz_name: Optional[str]) -> ZoneInfo:
    """
    Resolve a user's timezone name, or return the configured default

    Args:
        tz_name: IANA timezone name (e.g. "Europe/Stockholm") or None

    Returns:
        ZoneInfo object for the user's timezone
    """
    if not tz_name:
        tz_name = config.DEFAULT_TIMEZONE
        logger.debug(f"No timezone set, using {tz_name}")

    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.error(f"Invalid timezone '{tz_name}': {e}")
        return ZoneInfo(config.DEFAULT_TIMEZONE)


def now_utc() -> datetime:
    """
    Get current datetime in UTC (timezone-aware)

    Returns:
        Current datetime in UTC with timezone info
    """
    return datetime.now(UTC)


def to_utc(dt: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """
    Convert datetime to UTC for storage

    Args:
        dt: Datetime to convert (can be naive or aware)
        tz: Timezone a naive datetime is expressed in (required if dt is naive)

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If dt is naive and tz is not provided
    """
    if dt.tzinfo is None:
        if tz is None:
            raise ValueError("tz required for naive datetime conversion to UTC")
        dt = dt.replace(tzinfo=tz)
        logger.debug(f"Converted naive datetime to {tz}: {dt}")

    return dt.astimezone(UTC)


def local_date(dt: datetime, tz: ZoneInfo) -> date:
    """Calendar date of an instant in the given timezone"""
    return to_utc(dt, tz).astimezone(tz).date()


def day_bounds_utc(day: date, tz: ZoneInfo) -> Tuple[datetime, datetime]:
    """
    Start (inclusive) and end (exclusive) of a local calendar day, in UTC

    Args:
        day: Date in the user's timezone
        tz: User's timezone

    Returns:
        (start, end) as aware UTC datetimes
    """
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)


def hours_until_end_of_day(now: datetime, tz: ZoneInfo) -> float:
    """
    Hours left until local midnight, rounded to one decimal

    Subtraction happens in UTC so DST transitions are counted correctly.
    """
    now_utc_dt = to_utc(now, tz)
    _, day_end = day_bounds_utc(local_date(now_utc_dt, tz), tz)
    remaining = (day_end - now_utc_dt).total_seconds() / 3600
    return max(0.0, round(remaining, 1))


def parse_user_date(date_str: str) -> date:
    """
    Parse date string to date object

    Supports formats:
    - YYYY-MM-DD (ISO format)
    - MM/DD/YYYY
    - DD/MM/YYYY

    Args:
        date_str: Date string

    Returns:
        date object

    Raises:
        ValueError: If date_str format is not recognized
    """
    for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%d/%m/%Y"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date format '{date_str}'. Expected YYYY-MM-DD, MM/DD/YYYY, or DD/MM/YYYY")


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is in UTC

    Args:
        dt: Datetime (can be None, naive, or aware)

    Returns:
        Datetime in UTC, or None if input was None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        logger.warning(f"Received naive datetime, assuming UTC: {dt}")
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)
