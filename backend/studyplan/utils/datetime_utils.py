"""
Timezone-aware datetime utilities.

All instants crossing a module boundary are timezone-aware. Naive values are
read as UTC, matching how the SQLite layer stores timestamps.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from studyplan.core.logger import setup_logger

logger = setup_logger(__name__)

# UTC timezone constant
UTC = timezone.utc


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Returns:
        datetime: Current UTC time with tzinfo set to UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware and in UTC.

    Args:
        dt: datetime to convert (can be None, naive, or timezone-aware)

    Returns:
        Optional[datetime]: UTC timezone-aware datetime, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def get_zone(user_timezone: Optional[str]):
    """
    Resolve an IANA timezone name.

    Unknown or empty names resolve to UTC so a bad preference never blocks scheduling.
    """
    if not user_timezone:
        return UTC
    try:
        return ZoneInfo(user_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{user_timezone}', falling back to UTC")
        return UTC


def to_user_local(dt: datetime, user_timezone: Optional[str]) -> datetime:
    """Convert an instant to the user's wall-clock timezone."""
    return ensure_utc(dt).astimezone(get_zone(user_timezone))


def user_local_date(dt: datetime, user_timezone: Optional[str]) -> date:
    """
    Get the calendar date of an instant in the user's timezone.

    Example:
        >>> user_local_date(datetime(2024, 1, 19, 23, 0, tzinfo=UTC), "Asia/Tokyo")
        date(2024, 1, 20)
    """
    return to_user_local(dt, user_timezone).date()


def start_of_day(dt: datetime) -> datetime:
    """Midnight of dt's calendar day, keeping its tzinfo."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0, fold=0)


def at_hour(dt: datetime, hour: int) -> datetime:
    """
    Wall-clock `hour`:00 on dt's calendar day.

    hour=24 yields midnight of the following day.
    """
    return start_of_day(dt) + timedelta(hours=hour)


def add_months(dt: datetime, months: int) -> datetime:
    """
    Add calendar months, clamping the day to the target month's length.

    Example:
        >>> add_months(datetime(2024, 1, 31), 1)
        datetime(2024, 2, 29)
    """
    month_index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    max_day = calendar.monthrange(year, month)[1]
    return dt.replace(year=year, month=month, day=min(dt.day, max_day))
