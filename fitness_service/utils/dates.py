"""
Date helpers shared by the routes and services.

All timestamps are handled as naive local datetimes, which is how they are
stored in the database.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

# Calendar-relative periods used by the workout and nutrition stats
STATS_PERIODS = {
    "week": relativedelta(weeks=1),
    "month": relativedelta(months=1),
    "year": relativedelta(years=1),
}


def to_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Converts an aware datetime to naive local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parses an ISO-8601 string from an external payload into a naive local datetime."""
    if not value:
        return None
    return to_naive(isoparse(value))


def period_start(period: str, now: Optional[datetime] = None) -> datetime:
    """
    Returns the start of a stats period ending at `now`.

    Args:
        period (str): One of "week", "month" or "year".
        now (datetime, optional): The end of the period. Defaults to the current time.

    Raises:
        KeyError: If the period is not one of the supported names.
    """
    now = now or datetime.now()
    return now - STATS_PERIODS[period]


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """First and last instant of a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1) - timedelta(microseconds=1)
