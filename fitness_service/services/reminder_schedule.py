"""
Next-occurrence calculation for reminders.

A reminder fires at a wall-clock time on a set of weekdays. An empty weekday
list means the reminder fires every day. Whether a reminder is recurring does
not change the calculation.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple

from ..errors import ValidationError

# Index matches datetime.weekday(): Monday is 0
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def weekday_name(moment: datetime) -> str:
    return WEEKDAYS[moment.weekday()]


def parse_time(value: str) -> Tuple[int, int]:
    """
    Splits an "HH:MM" string into hours and minutes.

    Raises:
        ValidationError: If the string is not a valid 24-hour time.
    """
    try:
        hours_str, minutes_str = value.split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid reminder time '{value}', expected HH:MM")
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValidationError(f"Invalid reminder time '{value}', expected HH:MM")
    return hours, minutes


def compute_next_trigger(time: str, days: Optional[Iterable[str]], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Computes when a reminder should fire next.

    Args:
        time (str): Time of day as "HH:MM".
        days (Iterable[str]): Lower-case weekday names; empty means every day.
        now (datetime, optional): Reference time. Defaults to the current time.

    Returns:
        Optional[datetime]: The first matching instant strictly after `now`,
        or None when none of `days` is a weekday name.
    """
    hours, minutes = parse_time(time)
    now = now or datetime.now()
    today_at = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    days = set(days or ())

    if not days:
        return today_at if today_at > now else today_at + timedelta(days=1)

    # Offset 7 reaches the same weekday next week once today's time has passed
    for offset in range(8):
        candidate = today_at + timedelta(days=offset)
        if weekday_name(candidate) in days and candidate > now:
            return candidate
    return None


def is_due_on(days: Optional[Iterable[str]], weekday: str) -> bool:
    """True if a reminder with these days fires on the given weekday."""
    days = list(days or ())
    return not days or weekday in days
