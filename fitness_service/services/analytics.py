"""
Progress analytics: weight/BMI trends and a first-vs-last summary over a window.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Iterator, Optional, Sequence

# Analytics windows in days, counted back from now
ANALYTICS_WINDOWS = {
    "week": 7,
    "month": 30,
    "3months": 90,
    "year": 365,
}
DEFAULT_ENERGY_LEVEL = 5
DEFAULT_SLEEP_HOURS = 0


def window_start(window: str, now: Optional[datetime] = None) -> datetime:
    """
    Returns the first instant included in an analytics window.

    Raises:
        KeyError: If the window name is unknown.
    """
    now = now or datetime.now()
    return now - timedelta(days=ANALYTICS_WINDOWS[window])


def _trend(entries: Sequence[Any], field: str) -> Iterator[Dict[str, Any]]:
    for entry in entries:
        yield {"date": entry.date, "value": getattr(entry, field)}


def weight_trend(entries: Sequence[Any]) -> Iterator[Dict[str, Any]]:
    """Yields one {date, value} point per entry, in the order given."""
    return _trend(entries, "weight")


def bmi_trend(entries: Sequence[Any]) -> Iterator[Dict[str, Any]]:
    return _trend(entries, "bmi")


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def summarize(entries: Sequence[Any]) -> Optional[Dict[str, Any]]:
    """
    Builds the progress summary from entries ordered by date ascending.

    Args:
        entries: Progress entries inside the window, oldest first.

    Returns:
        Optional[Dict]: None when there are no entries. Otherwise the start
        and current weight/BMI taken from the first and last entry, their
        signed changes, the entry count, and the mean energy level and
        sleep hours.
    """
    if not entries:
        return None

    first, last = entries[0], entries[-1]
    start_bmi = first.bmi or 0
    current_bmi = last.bmi or 0
    energy = [e.energy_level if e.energy_level is not None else DEFAULT_ENERGY_LEVEL for e in entries]
    sleep = [e.sleep_hours if e.sleep_hours is not None else DEFAULT_SLEEP_HOURS for e in entries]

    return {
        "start_weight": first.weight,
        "current_weight": last.weight,
        "weight_change": round(last.weight - first.weight, 2),
        "start_bmi": start_bmi,
        "current_bmi": current_bmi,
        "bmi_change": round(current_bmi - start_bmi, 2),
        "entries_count": len(entries),
        "avg_energy_level": round(_mean(energy), 1),
        "avg_sleep_hours": round(_mean(sleep), 1),
    }
