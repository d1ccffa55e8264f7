import inspect
from datetime import datetime
from types import SimpleNamespace

import pytest

from fitness_service.services.analytics import bmi_trend, summarize, weight_trend, window_start


def _entry(day, weight, bmi, energy_level=5, sleep_hours=7):
    return SimpleNamespace(date=datetime(2024, 3, day), weight=weight, bmi=bmi,
                           energy_level=energy_level, sleep_hours=sleep_hours)


def test_summary_of_two_entries():
    entries = [_entry(1, 80, 26.2, energy_level=6, sleep_hours=7), _entry(8, 78, 25.5, energy_level=8, sleep_hours=8)]
    summary = summarize(entries)
    assert summary["start_weight"] == 80
    assert summary["current_weight"] == 78
    assert summary["weight_change"] == -2
    assert summary["bmi_change"] == -0.7
    assert summary["entries_count"] == 2
    assert summary["avg_energy_level"] == 7
    assert summary["avg_sleep_hours"] == 7.5


def test_summary_of_no_entries_is_none():
    assert summarize([]) is None


def test_single_entry_has_zero_deltas():
    summary = summarize([_entry(1, 72.4, 23.1)])
    assert summary["weight_change"] == 0
    assert summary["bmi_change"] == 0
    assert summary["start_weight"] == summary["current_weight"] == 72.4


def test_missing_energy_and_sleep_use_defaults():
    summary = summarize([_entry(1, 80, 26, energy_level=None, sleep_hours=None), _entry(2, 80, 26, energy_level=9, sleep_hours=6)])
    assert summary["avg_energy_level"] == 7
    assert summary["avg_sleep_hours"] == 3


def test_trends_are_lazy_and_chronological():
    entries = [_entry(1, 80, 26.2), _entry(8, 78, 25.5)]
    trend = weight_trend(entries)
    assert inspect.isgenerator(trend)
    assert list(trend) == [
        {"date": datetime(2024, 3, 1), "value": 80},
        {"date": datetime(2024, 3, 8), "value": 78},
    ]
    assert [point["value"] for point in bmi_trend(entries)] == [26.2, 25.5]


@pytest.mark.parametrize("window, days", [("week", 7), ("month", 30), ("3months", 90), ("year", 365)])
def test_window_lengths(window, days):
    now = datetime(2024, 6, 30, 12)
    assert (now - window_start(window, now)).days == days


def test_unknown_window_raises():
    with pytest.raises(KeyError):
        window_start("decade")
