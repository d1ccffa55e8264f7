from datetime import datetime

import pytest

from fitness_service.errors import ValidationError
from fitness_service.services.reminder_schedule import compute_next_trigger, is_due_on, parse_time, weekday_name

WEDNESDAY_8AM = datetime(2024, 5, 1, 8, 0)
MONDAY_10AM = datetime(2024, 5, 6, 10, 0)


def test_daily_reminder_later_today():
    assert compute_next_trigger("09:00", [], now=WEDNESDAY_8AM) == datetime(2024, 5, 1, 9, 0)


def test_daily_reminder_already_passed_rolls_to_tomorrow():
    now = datetime(2024, 5, 1, 10, 0)
    assert compute_next_trigger("09:00", [], now=now) == datetime(2024, 5, 2, 9, 0)


def test_exact_time_is_not_strictly_after_now():
    now = datetime(2024, 5, 1, 9, 0)
    assert compute_next_trigger("09:00", None, now=now) == datetime(2024, 5, 2, 9, 0)


def test_weekly_reminder_finds_next_matching_day():
    assert weekday_name(WEDNESDAY_8AM) == "wednesday"
    assert compute_next_trigger("07:30", ["monday"], now=WEDNESDAY_8AM) == datetime(2024, 5, 6, 7, 30)


def test_same_weekday_after_time_skips_to_next_week():
    assert weekday_name(MONDAY_10AM) == "monday"
    assert compute_next_trigger("09:00", ["monday"], now=MONDAY_10AM) == datetime(2024, 5, 13, 9, 0)


def test_same_weekday_before_time_fires_today():
    assert compute_next_trigger("18:00", ["monday", "friday"], now=MONDAY_10AM) == datetime(2024, 5, 6, 18, 0)


def test_picks_earliest_of_several_days():
    assert compute_next_trigger("06:00", ["sunday", "thursday"], now=WEDNESDAY_8AM) == datetime(2024, 5, 2, 6, 0)


def test_unknown_day_names_give_no_trigger():
    assert compute_next_trigger("06:00", ["someday"], now=WEDNESDAY_8AM) is None


@pytest.mark.parametrize("value", ["9am", "24:00", "12:60", "", "12"])
def test_parse_time_rejects_malformed(value):
    with pytest.raises(ValidationError):
        parse_time(value)


def test_parse_time():
    assert parse_time("07:05") == (7, 5)


def test_is_due_on():
    assert is_due_on([], "tuesday")
    assert is_due_on(None, "tuesday")
    assert is_due_on(["tuesday", "thursday"], "tuesday")
    assert not is_due_on(["monday"], "tuesday")
