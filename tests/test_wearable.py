import hashlib
import hmac
from datetime import datetime

import pytest

from fitness_service.services.wearable import (
    determine_intensity,
    handle_webhook_event,
    summarize_daily,
    summarize_sleep,
    sync_activities,
    transform_to_workout,
    verify_webhook_signature,
)


def make_activity(activity_type="running", start="2024-05-01T07:00:00", avg_hr=None, max_hr=None, **metadata):
    activity = {
        "metadata": {"type": activity_type, "name": metadata.get("name"), "start_time": start,
                     "source_name": metadata.get("source_name", "Garmin Forerunner")},
        "active_durations_data": {"activity_seconds": 1850},
        "calories_data": {"total_burned_calories": 412.6},
        "distance_data": {"summary": {"distance_meters": 5021.3, "steps": 6400}},
        "heart_rate_data": {"summary": {}},
    }
    if avg_hr is not None:
        activity["heart_rate_data"]["summary"]["avg_hr_bpm"] = avg_hr
    if max_hr is not None:
        activity["heart_rate_data"]["summary"]["max_hr_bpm"] = max_hr
    return activity


@pytest.mark.parametrize("activity_type, workout_type", [
    ("running", "cardio"),
    ("Hiking", "cardio"),
    ("weight_training", "strength"),
    ("yoga", "yoga"),
    ("crossfit", "hiit"),
    ("tennis", "sports"),
    ("kayaking", "mixed"),
])
def test_activity_type_mapping(activity_type, workout_type):
    assert transform_to_workout(make_activity(activity_type))["type"] == workout_type


def test_transform_to_workout_fields():
    workout = transform_to_workout(make_activity(avg_hr=150, max_hr=180))
    assert workout["title"] == "running Workout"
    assert workout["duration"] == 31
    assert workout["total_calories_burned"] == 413
    assert workout["source"] == "wearable"
    assert workout["source_device"] == "Garmin Forerunner"
    assert workout["completed_at"] == datetime(2024, 5, 1, 7, 0)
    assert workout["distance"] == 5021.3
    assert workout["steps"] == 6400
    assert workout["heart_rate_avg"] == 150
    assert workout["notes"] == "Synced from Garmin Forerunner"


def test_vendor_name_is_used_as_title():
    assert transform_to_workout(make_activity(name="Morning Run"))["title"] == "Morning Run"


def test_missing_start_time_falls_back_to_now():
    before = datetime.now()
    workout = transform_to_workout(make_activity(start=None))
    assert workout["completed_at"] >= before


@pytest.mark.parametrize("avg_hr, max_hr, intensity", [
    (None, None, "moderate"),
    (170, 200, "extreme"),
    (140, 200, "high"),
    (110, 200, "moderate"),
    (100, 200, "low"),
])
def test_intensity_from_heart_rate(avg_hr, max_hr, intensity):
    assert determine_intensity(make_activity(avg_hr=avg_hr, max_hr=max_hr)) == intensity


def test_intensity_uses_age_when_device_has_no_max():
    activity = make_activity(avg_hr=160)
    # 160 / 190 = 84% with the fallback, 160 / 180 = 89% for a 40 year old
    assert determine_intensity(activity) == "high"
    assert determine_intensity(activity, age=40) == "extreme"


def test_summarize_daily():
    record = {
        "distance_data": {"steps": 10342, "distance_meters": 7400},
        "calories_data": {"total_burned_calories": 2450},
        "active_durations_data": {"activity_seconds": 3690},
        "heart_rate_data": {"summary": {"avg_hr_bpm": 72, "resting_hr_bpm": 55}},
        "stress_data": {"avg_stress_level": 31},
    }
    assert summarize_daily(record) == {
        "steps": 10342,
        "distance": 7400,
        "calories_burned": 2450,
        "active_minutes": 62,
        "avg_heart_rate": 72,
        "resting_heart_rate": 55,
        "stress_level": 31,
    }


def test_summarize_daily_rounds_fractional_steps():
    summary = summarize_daily({"distance_data": {"steps": 8123.6},
                               "active_durations_data": {"activity_seconds": 1530}})
    assert summary["steps"] == 8124
    assert summary["active_minutes"] == 26


def test_summarize_daily_with_empty_record():
    summary = summarize_daily({})
    assert summary["steps"] == 0
    assert summary["avg_heart_rate"] is None


def test_summarize_sleep():
    record = {
        "metadata": {"start_time": "2024-05-01T23:10:00+00:00", "sleep_score": 81},
        "sleep_durations_data": {
            "total_sleep_time_seconds": 26280,
            "deep_sleep_seconds": 5400,
            "light_sleep_seconds": 14400,
            "rem_sleep_seconds": 6480,
            "awake_seconds": 1500,
            "sleep_efficiency": 0.93,
        },
    }
    assert summarize_sleep(record) == {
        "date": "2024-05-01T23:10:00+00:00",
        "total_sleep": 7.3,
        "deep_sleep": 1.5,
        "light_sleep": 4.0,
        "rem_sleep": 1.8,
        "awake_time": 25,
        "sleep_efficiency": 0.93,
        "sleep_score": 81,
    }


def test_sync_is_idempotent(repos):
    user = repos.users.create({"name": "Alex", "email": "alex@example.com", "hashed_password": "x"})
    activities = [make_activity(start="2024-05-01T07:00:00"), make_activity("yoga", start="2024-05-02T18:30:00")]

    first = sync_activities(repos.workouts, user.id, activities)
    second = sync_activities(repos.workouts, user.id, activities)

    assert len(first) == 2
    assert second == []
    assert repos.workouts.count(user.id) == 2


def test_manual_workout_does_not_block_sync(repos):
    user = repos.users.create({"name": "Alex", "email": "alex@example.com", "hashed_password": "x"})
    repos.workouts.create(user.id, {"title": "Run", "source": "manual", "completed_at": datetime(2024, 5, 1, 7, 0)})

    assert len(sync_activities(repos.workouts, user.id, [make_activity()])) == 1


def _sign(secret, timestamp, body):
    digest = hmac.new(secret.encode(), f"{timestamp}.".encode() + body, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def test_webhook_signature_verification():
    body = b'{"type": "auth"}'
    header = _sign("whsec", "1714550400", body)
    assert verify_webhook_signature(body, header, "whsec")
    assert not verify_webhook_signature(body, header, "other-secret")
    assert not verify_webhook_signature(b'{"type": "deauth"}', header, "whsec")
    assert not verify_webhook_signature(body, None, "whsec")
    assert not verify_webhook_signature(body, "garbage", "whsec")


def test_webhook_auth_activity_and_deauth(repos):
    user = repos.users.create({"name": "Alex", "email": "alex@example.com", "hashed_password": "x", "age": 30})
    terra_user = {"user_id": "terra-123", "reference_id": str(user.id)}

    handle_webhook_event(repos, {"type": "auth", "user": terra_user})
    assert repos.users.get(user.id).terra_user_id == "terra-123"

    handle_webhook_event(repos, {"type": "activity", "user": terra_user, "data": [make_activity()]})
    handle_webhook_event(repos, {"type": "activity", "user": terra_user, "data": make_activity()})
    assert repos.workouts.count(user.id) == 1

    handle_webhook_event(repos, {"type": "deauth", "user": terra_user})
    assert repos.users.get(user.id).terra_user_id is None


def test_webhook_for_unknown_user_is_ignored(repos):
    handle_webhook_event(repos, {"type": "auth", "user": {"user_id": "t", "reference_id": "not-a-number"}})
    handle_webhook_event(repos, {"type": "auth", "user": {"user_id": "t", "reference_id": "999"}})
    handle_webhook_event(repos, {"type": "sleep"})
