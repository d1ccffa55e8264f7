"""
Maps Terra payloads into this service's records and applies them.

Covers activity → workout conversion, the daily and sleep summaries shown
on the devices page, idempotent activity import, and webhook events.
"""

import hashlib
import hmac
import logging
import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..core.config import settings
from ..repositories.base import ListQuery, OwnedRepository, Repositories
from ..utils.dates import parse_timestamp

logger = logging.getLogger(__name__)

ACTIVITY_TYPE_MAP = {
    "running": "cardio",
    "walking": "cardio",
    "cycling": "cardio",
    "swimming": "cardio",
    "hiking": "cardio",
    "strength_training": "strength",
    "weight_training": "strength",
    "yoga": "yoga",
    "hiit": "hiit",
    "crossfit": "hiit",
    "soccer": "sports",
    "basketball": "sports",
    "tennis": "sports",
}

WEARABLE_SOURCE = "wearable"


def _dig(payload: Any, *path: str, default: Any = None) -> Any:
    """Walks nested dicts, returning `default` at the first missing or null key."""
    for key in path:
        if not isinstance(payload, Mapping):
            return default
        payload = payload.get(key)
    return default if payload is None else payload


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _hours(seconds: float) -> float:
    return round(seconds / 3600, 1)


# --- Activity mapping ---

def determine_intensity(activity: Mapping, age: Optional[int] = None,
                        fallback_max_hr: Optional[int] = None) -> str:
    """
    Estimates workout intensity from average heart rate.

    The reference maximum is the device's reported max heart rate, else
    220 minus the user's age, else the configured fallback.

    Args:
        activity (Mapping): A Terra activity payload.
        age (int, optional): The user's age in years; 0 or None means unknown.
        fallback_max_hr (int, optional): Overrides FALLBACK_MAX_HEART_RATE.

    Returns:
        str: One of "low", "moderate", "high" or "extreme".
    """
    avg_hr = _dig(activity, "heart_rate_data", "summary", "avg_hr_bpm")
    if not avg_hr:
        return "moderate"

    max_hr = _dig(activity, "heart_rate_data", "summary", "max_hr_bpm")
    if not max_hr:
        max_hr = 220 - age if age else (fallback_max_hr or settings.FALLBACK_MAX_HEART_RATE)

    percentage = avg_hr / max_hr * 100
    if percentage >= 85:
        return "extreme"
    if percentage >= 70:
        return "high"
    if percentage >= 55:
        return "moderate"
    return "low"


def transform_to_workout(activity: Mapping, age: Optional[int] = None) -> Dict[str, Any]:
    """
    Converts one Terra activity into the column values of a Workout.

    A missing start time is replaced with the current time, which also means
    such an activity can never be matched as a duplicate later.
    """
    metadata = _dig(activity, "metadata", default={})
    activity_type = str(metadata.get("type") or "other").lower()
    device_name = metadata.get("source_name")

    completed_at = parse_timestamp(metadata.get("start_time"))
    if completed_at is None:
        logger.warning("Terra activity without a start time; using the current time")
        completed_at = datetime.now()

    return {
        "title": metadata.get("name") or f"{activity_type} Workout",
        "type": ACTIVITY_TYPE_MAP.get(activity_type, "mixed"),
        "exercises": [],
        "duration": _round_half_up(_dig(activity, "active_durations_data", "activity_seconds", default=0) / 60),
        "total_calories_burned": _round_half_up(_dig(activity, "calories_data", "total_burned_calories", default=0)),
        "intensity": determine_intensity(activity, age=age),
        "is_completed": True,
        "completed_at": completed_at,
        "source": WEARABLE_SOURCE,
        "source_device": device_name or "Unknown Device",
        "heart_rate_avg": _dig(activity, "heart_rate_data", "summary", "avg_hr_bpm"),
        "heart_rate_max": _dig(activity, "heart_rate_data", "summary", "max_hr_bpm"),
        "distance": _dig(activity, "distance_data", "summary", "distance_meters"),
        "steps": _dig(activity, "distance_data", "summary", "steps"),
        "notes": f"Synced from {device_name or 'wearable device'}",
    }


def sync_activities(workouts: OwnedRepository, owner_id: int, activities: Iterable[Mapping],
                    age: Optional[int] = None) -> List:
    """
    Stores the activities that are not already present as wearable workouts.

    An activity counts as present when the owner has a wearable workout with
    the same completion time, so repeating a sync inserts nothing new.

    Returns:
        list: The newly created workout records.
    """
    created = []
    for activity in activities:
        data = transform_to_workout(activity, age=age)
        duplicate = ListQuery(equals={"source": WEARABLE_SOURCE, "completed_at": data["completed_at"]})
        if workouts.count(owner_id, duplicate):
            continue
        created.append(workouts.create(owner_id, data))
    return created


# --- Daily and sleep summaries ---

def summarize_daily(record: Mapping) -> Dict[str, Any]:
    """Picks the headline numbers out of a Terra daily record."""
    return {
        "steps": _round_half_up(_dig(record, "distance_data", "steps", default=0)),
        "distance": _dig(record, "distance_data", "distance_meters", default=0),
        "calories_burned": _dig(record, "calories_data", "total_burned_calories", default=0),
        "active_minutes": _round_half_up(_dig(record, "active_durations_data", "activity_seconds", default=0) / 60),
        "avg_heart_rate": _dig(record, "heart_rate_data", "summary", "avg_hr_bpm"),
        "resting_heart_rate": _dig(record, "heart_rate_data", "summary", "resting_hr_bpm"),
        "stress_level": _dig(record, "stress_data", "avg_stress_level"),
    }


def summarize_sleep(record: Mapping) -> Dict[str, Any]:
    """Converts a Terra sleep record to hours (1 decimal) and awake minutes."""
    durations = _dig(record, "sleep_durations_data", default={})
    return {
        "date": _dig(record, "metadata", "start_time"),
        "total_sleep": _hours(_dig(durations, "total_sleep_time_seconds", default=0)),
        "deep_sleep": _hours(_dig(durations, "deep_sleep_seconds", default=0)),
        "light_sleep": _hours(_dig(durations, "light_sleep_seconds", default=0)),
        "rem_sleep": _hours(_dig(durations, "rem_sleep_seconds", default=0)),
        "awake_time": _round_half_up(_dig(durations, "awake_seconds", default=0) / 60),
        "sleep_efficiency": _dig(durations, "sleep_efficiency"),
        "sleep_score": _dig(record, "metadata", "sleep_score"),
    }


# --- Webhooks ---

def verify_webhook_signature(body: bytes, signature_header: Optional[str], secret: str) -> bool:
    """
    Checks a `terra-signature` header of the form `t=<timestamp>,v1=<hex digest>`.

    The digest is HMAC-SHA256 over "<timestamp>.<raw body>" keyed with the
    webhook secret.
    """
    if not signature_header:
        return False
    parts = dict(item.strip().split("=", 1) for item in signature_header.split(",") if "=" in item)
    timestamp, signature = parts.get("t"), parts.get("v1")
    if not timestamp or not signature:
        return False
    expected = hmac.new(secret.encode(), timestamp.encode() + b"." + body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


def _resolve_user(repos: Repositories, reference_id: Any):
    try:
        return repos.users.get(int(reference_id))
    except (TypeError, ValueError):
        return None


def handle_webhook_event(repos: Repositories, event: Mapping) -> None:
    """
    Applies one Terra webhook event.

    `auth` links the Terra user id to the local user named by `reference_id`,
    `deauth` unlinks it, and `activity` imports the activity (or list of
    activities) in `data` with the same duplicate check as a manual sync.
    Other event types are ignored.
    """
    kind = event.get("type")
    terra_user = event.get("user") or {}
    user = _resolve_user(repos, terra_user.get("reference_id"))
    if user is None:
        logger.info("Ignoring Terra '%s' event without a known reference id", kind)
        return

    if kind == "auth":
        repos.users.update(user.id, {"terra_user_id": terra_user.get("user_id")})
        logger.info("Linked Terra user %s to user %s", terra_user.get("user_id"), user.id)
    elif kind == "deauth":
        repos.users.update(user.id, {"terra_user_id": None})
        logger.info("Unlinked Terra device from user %s", user.id)
    elif kind == "activity":
        data = event.get("data")
        activities = data if isinstance(data, list) else [data] if data else []
        created = sync_activities(repos.workouts, user.id, activities, age=user.age)
        logger.info("Imported %d of %d pushed activities for user %s", len(created), len(activities), user.id)
    else:
        logger.info("Ignoring Terra event of type '%s'", kind)
