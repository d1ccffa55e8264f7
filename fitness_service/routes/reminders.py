"""
Defines all API endpoints related to user reminders.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status

from .. import auth, models, schemas
from ..errors import NotFoundError
from ..repositories.base import ListQuery, Repositories
from ..repositories.provider import get_repositories
from ..services.reminder_schedule import compute_next_trigger, is_due_on, weekday_name

# Create a new router for reminders
router = APIRouter(prefix="/reminders", tags=["Reminders"])

NOT_FOUND = "Reminder not found"


def _get_owned(repos: Repositories, user_id: int, reminder_id: int) -> models.Reminder:
    reminder = repos.reminders.get(user_id, reminder_id)
    if reminder is None:
        raise NotFoundError(NOT_FOUND)
    return reminder


@router.get("/", response_model=schemas.ListEnvelope[schemas.ReminderResponse])
def get_user_reminders(
    active: Optional[bool] = None,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Retrieves the authenticated user's reminders ordered by time of day.

    Args:
        active (bool, optional): Only active (true) or inactive (false) reminders.
    """
    query = ListQuery(equals={"is_active": active} if active is not None else {}, order_by=[("time", False)])
    reminders = repos.reminders.list(current_user.id, query)
    return {"success": True, "count": len(reminders), "data": reminders}


@router.get("/today", response_model=schemas.TodayReminders)
def get_todays_reminders(
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """Active reminders that fire today: listed for today's weekday, or for every day."""
    today = weekday_name(datetime.now())
    query = ListQuery(equals={"is_active": True}, order_by=[("time", False)])
    reminders = [r for r in repos.reminders.list(current_user.id, query) if is_due_on(r.days, today)]
    return {"success": True, "count": len(reminders), "day": today, "data": reminders}


@router.patch("/{reminder_id}/toggle", response_model=schemas.Envelope[schemas.ReminderResponse])
def toggle_reminder(
    reminder_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """Flips isActive; reactivating schedules the next trigger from now."""
    reminder = _get_owned(repos, current_user.id, reminder_id)
    data = {"is_active": not reminder.is_active}
    if data["is_active"]:
        data["next_trigger"] = compute_next_trigger(reminder.time, reminder.days)
    return {"success": True, "data": repos.reminders.update(current_user.id, reminder_id, data)}


@router.get("/{reminder_id}", response_model=schemas.Envelope[schemas.ReminderResponse])
def get_reminder(
    reminder_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    return {"success": True, "data": _get_owned(repos, current_user.id, reminder_id)}


@router.post("/", response_model=schemas.Envelope[schemas.ReminderResponse], status_code=status.HTTP_201_CREATED)
def create_reminder(
    reminder: schemas.ReminderCreate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Creates a new reminder for the authenticated user.
    """
    data = reminder.model_dump()
    data["next_trigger"] = compute_next_trigger(data["time"], data["days"])
    return {"success": True, "data": repos.reminders.create(current_user.id, data)}


@router.put("/{reminder_id}", response_model=schemas.Envelope[schemas.ReminderResponse])
def update_reminder(
    reminder_id: int,
    reminder: schemas.ReminderUpdate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Updates a reminder. The next trigger is recomputed when the time or the
    days change, or when the update reactivates the reminder.
    """
    existing = _get_owned(repos, current_user.id, reminder_id)
    data = reminder.model_dump(exclude_unset=True, exclude_none=True)

    reactivated = data.get("is_active") is True and not existing.is_active
    if "time" in data or "days" in data or reactivated:
        data["next_trigger"] = compute_next_trigger(data.get("time", existing.time), data.get("days", existing.days))

    return {"success": True, "data": repos.reminders.update(current_user.id, reminder_id, data)}


@router.delete("/{reminder_id}", response_model=schemas.Envelope[dict])
def delete_reminder(
    reminder_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Deletes a specific reminder for the authenticated user.
    """
    if not repos.reminders.delete(current_user.id, reminder_id):
        raise NotFoundError(NOT_FOUND)
    return {"success": True, "data": {}}
