"""
Defines the API endpoints for logging and reviewing workouts.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from .. import auth, models, schemas
from ..errors import NotFoundError
from ..repositories.base import ListQuery, Repositories
from ..repositories.provider import get_repositories
from ..services.workouts import total_calories_burned, workout_summary, workouts_by_type
from ..utils.dates import period_start
from ..utils.pagination import paginate

router = APIRouter(prefix="/workouts", tags=["Workouts"])

NOT_FOUND = "Workout not found"


@router.get("/", response_model=schemas.Page[schemas.WorkoutResponse])
def list_workouts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    type: Optional[schemas.WorkoutType] = None,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Lists the caller's workouts, newest first.

    Args:
        page (int): 1-based page number.
        limit (int): Page size.
        type (WorkoutType, optional): Only workouts of this type.
        start_date / end_date (datetime, optional): Inclusive bounds on completedAt.
    """
    query = ListQuery(
        equals={"type": type.value} if type else {},
        date_field="completed_at",
        start=start_date,
        end=end_date,
        order_by=[("completed_at", True), ("id", True)],
    )
    return paginate(repos.workouts, current_user.id, query, page, limit)


@router.get("/stats", response_model=schemas.Envelope[schemas.WorkoutStats])
def get_workout_stats(
    period: schemas.StatsPeriod = schemas.StatsPeriod.WEEK,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """Totals and per-type counts for workouts completed in the period."""
    query = ListQuery(date_field="completed_at", start=period_start(period.value))
    workouts = repos.workouts.list(current_user.id, query)
    return {
        "success": True,
        "data": {
            "period": period.value,
            "summary": workout_summary(workouts),
            "by_type": workouts_by_type(workouts),
        },
    }


@router.get("/{workout_id}", response_model=schemas.Envelope[schemas.WorkoutResponse])
def get_workout(
    workout_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    workout = repos.workouts.get(current_user.id, workout_id)
    if workout is None:
        raise NotFoundError(NOT_FOUND)
    return {"success": True, "data": workout}


@router.post("/", response_model=schemas.Envelope[schemas.WorkoutResponse], status_code=status.HTTP_201_CREATED)
def create_workout(
    workout: schemas.WorkoutCreate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Logs a workout.

    When exercises are given, totalCaloriesBurned is their sum and any
    supplied total is ignored.
    """
    data = workout.model_dump()
    data["total_calories_burned"] = total_calories_burned(data["exercises"], data["total_calories_burned"])
    data["completed_at"] = data["completed_at"] or datetime.now()
    data["source"] = "manual"
    return {"success": True, "data": repos.workouts.create(current_user.id, data)}


@router.put("/{workout_id}", response_model=schemas.Envelope[schemas.WorkoutResponse])
def update_workout(
    workout_id: int,
    workout: schemas.WorkoutUpdate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    existing = repos.workouts.get(current_user.id, workout_id)
    if existing is None:
        raise NotFoundError(NOT_FOUND)

    data = workout.model_dump(exclude_unset=True, exclude_none=True)
    if "exercises" in data:
        # The stored total came from the exercises being replaced
        supplied = data.get("total_calories_burned", 0)
        data["total_calories_burned"] = total_calories_burned(data["exercises"], supplied)

    return {"success": True, "data": repos.workouts.update(current_user.id, workout_id, data)}


@router.delete("/{workout_id}", response_model=schemas.Envelope[dict])
def delete_workout(
    workout_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    if not repos.workouts.delete(current_user.id, workout_id):
        raise NotFoundError(NOT_FOUND)
    return {"success": True, "data": {}}
