"""
Defines the API endpoints for the meal log and nutrition totals.
"""

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from .. import auth, models, schemas
from ..errors import NotFoundError
from ..repositories.base import ListQuery, Repositories
from ..repositories.provider import get_repositories
from ..services.nutrition import daily_nutrition_series, day_total, meal_total, nutrition_averages
from ..utils.dates import day_bounds, period_start
from ..utils.pagination import paginate

router = APIRouter(prefix="/meals", tags=["Meals"])

NOT_FOUND = "Meal not found"


@router.get("/", response_model=schemas.Page[schemas.MealResponse])
def list_meals(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    type: Optional[schemas.MealType] = None,
    day: Optional[date] = Query(None, alias="date"),
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """Lists the caller's meals, newest first, optionally for one type or day."""
    query = ListQuery(
        equals={"type": type.value} if type else {},
        order_by=[("date", True), ("created_at", True), ("id", True)],
    )
    if day is not None:
        query.date_field = "date"
        query.start, query.end = day_bounds(day)
    return paginate(repos.meals, current_user.id, query, page, limit)


@router.get("/stats", response_model=schemas.Envelope[schemas.NutritionStats])
def get_nutrition_stats(
    period: schemas.StatsPeriod = schemas.StatsPeriod.WEEK,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """Per-day nutrition totals and per-meal averages over the period."""
    query = ListQuery(date_field="date", start=period_start(period.value), order_by=[("date", False)])
    meals = repos.meals.list(current_user.id, query)
    return {
        "success": True,
        "data": {
            "period": period.value,
            "daily": daily_nutrition_series(meals),
            "averages": nutrition_averages(meals),
        },
    }


@router.get("/favorites", response_model=schemas.ListEnvelope[schemas.MealResponse])
def list_favorite_meals(
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    meals = repos.meals.list(current_user.id, ListQuery(equals={"is_favorite": True}, order_by=[("name", False)]))
    return {"success": True, "count": len(meals), "data": meals}


@router.get("/daily/{day}", response_model=schemas.DailyMealsResponse)
def get_meals_by_date(
    day: date,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Returns all meals logged on a calendar day with the day's nutrition totals.

    Args:
        day (date): The day as YYYY-MM-DD.
    """
    start, end = day_bounds(day)
    query = ListQuery(date_field="date", start=start, end=end, order_by=[("type", False), ("date", False)])
    meals = repos.meals.list(current_user.id, query)
    return {
        "success": True,
        "date": day.isoformat(),
        "count": len(meals),
        "daily_totals": day_total(meals),
        "data": meals,
    }


@router.get("/{meal_id}", response_model=schemas.Envelope[schemas.MealResponse])
def get_meal(
    meal_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    meal = repos.meals.get(current_user.id, meal_id)
    if meal is None:
        raise NotFoundError(NOT_FOUND)
    return {"success": True, "data": meal}


@router.post("/", response_model=schemas.Envelope[schemas.MealResponse], status_code=status.HTTP_201_CREATED)
def create_meal(
    meal: schemas.MealCreate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    data = meal.model_dump()
    data["date"] = data["date"] or datetime.now()
    data["total_nutrition"] = meal_total(data["foods"])
    return {"success": True, "data": repos.meals.create(current_user.id, data)}


@router.put("/{meal_id}", response_model=schemas.Envelope[schemas.MealResponse])
def update_meal(
    meal_id: int,
    meal: schemas.MealUpdate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """Updates a meal; replacing the food list recomputes totalNutrition."""
    data = meal.model_dump(exclude_unset=True, exclude_none=True)
    if "foods" in data:
        data["total_nutrition"] = meal_total(data["foods"])

    updated = repos.meals.update(current_user.id, meal_id, data)
    if updated is None:
        raise NotFoundError(NOT_FOUND)
    return {"success": True, "data": updated}


@router.delete("/{meal_id}", response_model=schemas.Envelope[dict])
def delete_meal(
    meal_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    if not repos.meals.delete(current_user.id, meal_id):
        raise NotFoundError(NOT_FOUND)
    return {"success": True, "data": {}}
