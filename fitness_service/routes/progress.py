"""
Defines the API endpoints for body-progress check-ins, the BMI calculator
and progress analytics.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from .. import auth, models, schemas
from ..errors import NotFoundError
from ..repositories.base import ListQuery, Repositories
from ..repositories.provider import get_repositories
from ..services.analytics import bmi_trend, summarize, weight_trend, window_start
from ..services.bmi import compute_bmi, derive_bmi
from ..utils.pagination import paginate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["Progress"])

NOT_FOUND = "Progress entry not found"


def _is_latest_entry(repos: Repositories, user_id: int, entry_id: int) -> bool:
    latest = repos.progress.list(user_id, ListQuery(order_by=[("date", True), ("id", True)], limit=1))
    return bool(latest) and latest[0].id == entry_id


@router.get("/", response_model=schemas.Page[schemas.ProgressResponse])
def list_progress(
    page: int = Query(1, ge=1),
    limit: int = Query(30, ge=1, le=365),
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """Lists the caller's check-ins, newest first."""
    query = ListQuery(order_by=[("date", True), ("id", True)])
    return paginate(repos.progress, current_user.id, query, page, limit)


@router.post("/bmi", response_model=schemas.Envelope[schemas.BMIResult])
def calculate_bmi(request: schemas.BMIRequest, current_user: models.User = Depends(auth.get_current_user)):
    """
    Stateless BMI calculator.

    Raises:
        InvalidInput: 400 if weight or height is not positive.
    """
    result = compute_bmi(request.weight, request.height)
    return {"success": True, "data": {**result, "current_weight": request.weight, "height": request.height}}


@router.get("/analytics", response_model=schemas.Envelope[schemas.ProgressAnalytics])
def get_progress_analytics(
    period: schemas.AnalyticsWindow = schemas.AnalyticsWindow.MONTH,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Weight and BMI trends plus a first-vs-last summary for the window.

    Args:
        period (AnalyticsWindow): week (7 days), month (30), 3months (90) or year (365).
    """
    query = ListQuery(date_field="date", start=window_start(period.value), order_by=[("date", False), ("id", False)])
    entries = repos.progress.list(current_user.id, query)
    return {
        "success": True,
        "data": {
            "period": period.value,
            "weight_trend": list(weight_trend(entries)),
            "bmi_trend": list(bmi_trend(entries)),
            "summary": summarize(entries),
        },
    }


@router.get("/{entry_id}", response_model=schemas.Envelope[schemas.ProgressResponse])
def get_progress_entry(
    entry_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    entry = repos.progress.get(current_user.id, entry_id)
    if entry is None:
        raise NotFoundError(NOT_FOUND)
    return {"success": True, "data": entry}


@router.post("/", response_model=schemas.Envelope[schemas.ProgressResponse], status_code=status.HTTP_201_CREATED)
def create_progress_entry(
    entry: schemas.ProgressCreate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Records a check-in.

    BMI is derived from the weight and the user's stored height (0 when the
    height is unknown), and the weight becomes the user's current weight.
    """
    data = entry.model_dump()
    data["date"] = data["date"] or datetime.now()
    data["bmi"] = derive_bmi(data["weight"], current_user.height_cm)

    created = repos.progress.create(current_user.id, data)
    repos.users.update(current_user.id, {"weight_kg": data["weight"]})
    logger.info("User %s recorded weight %.1f kg", current_user.id, data["weight"])
    return {"success": True, "data": created}


@router.put("/{entry_id}", response_model=schemas.Envelope[schemas.ProgressResponse])
def update_progress_entry(
    entry_id: int,
    entry: schemas.ProgressUpdate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Updates a check-in. A new weight recomputes its BMI, and also replaces
    the user's current weight when this is their most recent entry.
    """
    data = entry.model_dump(exclude_unset=True, exclude_none=True)
    if "weight" in data:
        data["bmi"] = derive_bmi(data["weight"], current_user.height_cm)

    updated = repos.progress.update(current_user.id, entry_id, data)
    if updated is None:
        raise NotFoundError(NOT_FOUND)

    if "weight" in data and _is_latest_entry(repos, current_user.id, entry_id):
        repos.users.update(current_user.id, {"weight_kg": data["weight"]})
    return {"success": True, "data": updated}


@router.delete("/{entry_id}", response_model=schemas.Envelope[dict])
def delete_progress_entry(
    entry_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    if not repos.progress.delete(current_user.id, entry_id):
        raise NotFoundError(NOT_FOUND)
    return {"success": True, "data": {}}
