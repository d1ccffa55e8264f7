"""
Defines the API endpoints for connecting wearables through Terra and
importing their data.

Every endpoint except the webhook acts for the authenticated user. The
webhook is called by Terra itself and always answers 200 so that Terra does
not keep retrying an event this service cannot process.
"""

import json
import logging
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from .. import auth, models, schemas
from ..core.config import settings
from ..errors import UpstreamVendorError, ValidationError
from ..repositories.base import Repositories
from ..repositories.provider import get_repositories
from ..services.terra_client import TerraClient, get_terra_client
from ..services.wearable import (
    handle_webhook_event,
    summarize_daily,
    summarize_sleep,
    sync_activities,
    verify_webhook_signature,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/devices", tags=["Devices"])


def _require_device(user: models.User, message: str = "No device connected") -> str:
    if not user.terra_user_id:
        raise ValidationError(message)
    return user.terra_user_id


def _lookback_start() -> date:
    return date.today() - timedelta(days=settings.SYNC_LOOKBACK_DAYS)


@router.get("/connect", response_model=schemas.ConnectResponse)
async def connect_device(
    current_user: models.User = Depends(auth.get_current_user),
    terra: TerraClient = Depends(get_terra_client),
):
    """
    Returns a Terra widget URL where the user authorizes a device.

    Raises:
        UpstreamVendorError: 400 with Terra's message if the session cannot be created.
    """
    session = await terra.generate_widget_session(str(current_user.id))
    return {
        "success": True,
        "widget_url": session["widget_url"],
        "session_id": session["session_id"],
        "message": "Open the widget URL to connect your device",
    }


@router.get("/", response_model=schemas.DevicesResponse)
async def get_devices(
    current_user: models.User = Depends(auth.get_current_user),
    terra: TerraClient = Depends(get_terra_client),
):
    """Lists the connected device, as reported by Terra."""
    if not current_user.terra_user_id:
        return {
            "success": True,
            "connected": False,
            "devices": [],
            "message": "No devices connected. Use /connect to link a device.",
        }

    try:
        info = await terra.get_user_info(current_user.terra_user_id)
    except UpstreamVendorError as e:
        logger.warning("Could not load devices for user %s: %s", current_user.id, e.message)
        info = {}

    devices = info.get("user")
    return {"success": True, "connected": True, "devices": [devices] if isinstance(devices, dict) else devices or []}


@router.post("/sync", response_model=schemas.SyncResponse)
async def sync_device(
    payload: Optional[schemas.SyncRequest] = None,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
    terra: TerraClient = Depends(get_terra_client),
):
    """
    Imports activities from the connected device as workouts.

    Defaults to the last SYNC_LOOKBACK_DAYS days. Activities already imported
    are skipped, so running a sync twice is harmless.
    """
    terra_user_id = _require_device(current_user, "No device connected. Please connect a device first.")
    payload = payload or schemas.SyncRequest()
    start = payload.start_date or _lookback_start()
    end = payload.end_date or date.today()

    activities = await terra.get_activity(terra_user_id, start, end)
    created = sync_activities(repos.workouts, current_user.id, activities, age=current_user.age)
    logger.info("Synced %d of %d activities for user %s", len(created), len(activities), current_user.id)

    return {
        "success": True,
        "synced": len(created),
        "total": len(activities),
        "workouts": created,
        "message": f"Synced {len(created)} new workouts from your device",
    }


@router.get("/daily", response_model=schemas.DailySummaryResponse)
async def get_daily_summary(
    day: Optional[date] = Query(None, alias="date"),
    current_user: models.User = Depends(auth.get_current_user),
    terra: TerraClient = Depends(get_terra_client),
):
    """Steps, distance, calories and heart rate for one day (default today)."""
    terra_user_id = _require_device(current_user)
    day = day or date.today()
    records = await terra.get_daily(terra_user_id, day, day)
    return {"success": True, "date": day.isoformat(), "data": summarize_daily(records[0]) if records else None}


@router.get("/sleep", response_model=schemas.SleepResponse)
async def get_sleep_summary(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    current_user: models.User = Depends(auth.get_current_user),
    terra: TerraClient = Depends(get_terra_client),
):
    """Sleep sessions in the range (default the last SYNC_LOOKBACK_DAYS days)."""
    terra_user_id = _require_device(current_user)
    records = await terra.get_sleep(terra_user_id, start_date or _lookback_start(), end_date or date.today())
    return {"success": True, "sleep_data": [summarize_sleep(record) for record in records]}


@router.delete("/disconnect", response_model=schemas.MessageResponse)
async def disconnect_device(
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
    terra: TerraClient = Depends(get_terra_client),
):
    """
    Revokes the device at Terra and unlinks it locally.

    The local link is removed even if Terra rejects the revocation.
    """
    terra_user_id = _require_device(current_user)
    try:
        await terra.disconnect_user(terra_user_id)
    except UpstreamVendorError as e:
        logger.warning("Terra disconnect failed for user %s: %s", current_user.id, e.message)

    repos.users.update(current_user.id, {"terra_user_id": None})
    return {"success": True, "message": "Device disconnected successfully"}


@router.post("/webhook", response_model=schemas.WebhookAck)
async def terra_webhook(request: Request, repos: Repositories = Depends(get_repositories)):
    """
    Receives Terra push events (auth, deauth, activity).

    When TERRA_WEBHOOK_SECRET is set, events without a valid signature are
    dropped. Processing errors are logged and never reach Terra.
    """
    body = await request.body()

    if settings.TERRA_WEBHOOK_SECRET and not verify_webhook_signature(
        body, request.headers.get("terra-signature"), settings.TERRA_WEBHOOK_SECRET
    ):
        logger.warning("Dropping Terra webhook with a missing or invalid signature")
        return {"success": True}

    try:
        event = json.loads(body)
        if not isinstance(event, dict):
            raise ValueError("webhook body is not a JSON object")
        handle_webhook_event(repos, event)
    except Exception:
        logger.exception("Failed to process Terra webhook")

    return {"success": True}
