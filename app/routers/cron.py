# =============================================================================
# app/routers/cron.py - Scheduled Sync Endpoints
# =============================================================================
# GET is called by an external scheduler (Authorization: Bearer CRON_SECRET);
# POST lets a person trigger the same sync with a shortcut key.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.dependencies import require_cron_secret, require_manual_sync_key
from app.exceptions import OperationFailedError
from core.services.calendar_sync import CalendarSyncService
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


def _run_sync() -> dict[str, Any]:
    try:
        result = CalendarSyncService.sync_all_calendars()
    except Exception as e:
        logger.exception(f"Calendar sync failed: {e}")
        raise OperationFailedError("Calendar sync failed", details={"error": str(e)})

    return {"success": True, **result.model_dump(), "synced_at": utc_now_iso()}


@router.get("/sync-calendars", dependencies=[Depends(require_cron_secret)])
async def scheduled_sync() -> dict[str, Any]:
    """Sync every configured iCal feed into the calendar cache."""
    return _run_sync()


@router.post("/sync-calendars", dependencies=[Depends(require_manual_sync_key)])
async def manual_sync() -> dict[str, Any]:
    return _run_sync()
