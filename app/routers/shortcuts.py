# =============================================================================
# app/routers/shortcuts.py - Phone Automation Endpoints
# =============================================================================
# Phone shortcuts push the phone's calendar and reminders here. Every
# endpoint requires X-Shortcut-Key == SHORTCUTS_SECRET_KEY.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from app.dependencies import require_shortcut_key
from app.exceptions import InvalidInputError
from core.models.calendar import ShortcutCalendarSyncResult
from core.models.reminder import ReminderSyncRequest
from core.services.calendar_sync import CalendarSyncService
from core.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_shortcut_key)])


@router.post("/calendar", response_model=ShortcutCalendarSyncResult)
async def push_calendar(body: Any = Body(...)) -> ShortcutCalendarSyncResult:
    """
    Upsert phone calendar events into the cache.

    The body is either a list of events or {"events": [...]}.
    """
    events = body.get("events") if isinstance(body, dict) else body
    if not isinstance(events, list):
        raise InvalidInputError(
            "Expected a list of events or {\"events\": [...]}",
            field="events",
        )

    logger.info(f"Shortcut calendar push with {len(events)} events")
    return CalendarSyncService.sync_shortcut_events(events)


@router.get("/calendar")
async def calendar_status() -> dict[str, Any]:
    """The first 20 cached events by start time."""
    events = CalendarSyncService.list_recent_events()
    return {"count": len(events), "events": events}


@router.post("/reminders")
async def push_reminders(request: ReminderSyncRequest) -> dict[str, Any]:
    """
    Upsert the pushed reminders into a family member's cache.

    Example:
        {"user": "Alex", "reminders": [{"title": "Buy milk", "list_name": "Groceries"}]}
    """
    count = ReminderService.sync_pushed_reminders(request.user, request.reminders)
    return {"success": True, "count": count}
