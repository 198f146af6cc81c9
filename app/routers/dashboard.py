# =============================================================================
# app/routers/dashboard.py - Home Screen Widgets
# =============================================================================
# The kiosk polls these every few minutes. Failures are logged and turned
# into empty payloads so a flaky upstream never blanks the screen.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query

from core.models.tasks import TaskActionRequest
from core.services.calendar_service import CalendarService
from core.services.task_service import TaskService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/calendar")
async def today_calendar() -> dict[str, Any]:
    """Today's events (family timezone)."""
    try:
        return {"events": CalendarService.get_today_events()}
    except Exception as e:
        logger.error(f"Dashboard calendar failed: {e}")
        return {"events": []}


@router.get("/tasks")
async def dashboard_tasks(
    user_id: Annotated[str | None, Query(description="Signed-in user id")] = None,
) -> dict[str, Any]:
    """
    Tasks for the widget.

    Without a user only the house project is shown; signed-in users see
    everything except other people's private projects.
    """
    try:
        viewer = SupabaseClient.fetch_user(user_id) if user_id else None
        tasks = TaskService.get_dashboard_tasks(
            viewer_name=viewer["name"] if viewer else None,
            signed_in=viewer is not None,
        )
    except Exception as e:
        logger.error(f"Dashboard tasks failed: {e}")
        return {"tasks": []}

    return {"tasks": tasks}


@router.post("/tasks")
async def dashboard_task_action(request: TaskActionRequest) -> dict[str, Any]:
    """Complete a task from the widget."""
    TaskService.complete_task(request.task_id)
    return {"success": True}
