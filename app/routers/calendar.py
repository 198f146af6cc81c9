# =============================================================================
# app/routers/calendar.py - Calendar Endpoints
# =============================================================================
# Read access to the calendar cache plus the time-blocking helpers.
# =============================================================================

from typing import Annotated, Any

from fastapi import APIRouter, Query

from core.models.calendar import SuggestTimeRequest
from core.services.calendar_service import CalendarService

router = APIRouter()


@router.get("")
async def list_events(
    days: Annotated[int, Query(ge=1, le=90, description="Days from the start of today")] = 14,
    calendar: Annotated[str | None, Query(description="Only this calendar (exact name)")] = None,
) -> dict[str, Any]:
    """
    Cached events starting in the next `days` days.

    Example:
        GET /api/v1/calendar?days=7&calendar=Sports
    """
    return {"events": CalendarService.get_events(days, calendar)}


@router.get("/calendars")
async def list_calendars(
    member: Annotated[str | None, Query(description="Family member name")] = None,
) -> dict[str, Any]:
    """Known calendar names and, with `member`, the calendars they follow."""
    return CalendarService.get_calendar_names(member)


@router.get("/free-time")
async def free_time(
    days: Annotated[int, Query(ge=1, le=30)] = 7,
    min_duration: Annotated[int, Query(ge=15, le=480, description="Minutes")] = 30,
) -> dict[str, Any]:
    """Free weekday slots between 9:00 and 17:00."""
    return CalendarService.get_free_time(days=days, min_duration=min_duration)


@router.post("/suggest-time")
async def suggest_time(request: SuggestTimeRequest) -> dict[str, Any]:
    """
    Suggest a block for a task.

    Example:
        POST /api/v1/calendar/suggest-time
        {"task": "Write the school newsletter", "prefer_morning": true}
    """
    return CalendarService.suggest_time(request)
