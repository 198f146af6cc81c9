# =============================================================================
# core/services/calendar_service.py - Cached Calendar Queries
# =============================================================================
# Reads cached_calendar_events (filled by the iCal sync and by phone
# shortcuts) and answers the calendar questions the kiosk, the parents
# dashboard and the chat assistant ask:
# - What's on in the next N days / today?
# - When am I free this week?
# - Where would a 2-hour task fit?
# =============================================================================

import logging
from datetime import datetime
from typing import Any

from core.models.calendar import SuggestTimeRequest
from lib.calendar_utils import (
    KNOWN_CALENDARS,
    day_bounds,
    filter_events_in_window,
    get_calendars_for_member,
    window_from_today,
)
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.time_blocking import (
    calculate_free_slots,
    estimate_task_duration,
    format_duration,
    suggest_time_block,
)
from lib.utils import utc_now

logger = logging.getLogger(__name__)

EVENTS_TABLE = "cached_calendar_events"


class CalendarService:
    """
    Service for cached calendar reads.

    Provides a clean interface between API routes and the cache table.
    """

    @staticmethod
    def get_cached_events(days: int = 14, now: datetime | None = None) -> list[dict[str, Any]]:
        """
        Get cached events starting in [start of today, start of today + days).

        "Today" is measured in the family timezone.

        Raises:
            SupabaseClientError: If the query fails
        """
        start, end = window_from_today(days, now=now)
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(EVENTS_TABLE)
                .select("*")
                .gte("start_time", start.isoformat())
                .lt("start_time", end.isoformat())
                .order("start_time")
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch calendar events: {e}",
                code="FETCH_EVENTS_FAILED",
                suggestion="Check that the cached_calendar_events table exists",
            )

        events = response.data or []
        logger.debug(f"Fetched {len(events)} cached events for {days} days")
        return events

    @staticmethod
    def get_events(days: int = 14, calendar: str | None = None) -> list[dict[str, Any]]:
        """Events in the window, optionally limited to one calendar name (exact match)."""
        events = CalendarService.get_cached_events(days)
        if calendar:
            events = [e for e in events if e.get("calendar_name") == calendar]
        return events

    @staticmethod
    def get_today_events(now: datetime | None = None) -> list[dict[str, Any]]:
        """Today's events, re-filtered in Python against today's bounds."""
        events = CalendarService.get_cached_events(1, now=now)
        start, end = day_bounds(now)
        return filter_events_in_window(events, start, end)

    @staticmethod
    def get_calendar_names(member: str | None = None) -> dict[str, Any]:
        """Known calendars and, if asked, the ones a family member follows."""
        result: dict[str, Any] = {"calendars": list(KNOWN_CALENDARS)}
        if member:
            result["member"] = member
            result["member_calendars"] = get_calendars_for_member(member)
        return result

    # -------------------------------------------------------------------------
    # Time Blocking
    # -------------------------------------------------------------------------

    @staticmethod
    def get_free_time(
        days: int = 7,
        min_duration: int = 30,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Free weekday working-hour slots over the next `days` days.

        Returns:
            Dict with slots (each at least min_duration minutes) and the
            total free time
        """
        now = now or utc_now()
        start, end = window_from_today(days, now=now)
        events = CalendarService.get_cached_events(days, now=now)

        slots = [
            slot for slot in calculate_free_slots(events, start, end, now=now)
            if slot.duration >= min_duration
        ]
        total = sum(slot.duration for slot in slots)

        return {
            "slots": [slot.to_dict() for slot in slots],
            "total_free_minutes": total,
            "total_free_label": format_duration(total),
            "days": days,
        }

    @staticmethod
    def suggest_time(request: SuggestTimeRequest, now: datetime | None = None) -> dict[str, Any]:
        """
        Suggest a time block for a task.

        The duration comes from the request or is estimated from the task
        description. Returns suggestion None when nothing fits.
        """
        now = now or utc_now()
        minutes = request.duration_minutes or estimate_task_duration(request.task or "")
        start, end = window_from_today(request.days, now=now)
        events = CalendarService.get_cached_events(request.days, now=now)

        slots = calculate_free_slots(events, start, end, now=now)
        block = suggest_time_block(
            slots,
            minutes,
            prefer_morning=request.prefer_morning,
            buffer_minutes=request.buffer_minutes,
        )

        return {
            "task": request.task,
            "estimated_minutes": minutes,
            "suggestion": block.to_dict() if block else None,
            "message": None if block else (
                f"No free slot of {format_duration(minutes)} in the next {request.days} days"
            ),
        }
