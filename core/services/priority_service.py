# =============================================================================
# core/services/priority_service.py - Weekly Priorities
# =============================================================================
# Up to five numbered priorities per week in weekly_priorities. A week is
# identified by its Monday (family-local date, YYYY-MM-DD).
# =============================================================================

import logging
from datetime import date, timedelta

from app.exceptions import InvalidInputError
from core.models.priorities import MAX_PRIORITIES, WeeklyPriority
from lib.calendar_utils import day_bounds
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

TABLE = "weekly_priorities"


def get_current_week_start(today: date | None = None) -> str:
    """Monday of the current week."""
    today = today or day_bounds()[0].date()
    return (today - timedelta(days=today.weekday())).isoformat()


def get_previous_week_start(today: date | None = None) -> str:
    """Monday of last week."""
    today = today or day_bounds()[0].date()
    return (today - timedelta(days=today.weekday() + 7)).isoformat()


class PriorityService:
    """Service for the weekly priorities list."""

    @staticmethod
    def get_weekly_priorities(week_start: str) -> list[WeeklyPriority]:
        client = SupabaseClient.get_client()
        response = (
            client.table(TABLE)
            .select("week_start, priority_number, content")
            .eq("week_start", week_start)
            .order("priority_number")
            .execute()
        )
        return [WeeklyPriority(**row) for row in response.data or []]

    @staticmethod
    def set_weekly_priorities(priorities: list[str], today: date | None = None) -> str:
        """
        Replace this week's list with 1-5 priorities, numbered in order.

        Returns:
            The week_start that was written

        Raises:
            InvalidInputError: If the list is empty, too long or has blanks
        """
        cleaned = [p.strip() for p in priorities]
        if not cleaned or len(cleaned) > MAX_PRIORITIES:
            raise InvalidInputError(
                f"Provide between 1 and {MAX_PRIORITIES} priorities",
                field="priorities",
            )
        if not all(cleaned):
            raise InvalidInputError("Priorities cannot be blank", field="priorities")

        week_start = get_current_week_start(today)
        client = SupabaseClient.get_client()

        client.table(TABLE).delete().eq("week_start", week_start).execute()
        client.table(TABLE).insert([
            {"week_start": week_start, "priority_number": number, "content": content}
            for number, content in enumerate(cleaned, start=1)
        ]).execute()

        logger.info(f"Set {len(cleaned)} priorities for week {week_start}")
        return week_start

    @staticmethod
    def update_weekly_priority(priority_number: int, content: str, today: date | None = None) -> WeeklyPriority:
        """
        Upsert one numbered priority for this week.

        Raises:
            InvalidInputError: If the number is outside 1-5 or content is blank
        """
        if not 1 <= priority_number <= MAX_PRIORITIES:
            raise InvalidInputError(
                f"Priority number must be between 1 and {MAX_PRIORITIES}",
                field="priority_number",
            )
        if not content or not content.strip():
            raise InvalidInputError("Priority content cannot be blank", field="content")

        priority = WeeklyPriority(
            week_start=get_current_week_start(today),
            priority_number=priority_number,
            content=content.strip(),
        )
        client = SupabaseClient.get_client()
        client.table(TABLE).upsert(
            priority.model_dump(),
            on_conflict="week_start,priority_number",
        ).execute()
        return priority
