# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background work that doesn't belong on the request path.
#
# Tasks:
# - sync_calendars: Pull every iCal feed into the calendar cache (beat)
# - log_chat_event: Record a chat question in the analytics project
# =============================================================================

import logging
from typing import Any

from celery import shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Calendar Sync Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.sync_calendars")
def sync_calendars(self) -> dict[str, Any]:
    """
    Sync all configured iCal feeds into cached_calendar_events.

    Scheduled by celery beat every CALENDAR_SYNC_INTERVAL_MINUTES; the
    cron HTTP endpoint runs the same sync inline.

    Returns:
        CalendarSyncResult as a dict (total, synced, errors, calendars)
    """
    from core.services.calendar_sync import CalendarSyncService

    logger.info(f"Starting calendar sync [{self.request.id}]")
    result = CalendarSyncService.sync_all_calendars()
    logger.info(f"Calendar sync finished: {result.synced} synced, {result.errors} errors")
    return result.model_dump()


# =============================================================================
# Analytics Task
# =============================================================================

@shared_task(name="workers.tasks.log_chat_event", ignore_result=True)
def log_chat_event(
    query: str,
    response_time_ms: int,
    user_agent: str | None = None,
    cached_knowledge: bool = False,
) -> None:
    """Best-effort insert into chat_events."""
    from core.services.analytics_service import AnalyticsService

    AnalyticsService.log_chat_event(query, response_time_ms, user_agent, cached_knowledge)
