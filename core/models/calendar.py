# =============================================================================
# core/models/calendar.py - Calendar Schemas
# =============================================================================
# These models define the API contract for cached calendar data:
# - CachedCalendarEvent: One row of cached_calendar_events
# - CalendarSyncResult: Outcome of syncing the configured iCal feeds
# - ShortcutCalendarSyncResult: Outcome of a phone-pushed calendar sync
# - SuggestTimeRequest: Ask for a time block that fits a task
#
# Rows arrive from two sources, iCal feeds (cron/worker) and phone
# automations (shortcuts), and are keyed by event_id in both cases.
# =============================================================================

from pydantic import BaseModel, Field


class CachedCalendarEvent(BaseModel):
    """
    A calendar event as stored in cached_calendar_events.

    Example:
        {
            "event_id": "abc123@google.com",
            "title": "Soccer practice",
            "start_time": "2024-01-15T22:00:00+00:00",
            "end_time": "2024-01-15T23:00:00+00:00",
            "calendar_name": "Sports",
            "location": "Field 3"
        }
    """

    event_id: str = Field(..., description="Stable id used for upserts")
    title: str = Field(default="Untitled Event")
    start_time: str = Field(..., description="ISO 8601 start (UTC)")
    end_time: str | None = Field(default=None, description="ISO 8601 end (UTC)")
    calendar_name: str | None = Field(default=None, description="Source calendar name")
    location: str | None = None
    updated_at: str | None = None


class FeedSyncResult(BaseModel):
    """Per-feed counts from a calendar sync."""
    name: str
    synced: int = 0
    errors: int = 0


class CalendarSyncResult(BaseModel):
    """
    Outcome of syncing every configured iCal feed.

    `total` is the number of feeds; `synced`/`errors` are summed event
    counts. A feed that fails to download counts as one error.
    """
    total: int = 0
    synced: int = 0
    errors: int = 0
    calendars: list[FeedSyncResult] = Field(default_factory=list)


class ShortcutCalendarSyncResult(BaseModel):
    """Outcome of POST /shortcuts/calendar."""
    success: bool = True
    synced: int = 0
    errors: int = 0
    error_details: list[str] | None = Field(
        default=None,
        description="First five per-event errors, omitted when there are none"
    )


class SuggestTimeRequest(BaseModel):
    """
    Ask for a time block for a task.

    Either `duration_minutes` or `task` must be given; with only `task`
    the duration is estimated from keywords in its description.

    Example:
        {"task": "Write the school newsletter", "days": 5}
    """
    task: str | None = Field(default=None, max_length=500)
    duration_minutes: int | None = Field(default=None, ge=5, le=480)
    days: int = Field(default=7, ge=1, le=30)
    prefer_morning: bool = False
    buffer_minutes: int = Field(default=0, ge=0, le=60)
