# =============================================================================
# core/services/calendar_sync.py - Calendar Cache Synchronization
# =============================================================================
# Copies calendar data into cached_calendar_events from two directions:
#
# 1. Pull: the configured iCal feeds (ICAL_FEEDS) are downloaded, recurring
#    events expanded, and the next 14 days upserted. Triggered by the cron
#    endpoint and by the Celery beat schedule.
# 2. Push: a phone automation POSTs the phone's calendar events directly
#    (field names vary between automation versions, so aliases are accepted).
#
# Both directions upsert on event_id and prune stale rows first.
# =============================================================================

import logging
from datetime import timedelta, timezone
from typing import Any

from app.config import settings
from core.models.calendar import CalendarSyncResult, FeedSyncResult, ShortcutCalendarSyncResult
from lib.calendar_utils import day_bounds, family_timezone
from lib.ical_feed import CalendarFeedError, fetch_feed, inspect_feed_content, parse_feed_events
from lib.supabase_client import SupabaseClient
from lib.utils import parse_datetime, utc_now, utc_now_iso

logger = logging.getLogger(__name__)

EVENTS_TABLE = "cached_calendar_events"
SYNC_DAYS = 14
STALE_AFTER = timedelta(days=7)
MAX_ERROR_DETAILS = 5


def _normalize_shortcut_time(value: Any) -> Any:
    """ISO UTC when parseable; anything else is passed through untouched."""
    if isinstance(value, str):
        parsed = parse_datetime(value)
        if parsed is not None:
            return parsed.astimezone(timezone.utc).isoformat()
    return value


def shortcut_event_to_row(event: dict[str, Any], updated_at: str) -> dict[str, Any]:
    """
    Map a phone-pushed event to a cache row.

    Accepts start_time|startDate|start, end_time|endDate|end and
    calendar_name|calendar. The id falls back to "{title}-{start}".
    """
    start = _normalize_shortcut_time(event.get("start_time") or event.get("startDate") or event.get("start"))
    end = _normalize_shortcut_time(event.get("end_time") or event.get("endDate") or event.get("end"))
    event_id = event.get("id") or event.get("identifier") or f"{event.get('title')}-{start}"

    return {
        "event_id": str(event_id),
        "title": event.get("title") or "Untitled Event",
        "start_time": start,
        "end_time": end,
        "calendar_name": event.get("calendar_name") or event.get("calendar") or None,
        "location": event.get("location") or None,
        "updated_at": updated_at,
    }


class CalendarSyncService:
    """Service for filling and pruning the calendar cache."""

    # -------------------------------------------------------------------------
    # iCal Feeds (pull)
    # -------------------------------------------------------------------------

    @staticmethod
    def sync_calendar_feed(name: str, url: str) -> FeedSyncResult:
        """
        Sync one feed's next 14 days into the cache.

        Each event is upserted on its own; a failing upsert counts as an
        error without stopping the feed.

        Raises:
            CalendarFeedError: If the feed can't be downloaded or parsed
        """
        tz = family_timezone()
        window_start, _ = day_bounds(tz=tz)
        window_end = window_start + timedelta(days=SYNC_DAYS)

        content = fetch_feed(url)
        rows = parse_feed_events(content, name, window_start, window_end, tz=tz)

        client = SupabaseClient.get_client()
        result = FeedSyncResult(name=name)

        for row in rows:
            try:
                client.table(EVENTS_TABLE).upsert(row, on_conflict="event_id").execute()
                result.synced += 1
            except Exception as e:
                logger.error(f"Error syncing event '{row['title']}' from {name}: {e}")
                result.errors += 1

        logger.info(f"Synced calendar {name}: {result.synced} events, {result.errors} errors")
        return result

    @staticmethod
    def prune_past_events() -> None:
        """Delete cached events that started more than a week ago."""
        cutoff = (utc_now() - STALE_AFTER).isoformat()
        client = SupabaseClient.get_client()
        client.table(EVENTS_TABLE).delete().lt("start_time", cutoff).execute()

    @staticmethod
    def sync_all_calendars() -> CalendarSyncResult:
        """
        Sync every feed in ICAL_FEEDS.

        A feed that fails counts one error and the remaining feeds still
        sync. With no feeds configured nothing is touched.
        """
        feeds = settings.ical_feeds_list
        if not feeds:
            logger.info("No ICAL_FEEDS configured, skipping calendar sync")
            return CalendarSyncResult()

        CalendarSyncService.prune_past_events()

        result = CalendarSyncResult(total=len(feeds))
        for name, url in feeds:
            try:
                feed_result = CalendarSyncService.sync_calendar_feed(name, url)
            except Exception as e:
                logger.error(f"Failed to sync {name}: {e}")
                feed_result = FeedSyncResult(name=name, synced=0, errors=1)

            result.synced += feed_result.synced
            result.errors += feed_result.errors
            result.calendars.append(feed_result)

        logger.info(f"Calendar sync completed: {result.synced} synced, {result.errors} errors")
        return result

    @staticmethod
    def inspect_feeds(calendar: str | None = None, days: int = 14) -> list[dict[str, Any]]:
        """
        Diagnostics for the configured feeds.

        Args:
            calendar: Only inspect the feed with this name (case-insensitive)
            days: Extra look-ahead window to count occurrences for

        Returns:
            One dict per feed with fetch_status, an error when the fetch
            failed, and event counts otherwise
        """
        feeds = settings.ical_feeds_list
        if calendar:
            feeds = [(n, u) for n, u in feeds if n.lower() == calendar.lower()]

        tz = family_timezone()
        today_start, _ = day_bounds(tz=tz)

        diagnostics = []
        for name, url in feeds:
            info: dict[str, Any] = {
                "name": name,
                "url": url[:50] + "..." if len(url) > 50 else url,
                "fetch_status": "success",
            }
            try:
                info.update(inspect_feed_content(fetch_feed(url), today_start, tz=tz, days=days))
            except CalendarFeedError as e:
                info["fetch_status"] = "error"
                info["error"] = e.message
            except Exception as e:
                logger.error(f"Failed to inspect {name}: {e}")
                info["fetch_status"] = "error"
                info["error"] = str(e)
            diagnostics.append(info)

        return diagnostics

    # -------------------------------------------------------------------------
    # Phone Shortcuts (push)
    # -------------------------------------------------------------------------

    @staticmethod
    def sync_shortcut_events(events: list[Any]) -> ShortcutCalendarSyncResult:
        """
        Upsert events pushed by a phone automation.

        Rows not refreshed for a week are deleted first so events removed
        on the phone eventually disappear from the cache.
        """
        client = SupabaseClient.get_client()
        cutoff = (utc_now() - STALE_AFTER).isoformat()
        client.table(EVENTS_TABLE).delete().lt("updated_at", cutoff).execute()

        updated_at = utc_now_iso()
        synced = 0
        errors: list[str] = []

        for event in events:
            title = event.get("title") if isinstance(event, dict) else None
            try:
                if not isinstance(event, dict):
                    raise ValueError("event is not an object")
                row = shortcut_event_to_row(event, updated_at)
                client.table(EVENTS_TABLE).upsert(row, on_conflict="event_id").execute()
                synced += 1
            except Exception as e:
                errors.append(f"{title}: {e}")

        if errors:
            logger.warning(f"Shortcut calendar sync had {len(errors)} errors")
        logger.info(f"Shortcut calendar sync: {synced} events")

        return ShortcutCalendarSyncResult(
            synced=synced,
            errors=len(errors),
            error_details=errors[:MAX_ERROR_DETAILS] or None,
        )

    @staticmethod
    def list_recent_events(limit: int = 20) -> list[dict[str, Any]]:
        """First `limit` cached events by start time (sync status check)."""
        client = SupabaseClient.get_client()
        response = (
            client.table(EVENTS_TABLE)
            .select("*")
            .order("start_time")
            .limit(limit)
            .execute()
        )
        return response.data or []
