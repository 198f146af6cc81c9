# =============================================================================
# lib/ical_feed.py - iCal Feed Fetching & Parsing
# =============================================================================
# Downloads published iCal feeds and turns their events into rows for the
# cached_calendar_events table.
#
# Recurring events are expanded with recurring_ical_events so that a weekly
# practice shows up as one row per occurrence. Each occurrence gets its own
# event_id ("{uid}-{start iso}") so upserts don't overwrite each other.
#
# Usage:
#   from lib.ical_feed import fetch_feed, parse_feed_events
#   content = fetch_feed("webcal://example.com/family.ics")
#   rows = parse_feed_events(content, "Home", window_start, window_end)
# =============================================================================

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any
from zoneinfo import ZoneInfo

import httpx
import recurring_ical_events
from icalendar import Calendar

from lib.utils import ApplicationError, utc_now_iso

logger = logging.getLogger(__name__)

FEED_TIMEOUT = 20
USER_AGENT = "Mozilla/5.0 (compatible; FamilyHub/1.0)"
UNTITLED_EVENT = "Untitled Event"


class CalendarFeedError(ApplicationError):
    """Raised when a feed cannot be downloaded or parsed."""

    def __init__(
        self,
        message: str,
        code: str = "CALENDAR_FEED_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


def normalize_feed_url(url: str) -> str:
    """webcal:// feeds are served over https."""
    url = url.strip()
    if url.lower().startswith("webcal://"):
        return "https://" + url[len("webcal://"):]
    return url


def fetch_feed(url: str) -> bytes:
    """
    Download a feed.

    Raises:
        CalendarFeedError: On network failure or a non-2xx response
    """
    target = normalize_feed_url(url)

    try:
        response = httpx.get(
            target,
            headers={"User-Agent": USER_AGENT},
            timeout=FEED_TIMEOUT,
            follow_redirects=True,
        )
    except httpx.HTTPError as e:
        raise CalendarFeedError(
            message=f"Failed to fetch calendar feed: {e}",
            code="FEED_UNREACHABLE",
            suggestion="Check that the feed URL in ICAL_FEEDS is reachable",
        )

    if response.status_code >= 400:
        raise CalendarFeedError(
            message=f"Failed to fetch calendar: {response.status_code}",
            code="FEED_HTTP_ERROR",
            suggestion="The feed may have been unpublished; re-copy its URL into ICAL_FEEDS",
            details={"status": response.status_code},
        )

    return response.content


def parse_calendar(content: bytes | str) -> Calendar:
    """Parse raw iCal text, wrapping parser errors."""
    try:
        return Calendar.from_ical(content)
    except ValueError as e:
        raise CalendarFeedError(
            message=f"Invalid iCal data: {e}",
            code="FEED_PARSE_ERROR",
            suggestion="Open the feed URL in a browser and check it returns BEGIN:VCALENDAR",
        )


def to_aware_datetime(value: date | datetime, tz: ZoneInfo) -> datetime:
    """
    Convert an iCal DTSTART/DTEND value to an aware datetime.

    All-day dates become midnight in `tz`; floating times are read in `tz`.
    """
    if not isinstance(value, datetime):
        return datetime.combine(value, time(0), tzinfo=tz)
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def _recurring_uids(calendar: Calendar) -> set[str]:
    """UIDs that expand to more than one occurrence, read before expansion."""
    return {
        str(component.get("UID"))
        for component in calendar.walk("VEVENT")
        if component.get("RRULE") is not None
        or component.get("RDATE") is not None
        or component.get("RECURRENCE-ID") is not None
    }


def _occurrences(calendar: Calendar, start: datetime, end: datetime) -> list:
    return list(recurring_ical_events.of(calendar).between(start, end))


def parse_feed_events(
    content: bytes | str,
    calendar_name: str,
    window_start: datetime,
    window_end: datetime,
    tz: ZoneInfo | None = None,
) -> list[dict[str, Any]]:
    """
    Expand a feed into cache rows for occurrences starting in the window.

    Args:
        content: Raw iCal bytes
        calendar_name: Stored in each row's calendar_name
        window_start: Keep occurrences starting at or after this
        window_end: ...and strictly before this
        tz: Timezone for all-day and floating events (defaults to window_start's)

    Returns:
        Rows with event_id, title, start_time, end_time, calendar_name,
        location and updated_at, sorted by start_time
    """
    tz = tz or window_start.tzinfo or timezone.utc
    calendar = parse_calendar(content)
    recurring = _recurring_uids(calendar)
    synced_at = utc_now_iso()

    rows = []
    for component in _occurrences(calendar, window_start, window_end):
        dtstart = component.get("DTSTART")
        if dtstart is None:
            continue

        start = to_aware_datetime(dtstart.dt, tz)
        if not (window_start <= start < window_end):
            continue

        dtend = component.get("DTEND")
        end = to_aware_datetime(dtend.dt, tz) if dtend is not None else None

        uid = str(component.get("UID") or "")
        title = str(component.get("SUMMARY") or "") or UNTITLED_EVENT
        start_iso = start.astimezone(timezone.utc).isoformat()

        if not uid:
            event_id = f"{title}-{start_iso}"
        elif uid in recurring:
            event_id = f"{uid}-{start_iso}"
        else:
            event_id = uid

        location = component.get("LOCATION")
        rows.append({
            "event_id": event_id,
            "title": title,
            "start_time": start_iso,
            "end_time": end.astimezone(timezone.utc).isoformat() if end else None,
            "calendar_name": calendar_name,
            "location": str(location) if location else None,
            "updated_at": synced_at,
        })

    rows.sort(key=lambda row: row["start_time"])
    return rows


def inspect_feed_content(
    content: bytes | str,
    today_start: datetime,
    tz: ZoneInfo | None = None,
    days: int = 14,
) -> dict[str, int]:
    """
    Count a feed's events for diagnostics.

    Returns:
        total_events (VEVENTs in the file), recurring_events, and the number
        of expanded occurrences starting in the next 14, 30 and 90 days
        (plus the next `days` days when that is another window)
    """
    tz = tz or today_start.tzinfo or timezone.utc
    calendar = parse_calendar(content)
    vevents = list(calendar.walk("VEVENT"))

    stats = {
        "total_events": len(vevents),
        "recurring_events": sum(1 for v in vevents if v.get("RRULE") is not None),
    }

    starts = []
    for component in _occurrences(calendar, today_start, today_start + timedelta(days=max(days, 90))):
        dtstart = component.get("DTSTART")
        if dtstart is not None:
            starts.append(to_aware_datetime(dtstart.dt, tz))

    for window in sorted({14, 30, 90, days}):
        limit = today_start + timedelta(days=window)
        stats[f"events_next_{window}_days"] = sum(1 for s in starts if today_start <= s < limit)

    return stats
