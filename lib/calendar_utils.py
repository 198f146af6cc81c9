# =============================================================================
# lib/calendar_utils.py - Calendar Windows & Calendar Names
# =============================================================================
# Helpers shared by the calendar routes, the calendar sync and the chat
# assistant:
# - day_bounds: start of today / start of tomorrow in the family timezone
# - filter_events_in_window: keep events starting in [start, end)
# - Known calendar names and which calendars each family member follows
# =============================================================================

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from app.config import settings
from lib.utils import parse_datetime, utc_now

# Calendars the kiosk knows how to colour; anything else renders as default
KNOWN_CALENDARS = ["Home", "Work", "Alex", "Kids", "School", "Sports"]

FAMILY_CALENDAR_MAP: dict[str, list[str]] = {
    "Max": ["Work", "Home"],
    "Alex": ["Alex", "Home"],
    "Riley": ["Kids", "School", "Sports", "Home"],
    "Parker": ["Kids", "School", "Sports", "Home"],
    "Devin": ["Kids", "School", "Home"],
    "Jaffe": ["Home"],
}

DEFAULT_MEMBER_CALENDARS = ["Home"]


def family_timezone() -> ZoneInfo:
    """The configured family timezone."""
    return ZoneInfo(settings.TIMEZONE)


def day_bounds(now: datetime | None = None, tz: ZoneInfo | None = None) -> tuple[datetime, datetime]:
    """
    Start of the current day and start of the next day.

    Args:
        now: Reference time (defaults to the current UTC time)
        tz: Timezone that defines "today" (defaults to the family timezone)

    Returns:
        (start_of_today, start_of_tomorrow), both aware datetimes in `tz`
    """
    tz = tz or family_timezone()
    local_now = (now or utc_now()).astimezone(tz)
    start = datetime.combine(local_now.date(), time(0), tzinfo=tz)
    return start, datetime.combine(local_now.date() + timedelta(days=1), time(0), tzinfo=tz)


def window_from_today(days: int, now: datetime | None = None, tz: ZoneInfo | None = None) -> tuple[datetime, datetime]:
    """[start of today, start of today + days)."""
    start, _ = day_bounds(now, tz)
    return start, start + timedelta(days=days)


def filter_events_in_window(
    events: Iterable[dict[str, Any]],
    start: datetime,
    end: datetime,
) -> list[dict[str, Any]]:
    """
    Keep events whose start_time falls in [start, end), sorted by start.

    Events with a missing or unparseable start_time are dropped.

    Example:
        start, end = day_bounds()
        todays = filter_events_in_window(rows, start, end)
    """
    kept = []
    for event in events:
        event_start = parse_datetime(event.get("start_time"))
        if event_start is None:
            continue
        if start <= event_start < end:
            kept.append((event_start, event))

    kept.sort(key=lambda pair: pair[0])
    return [event for _, event in kept]


def get_calendars_for_member(member_name: str | None) -> list[str]:
    """Calendars shown on a member's profile; Home for unknown members."""
    if not member_name:
        return list(DEFAULT_MEMBER_CALENDARS)
    for name, calendars in FAMILY_CALENDAR_MAP.items():
        if name.lower() == member_name.lower():
            return list(calendars)
    return list(DEFAULT_MEMBER_CALENDARS)
