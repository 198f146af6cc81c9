# =============================================================================
# lib/time_blocking.py - Free Time & Time Blocking
# =============================================================================
# Finds open working-hour slots between calendar events and suggests where a
# task of a given length fits. Used by the calendar routes and the chat
# assistant's get_free_time / suggest_time_block tools.
#
# All datetimes handled here are timezone-aware. Days are walked in the
# timezone of `start` so "9 to 5" means the family's local working day.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Any, Iterable

from lib.utils import parse_datetime

DEFAULT_WORKING_HOURS = (9, 17)
MIN_SLOT_MINUTES = 15
DEFAULT_EVENT_MINUTES = 60

QUICK_KEYWORDS = ("email", "quick", "call", "check")
MEDIUM_KEYWORDS = ("meeting", "review", "update")
FOCUS_KEYWORDS = ("write", "create", "develop", "design", "deep work", "focus")


@dataclass
class TimeSlot:
    """An open stretch of time, `duration` in whole minutes."""
    start: datetime
    end: datetime
    duration: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration": self.duration,
            "duration_label": format_duration(self.duration),
            "date_label": self.start.strftime("%A, %b %d").replace(" 0", " "),
        }


def _round_up_to_quarter(value: datetime) -> datetime:
    value = value.replace(second=0, microsecond=0) + (
        timedelta(minutes=1) if value.second or value.microsecond else timedelta()
    )
    remainder = value.minute % 15
    if remainder:
        value += timedelta(minutes=15 - remainder)
    return value


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def calculate_free_slots(
    events: Iterable[dict[str, Any]],
    start: datetime,
    end: datetime,
    working_hours: tuple[int, int] = DEFAULT_WORKING_HOURS,
    now: datetime | None = None,
) -> list[TimeSlot]:
    """
    Calculate free slots within weekday working hours.

    Args:
        events: Cached calendar rows with start_time and optional end_time
        start: First moment to consider (its tzinfo defines local days)
        end: Stop before this moment
        working_hours: (start_hour, end_hour) of the working day
        now: Current time; defaults to start. Today's window begins at
            `now` rounded up to the next quarter hour.

    Returns:
        Slots of at least 15 minutes, in chronological order
    """
    tz = start.tzinfo
    now = now or start

    parsed: list[tuple[datetime, datetime]] = []
    for event in events:
        event_start = parse_datetime(event.get("start_time"))
        if event_start is None:
            continue
        event_end = parse_datetime(event.get("end_time")) or (
            event_start + timedelta(minutes=DEFAULT_EVENT_MINUTES)
        )
        parsed.append((event_start.astimezone(tz), event_end.astimezone(tz)))
    parsed.sort(key=lambda pair: pair[0])

    slots: list[TimeSlot] = []
    current_day = start.astimezone(tz).date()

    while datetime.combine(current_day, time(0), tzinfo=tz) < end:
        day = current_day
        current_day = day + timedelta(days=1)

        # Monday=0 ... Sunday=6
        if day.weekday() >= 5:
            continue

        day_start = datetime.combine(day, time(working_hours[0]), tzinfo=tz)
        day_end = datetime.combine(day, time(working_hours[1]), tzinfo=tz)

        if day_end <= now:
            continue

        slot_start = _round_up_to_quarter(now.astimezone(tz)) if day_start < now else day_start

        for event_start, event_end in parsed:
            if not (day_start <= event_start < day_end):
                continue

            if event_start > slot_start:
                duration = _minutes_between(slot_start, event_start)
                if duration >= MIN_SLOT_MINUTES:
                    slots.append(TimeSlot(slot_start, event_start, duration))

            if event_end > slot_start:
                slot_start = event_end

        if slot_start < day_end:
            duration = _minutes_between(slot_start, day_end)
            if duration >= MIN_SLOT_MINUTES:
                slots.append(TimeSlot(slot_start, day_end, duration))

    return slots


def suggest_time_block(
    slots: list[TimeSlot],
    estimated_minutes: int,
    prefer_morning: bool = False,
    buffer_minutes: int = 0,
) -> TimeSlot | None:
    """
    Pick the first slot that fits the task plus a buffer on both sides.

    The returned block starts `buffer_minutes` into the chosen slot and
    lasts exactly `estimated_minutes`. Returns None if nothing fits.
    """
    needed = estimated_minutes + buffer_minutes * 2
    viable = [slot for slot in slots if slot.duration >= needed]
    if not viable:
        return None

    if prefer_morning:
        viable.sort(key=lambda slot: slot.start)

    best = viable[0]
    block_start = best.start + timedelta(minutes=buffer_minutes)
    return TimeSlot(
        start=block_start,
        end=block_start + timedelta(minutes=estimated_minutes),
        duration=estimated_minutes,
    )


def estimate_task_duration(description: str) -> int:
    """Rough duration in minutes from keywords in a task description."""
    lowered = (description or "").lower()

    if any(word in lowered for word in QUICK_KEYWORDS):
        return 30
    if any(word in lowered for word in MEDIUM_KEYWORDS):
        return 60
    if any(word in lowered for word in FOCUS_KEYWORDS):
        return 120
    return 60


def format_duration(minutes: int) -> str:
    """90 -> "1h 30m", 45 -> "45m"."""
    if minutes >= 60:
        return f"{minutes // 60}h {minutes % 60}m"
    return f"{minutes}m"
