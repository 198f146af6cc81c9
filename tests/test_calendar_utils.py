# =============================================================================
# tests/test_calendar_utils.py - Calendar Window Tests
# =============================================================================

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from lib.calendar_utils import (
    day_bounds,
    filter_events_in_window,
    get_calendars_for_member,
    window_from_today,
)
from lib.utils import TTLCache, parse_datetime

NY = ZoneInfo("America/New_York")


class TestDayBounds:

    def test_today_is_family_local(self):
        # 03:00 UTC on the 15th is still the evening of the 14th in New York
        start, end = day_bounds(datetime(2024, 1, 15, 3, 0, tzinfo=timezone.utc), tz=NY)
        assert start.date() == date(2024, 1, 14)
        assert start.hour == 0
        assert end - start == timedelta(days=1)

    def test_defaults_to_configured_timezone(self):
        start, _ = day_bounds(datetime(2024, 1, 15, 3, 0, tzinfo=timezone.utc))
        assert start.tzinfo == NY

    def test_window_from_today(self):
        now = datetime(2024, 1, 15, 18, 0, tzinfo=timezone.utc)
        start, end = window_from_today(7, now=now, tz=NY)
        assert start == datetime(2024, 1, 15, tzinfo=NY)
        assert end == datetime(2024, 1, 22, tzinfo=NY)


class TestFilterEventsInWindow:

    def test_keeps_events_in_window_sorted(self):
        start = datetime(2024, 1, 15, tzinfo=NY)
        end = start + timedelta(days=1)
        events = [
            {"title": "late", "start_time": "2024-01-15T22:00:00+00:00"},
            {"title": "early", "start_time": "2024-01-15T13:00:00Z"},
            {"title": "tomorrow", "start_time": "2024-01-16T06:00:00+00:00"},
            {"title": "yesterday", "start_time": "2024-01-15T04:59:00+00:00"},
            {"title": "broken", "start_time": "sometime"},
            {"title": "missing"},
        ]
        kept = filter_events_in_window(events, start, end)
        assert [e["title"] for e in kept] == ["early", "late"]

    def test_end_is_exclusive(self):
        start = datetime(2024, 1, 15, tzinfo=NY)
        end = start + timedelta(days=1)
        events = [{"title": "midnight", "start_time": end.isoformat()}]
        assert filter_events_in_window(events, start, end) == []


class TestCalendarsForMember:

    def test_known_member_case_insensitive(self):
        assert get_calendars_for_member("riley") == ["Kids", "School", "Sports", "Home"]

    def test_unknown_member_gets_home(self):
        assert get_calendars_for_member("Grandma") == ["Home"]
        assert get_calendars_for_member(None) == ["Home"]

    def test_returns_a_copy(self):
        calendars = get_calendars_for_member("Max")
        calendars.append("Mutated")
        assert "Mutated" not in get_calendars_for_member("Max")


class TestParseDatetime:

    def test_z_suffix(self):
        assert parse_datetime("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_datetime("2024-01-15T10:30:00").tzinfo == timezone.utc

    def test_garbage(self):
        assert parse_datetime("next tuesday") is None
        assert parse_datetime("") is None
        assert parse_datetime(None) is None


class TestTTLCache:

    def test_expires_but_keeps_stale_value(self):
        clock = [1000.0]
        cache = TTLCache(ttl_seconds=60, clock=lambda: clock[0])
        cache.set({"temp": 40})

        assert cache.get() == {"temp": 40}
        clock[0] += 61
        assert cache.get() is None
        assert cache.stale() == {"temp": 40}

    def test_get_or_load_calls_loader_once(self):
        cache = TTLCache(ttl_seconds=60)
        calls = []

        def loader():
            calls.append(1)
            return "doc"

        assert cache.get_or_load(loader) == "doc"
        assert cache.get_or_load(loader) == "doc"
        assert len(calls) == 1
