# =============================================================================
# core/services/school_service.py - School Feed per Child
# =============================================================================
# Reads what the school-email pipeline extracted into radar_family_feed
# (events, action items, announcements) and radar_school_extractions
# (teacher emails), filtered down to what a child should see on their
# kiosk page.
# =============================================================================

import logging
from datetime import datetime, timedelta
from typing import Any

from lib.school_feed import is_actual_teacher, kid_relevant_unique
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now

logger = logging.getLogger(__name__)

FEED_TABLE = "radar_family_feed"
EXTRACTIONS_TABLE = "radar_school_extractions"
EVENTS_AHEAD = timedelta(days=14)
RECENT = timedelta(days=7)


def _event(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row.get("id") or "",
        "title": row.get("title") or "Untitled Event",
        "date": row.get("event_date") or "",
        "source": row.get("source") or "",
        "scope": row.get("scope") or "individual",
    }


def _action(row: dict[str, Any]) -> dict[str, Any]:
    urgency = row.get("urgency")
    return {
        "id": row.get("id") or "",
        "title": row.get("title") or "Untitled Action",
        "deadline": row.get("deadline") or None,
        "urgency": urgency if isinstance(urgency, str) else "medium",
        "source": row.get("source") or "",
    }


def _announcement(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row.get("id") or "",
        "title": row.get("title") or "Untitled Announcement",
        "source": row.get("source") or "",
        "created_at": row.get("created_at") or "",
    }


def _teacher_email(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row.get("id") or "",
        "subject": row.get("subject") or "No Subject",
        "from_name": row.get("from_name") or row.get("from_address") or "Unknown",
        "teacher_name": row.get("source_name") or None,
        "created_at": row.get("email_date") or "",
    }


class SchoolService:
    """Service for a child's school feed."""

    @staticmethod
    def _feed_query(item_type: str, child: str):
        client = SupabaseClient.get_client()
        return (
            client.table(FEED_TABLE)
            .select("*")
            .eq("item_type", item_type)
            .contains("children", [child])
            .eq("dismissed", False)
        )

    @staticmethod
    def get_school_feed(child_name: str, now: datetime | None = None) -> dict[str, Any]:
        """
        Events in the next 14 days, open action items, last week's
        announcements and teacher emails for a child.

        Parent-only items are dropped, titles de-duplicated and
        newsletter senders excluded.
        """
        child = child_name.lower()
        now = now or utc_now()
        week_ago = (now - RECENT).isoformat()

        events = (
            SchoolService._feed_query("event", child)
            .gte("event_date", now.isoformat())
            .lte("event_date", (now + EVENTS_AHEAD).isoformat())
            .order("event_date")
            .limit(10)
            .execute()
        ).data or []

        actions = (
            SchoolService._feed_query("action", child)
            .order("urgency", desc=True)
            .limit(5)
            .execute()
        ).data or []

        announcements = (
            SchoolService._feed_query("announcement", child)
            .gte("created_at", week_ago)
            .order("created_at", desc=True)
            .limit(5)
            .execute()
        ).data or []

        client = SupabaseClient.get_client()
        emails = (
            client.table(EXTRACTIONS_TABLE)
            .select("*")
            .eq("source_type", "teacher")
            .contains("child_relevance", [child])
            .gte("email_date", week_ago)
            .order("email_date", desc=True)
            .limit(5)
            .execute()
        ).data or []

        logger.debug(f"School feed for {child}: {len(events)} events, {len(actions)} actions")

        return {
            "child": child,
            "events": kid_relevant_unique(_event(row) for row in events),
            "actions": kid_relevant_unique(_action(row) for row in actions),
            "announcements": kid_relevant_unique(_announcement(row) for row in announcements),
            "teacher_emails": [
                _teacher_email(row) for row in emails
                if is_actual_teacher(row.get("from_name"), row.get("from_address"))
            ],
        }
