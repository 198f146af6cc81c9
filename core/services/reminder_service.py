# =============================================================================
# core/services/reminder_service.py - Cached Reminders
# =============================================================================
# Phone reminders can't be read server-side, so a phone automation pushes
# them to POST /shortcuts/reminders. This service stores them in
# cached_reminders and reads back the open ones.
# =============================================================================

import logging
from typing import Any

from app.exceptions import NotFoundError
from core.models.reminder import CachedReminder, ReminderIn
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import is_uuid, utc_now_iso

logger = logging.getLogger(__name__)

REMINDERS_TABLE = "cached_reminders"


class ReminderService:
    """Service for cached reminder reads and pushes."""

    @staticmethod
    def resolve_user_id(user_ref: str) -> str | None:
        """
        Turn a user id or a user name into a user id.

        UUIDs are used as-is; anything else is looked up by name
        (case-insensitive). Returns None for an unknown name.
        """
        if is_uuid(user_ref):
            return user_ref
        user = SupabaseClient.fetch_user_by_name(user_ref)
        return str(user["id"]) if user else None

    @staticmethod
    def get_cached_reminders(user_ref: str) -> list[dict[str, Any]]:
        """
        Open reminders for a user, soonest due first.

        Args:
            user_ref: User id or user name

        Raises:
            SupabaseClientError: If the query fails
        """
        user_id = ReminderService.resolve_user_id(user_ref)
        if not user_id:
            logger.debug(f"No user found for reminders lookup '{user_ref}'")
            return []

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(REMINDERS_TABLE)
                .select("*")
                .eq("user_id", user_id)
                .eq("is_completed", False)
                .order("due_date")
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch reminders: {e}",
                code="FETCH_REMINDERS_FAILED",
                details={"user_id": user_id},
            )

        return response.data or []

    @staticmethod
    def sync_pushed_reminders(user_name: str, reminders: list[ReminderIn]) -> int:
        """
        Upsert reminders pushed for a user.

        Returns:
            Number of reminders received

        Raises:
            NotFoundError: If no user has that name
        """
        user = SupabaseClient.fetch_user_by_name(user_name)
        if not user:
            raise NotFoundError("User", user_name)

        client = SupabaseClient.get_client()
        updated_at = utc_now_iso()

        for reminder in reminders:
            row = CachedReminder.from_push(reminder, str(user["id"]), updated_at).to_row()
            client.table(REMINDERS_TABLE).upsert(row, on_conflict="reminder_id").execute()

        logger.info(f"Synced {len(reminders)} reminders for {user['name']}")
        return len(reminders)
