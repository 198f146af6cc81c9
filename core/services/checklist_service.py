# =============================================================================
# core/services/checklist_service.py - Kids Checklist
# =============================================================================
# Handles the daily routine checklists on the kids' kiosk and their
# management from the parents dashboard.
#
# A completion is a (child_id, item_id, completion_date) row, so a new day
# automatically starts with nothing ticked. Dates are family-local.
# =============================================================================

import logging
from datetime import date
from typing import Any

from app.config import settings
from app.exceptions import InvalidInputError, NotFoundError
from core.models.checklist import ChecklistItem, ChecklistStats, Child, ChildChecklist
from core.models.family import ChecklistItemCreate, ChecklistItemUpdate, ChecklistOrder
from lib.calendar_utils import day_bounds
from lib.supabase_client import SupabaseClient, SupabaseClientError, is_not_found

logger = logging.getLogger(__name__)

CHILD_COLUMNS = "id, name, age, grade, avatar_type, avatar_data, avatar_background"
ADMIN_ITEM_COLUMNS = (
    "id, title, icon, display_order, weekdays_only, reset_daily, is_active, member_id, child_id"
)
DEFAULT_ACTIVE_DAYS = ["mon", "tue", "wed", "thu", "fri"]


def family_today() -> date:
    """Today's date in the family timezone."""
    start, _ = day_bounds()
    return start.date()


class ChecklistService:
    """
    Service for checklist reads, toggles and admin edits.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Kiosk
    # -------------------------------------------------------------------------

    @staticmethod
    def get_children() -> list[Child]:
        """The family's children, ordered by name."""
        client = SupabaseClient.get_client()
        response = (
            client.table("children")
            .select(CHILD_COLUMNS)
            .eq("user_id", settings.FAMILY_USER_ID)
            .order("name")
            .execute()
        )
        return [Child(**row) for row in response.data or []]

    @staticmethod
    def get_checklist_for_child(
        child_id: str,
        today: date | None = None,
    ) -> tuple[list[ChecklistItem], ChecklistStats]:
        """
        Get today's active items for a child, flagged with completion.

        On Saturday and Sunday weekday-only items are left out.

        Returns:
            (items ordered by display_order, stats)
        """
        today = today or family_today()
        client = SupabaseClient.get_client()

        query = (
            client.table("checklist_items")
            .select("*")
            .eq("child_id", child_id)
            .eq("is_active", True)
        )
        if today.weekday() >= 5:
            query = query.eq("weekdays_only", False)

        items_response = query.order("display_order").execute()

        completions_response = (
            client.table("checklist_completions")
            .select("item_id")
            .eq("child_id", child_id)
            .eq("completion_date", today.isoformat())
            .execute()
        )
        completed_ids = {row["item_id"] for row in completions_response.data or []}

        items = [
            ChecklistItem(**{**row, "is_completed": row["id"] in completed_ids})
            for row in items_response.data or []
        ]
        return items, ChecklistStats.from_items(items)

    @staticmethod
    def get_children_with_checklists(today: date | None = None) -> list[ChildChecklist]:
        """Every child with today's checklist and stats."""
        result = []
        for child in ChecklistService.get_children():
            items, stats = ChecklistService.get_checklist_for_child(child.id, today=today)
            result.append(ChildChecklist(**child.model_dump(), checklist=items, stats=stats))
        return result

    @staticmethod
    def toggle_checklist_item(
        child_id: str,
        item_id: str,
        is_currently_completed: bool,
        today: date | None = None,
    ) -> bool:
        """
        Flip an item for today.

        Args:
            is_currently_completed: True deletes today's completion,
                False inserts one

        Returns:
            True on success, False if the write failed
        """
        today = today or family_today()
        client = SupabaseClient.get_client()

        try:
            if is_currently_completed:
                (
                    client.table("checklist_completions")
                    .delete()
                    .eq("child_id", child_id)
                    .eq("item_id", item_id)
                    .eq("completion_date", today.isoformat())
                    .execute()
                )
            else:
                client.table("checklist_completions").insert({
                    "child_id": child_id,
                    "item_id": item_id,
                    "completion_date": today.isoformat(),
                    "user_id": settings.FAMILY_USER_ID,
                }).execute()
        except Exception as e:
            logger.error(f"Failed to toggle checklist item {item_id} for {child_id}: {e}")
            return False

        logger.debug(f"Toggled checklist item {item_id} for child {child_id}")
        return True

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    @staticmethod
    def list_items(member_id: str | None = None, child_id: str | None = None) -> list[dict[str, Any]]:
        """All items, optionally for one owner (member_id wins over child_id)."""
        client = SupabaseClient.get_client()
        query = client.table("checklist_items").select(ADMIN_ITEM_COLUMNS)

        if member_id:
            query = query.eq("member_id", member_id)
        elif child_id:
            query = query.eq("child_id", child_id)

        return query.order("display_order").execute().data or []

    @staticmethod
    def _next_display_order(member_id: str | None, child_id: str | None) -> int:
        client = SupabaseClient.get_client()
        query = client.table("checklist_items").select("display_order")
        if member_id:
            query = query.eq("member_id", member_id)
        else:
            query = query.eq("child_id", child_id)

        rows = query.order("display_order", desc=True).limit(1).execute().data or []
        return rows[0]["display_order"] + 1 if rows else 0

    @staticmethod
    def create_item(request: ChecklistItemCreate) -> dict[str, Any]:
        """
        Append an item to the end of its owner's list.

        Raises:
            InvalidInputError: If neither member_id nor child_id is given
        """
        member_id = request.member_id or None
        child_id = None if member_id else (request.child_id or None)
        if not member_id and not child_id:
            raise InvalidInputError("member_id or child_id is required", field="member_id")

        data = {
            "member_id": member_id,
            "child_id": child_id,
            "title": request.title,
            "icon": request.icon,
            "display_order": ChecklistService._next_display_order(member_id, child_id),
            "weekdays_only": request.weekdays_only,
            "is_active": True,
            "active_days": request.active_days or DEFAULT_ACTIVE_DAYS,
        }
        if request.reset_daily is not None:
            data["reset_daily"] = request.reset_daily

        client = SupabaseClient.get_client()
        response = client.table("checklist_items").insert(data).execute()

        if not response.data:
            raise SupabaseClientError(message="Insert returned no data", code="CREATE_ITEM_FAILED")

        item = response.data[0]
        logger.info(f"Created checklist item {item['id']}")
        return item

    @staticmethod
    def update_item(item_id: str, request: ChecklistItemUpdate) -> dict[str, Any]:
        """
        Apply the fields that were sent.

        Raises:
            NotFoundError: If the item doesn't exist
        """
        updates = request.model_dump(exclude_unset=True)
        client = SupabaseClient.get_client()

        if not updates:
            try:
                return (
                    client.table("checklist_items").select("*").eq("id", item_id).single().execute().data
                )
            except Exception as e:
                if is_not_found(e):
                    raise NotFoundError("Checklist item", item_id)
                raise

        response = client.table("checklist_items").update(updates).eq("id", item_id).execute()
        if not response.data:
            raise NotFoundError("Checklist item", item_id)
        return response.data[0]

    @staticmethod
    def delete_item(item_id: str) -> None:
        client = SupabaseClient.get_client()
        client.table("checklist_items").delete().eq("id", item_id).execute()
        logger.info(f"Deleted checklist item {item_id}")

    @staticmethod
    def reorder_items(items: list[ChecklistOrder]) -> int:
        """
        Set display_order for each item.

        A failing row is logged and skipped.

        Returns:
            Number of items updated
        """
        client = SupabaseClient.get_client()
        updated = 0
        for item in items:
            try:
                (
                    client.table("checklist_items")
                    .update({"display_order": item.display_order})
                    .eq("id", item.id)
                    .execute()
                )
                updated += 1
            except Exception as e:
                logger.error(f"Error reordering item {item.id}: {e}")
        return updated
