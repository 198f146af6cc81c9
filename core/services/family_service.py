# =============================================================================
# core/services/family_service.py - Family Administration
# =============================================================================
# CRUD for the three "people" tables the parents dashboard manages:
# - family_members: everyone shown on the hub, pets included
# - users: PIN logins
# - children: kiosk profiles (scoped to FAMILY_USER_ID)
#
# PINs arrive in clear text and are stored only as SHA-256 hashes.
# =============================================================================

import logging
from typing import Any

from app.auth.security import hash_pin, validate_pin_format
from app.config import settings
from app.exceptions import InvalidInputError, NotFoundError
from core.models.family import (
    ChildCreate,
    ChildUpdate,
    FamilyMemberCreate,
    FamilyMemberUpdate,
    FamilyRole,
    UserCreate,
)
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

MEMBER_COLUMNS = "id, name, role, pin_hash, avatar_url, has_checklist, created_at"
ITEM_COLUMNS = "id, title, icon, display_order, weekdays_only, is_active"


def _hashed_pin(pin: str) -> str:
    if not validate_pin_format(pin):
        raise InvalidInputError("PIN must be exactly 4 digits", field="pin")
    return hash_pin(pin)


def _first_row(response: Any, code: str) -> dict[str, Any]:
    if not response.data:
        raise SupabaseClientError(message="Write returned no data", code=code)
    return response.data[0]


def _stored_role(client: Any, member_id: str) -> str:
    rows = client.table("family_members").select("role").eq("id", member_id).execute().data
    if not rows:
        raise NotFoundError("Family member", member_id)
    return rows[0]["role"]


class FamilyService:
    """Service for family members, PIN users and children."""

    # -------------------------------------------------------------------------
    # Family Members
    # -------------------------------------------------------------------------

    @staticmethod
    def list_members() -> list[dict[str, Any]]:
        """
        All members ordered by name.

        Members with has_checklist carry their checklist_items; everyone
        else gets an empty list.
        """
        client = SupabaseClient.get_client()
        members = client.table("family_members").select(MEMBER_COLUMNS).order("name").execute().data or []

        for member in members:
            if not member.get("has_checklist"):
                member["checklist_items"] = []
                continue
            items = (
                client.table("checklist_items")
                .select(ITEM_COLUMNS)
                .eq("member_id", member["id"])
                .order("display_order")
                .execute()
            )
            member["checklist_items"] = items.data or []

        return members

    @staticmethod
    def create_member(request: FamilyMemberCreate) -> dict[str, Any]:
        """
        Create a member, hashing the PIN when one is given.

        Raises:
            InvalidInputError: If a pet is given a PIN or the PIN isn't 4 digits
        """
        pin_hash = None
        if request.pin:
            if request.role == FamilyRole.PET:
                raise InvalidInputError("Pets cannot have a PIN", field="pin")
            pin_hash = _hashed_pin(request.pin)

        client = SupabaseClient.get_client()
        response = client.table("family_members").insert({
            "name": request.name,
            "role": request.role.value,
            "pin_hash": pin_hash,
            "avatar_url": request.avatar_url or None,
            "has_checklist": request.has_checklist,
        }).execute()

        member = _first_row(response, "CREATE_MEMBER_FAILED")
        logger.info(f"Created family member {member['id']} ({request.role.value})")
        return member

    @staticmethod
    def update_member(member_id: str, request: FamilyMemberUpdate) -> dict[str, Any]:
        """
        Apply the fields that were sent.

        Sending pin as "" or null clears it. A member who is (or becomes) a
        pet cannot be given a PIN, and becoming a pet clears any stored PIN.

        Raises:
            InvalidInputError: If the new PIN isn't 4 digits or the member is a pet
            NotFoundError: If the member doesn't exist
        """
        sent = request.model_dump(exclude_unset=True)
        updates: dict[str, Any] = {}
        client = SupabaseClient.get_client()

        for key in ("name", "avatar_url", "has_checklist"):
            if key in sent:
                updates[key] = sent[key]
        if "role" in sent and sent["role"] is not None:
            updates["role"] = FamilyRole(sent["role"]).value

        if sent.get("pin"):
            role = updates.get("role") or _stored_role(client, member_id)
            if role == FamilyRole.PET.value:
                raise InvalidInputError("Pets cannot have a PIN", field="pin")
            updates["pin_hash"] = _hashed_pin(sent["pin"])
        elif "pin" in sent or updates.get("role") == FamilyRole.PET.value:
            updates["pin_hash"] = None

        if not updates:
            raise InvalidInputError("No fields to update")

        response = client.table("family_members").update(updates).eq("id", member_id).execute()
        if not response.data:
            raise NotFoundError("Family member", member_id)
        return response.data[0]


    @staticmethod
    def delete_member(member_id: str) -> None:
        """
        Delete a member with their checklist items and completions.

        Cleanup failures are logged; only the final delete can fail the call.
        """
        client = SupabaseClient.get_client()

        items = client.table("checklist_items").select("id").eq("member_id", member_id).execute()
        item_ids = [item["id"] for item in items.data or []]

        cleanup = []
        if item_ids:
            cleanup.append(("completions", client.table("checklist_completions").delete().in_("item_id", item_ids)))
        cleanup.append(("member completions", client.table("checklist_completions").delete().eq("member_id", member_id)))
        cleanup.append(("checklist items", client.table("checklist_items").delete().eq("member_id", member_id)))

        for label, query in cleanup:
            try:
                query.execute()
            except Exception as e:
                logger.error(f"Error deleting {label} for member {member_id}: {e}")

        client.table("family_members").delete().eq("id", member_id).execute()
        logger.info(f"Deleted family member {member_id}")

    # -------------------------------------------------------------------------
    # PIN Users
    # -------------------------------------------------------------------------

    @staticmethod
    def list_users() -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        return client.table("users").select("id, name, role, created_at").order("name").execute().data or []

    @staticmethod
    def create_user(request: UserCreate) -> dict[str, Any]:
        """
        Create a PIN login.

        Raises:
            InvalidInputError: If the PIN isn't 4 digits
        """
        pin_hash = _hashed_pin(request.pin)
        client = SupabaseClient.get_client()
        response = client.table("users").insert({
            "name": request.name,
            "role": request.role,
            "pin_hash": pin_hash,
            "integrations": {},
        }).execute()

        user = _first_row(response, "CREATE_USER_FAILED")
        logger.info(f"Created user {user['id']}")
        return user

    @staticmethod
    def update_user_pin(user_id: str, pin: str) -> None:
        pin_hash = _hashed_pin(pin)
        client = SupabaseClient.get_client()
        client.table("users").update({"pin_hash": pin_hash}).eq("id", user_id).execute()
        logger.info(f"Updated PIN for user {user_id}")

    @staticmethod
    def delete_user(user_id: str) -> None:
        client = SupabaseClient.get_client()
        client.table("users").delete().eq("id", user_id).execute()
        logger.info(f"Deleted user {user_id}")

    # -------------------------------------------------------------------------
    # Children
    # -------------------------------------------------------------------------

    @staticmethod
    def list_children_with_items() -> list[dict[str, Any]]:
        """The family's children, each with all their checklist items."""
        client = SupabaseClient.get_client()
        children = (
            client.table("children")
            .select("id, name, age, grade")
            .eq("user_id", settings.FAMILY_USER_ID)
            .order("name")
            .execute()
        ).data or []

        for child in children:
            items = (
                client.table("checklist_items")
                .select(ITEM_COLUMNS)
                .eq("child_id", child["id"])
                .order("display_order")
                .execute()
            )
            child["checklist_items"] = items.data or []

        return children

    @staticmethod
    def create_child(request: ChildCreate) -> dict[str, Any]:
        client = SupabaseClient.get_client()
        response = client.table("children").insert({
            "user_id": settings.FAMILY_USER_ID,
            "name": request.name,
            "age": request.age or None,
            "grade": request.grade or None,
        }).execute()

        child = _first_row(response, "CREATE_CHILD_FAILED")
        logger.info(f"Created child {child['id']}")
        return child

    @staticmethod
    def update_child(child_id: str, request: ChildUpdate) -> dict[str, Any]:
        """
        Update a child of this family.

        Raises:
            NotFoundError: If no such child belongs to the family
        """
        client = SupabaseClient.get_client()
        response = (
            client.table("children")
            .update(request.model_dump(exclude_unset=True))
            .eq("id", child_id)
            .eq("user_id", settings.FAMILY_USER_ID)
            .execute()
        )
        if not response.data:
            raise NotFoundError("Child", child_id)
        return response.data[0]
