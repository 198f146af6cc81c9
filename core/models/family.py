# =============================================================================
# core/models/family.py - Family & Admin Schemas
# =============================================================================
# These models define the API contract for the parents dashboard:
# - Family members (admin/adult/kid/pet) with optional PINs
# - PIN users
# - Children and their checklist items
#
# PINs are never stored or returned in clear text; services hash them
# before writing pin_hash.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class FamilyRole(str, Enum):
    """
    Roles a family member can have.

    Pets appear on the kiosk but can never sign in.
    """
    ADMIN = "admin"
    ADULT = "adult"
    KID = "kid"
    PET = "pet"


# -----------------------------------------------------------------------------
# Family Members
# -----------------------------------------------------------------------------

class FamilyMemberCreate(BaseModel):
    """
    Body of POST /admin/family.

    Example:
        {"name": "Riley", "role": "kid", "pin": "4321", "has_checklist": true}
    """
    name: str = Field(..., min_length=1, max_length=100)
    role: FamilyRole
    pin: str | None = Field(default=None, description="Optional 4-digit PIN")
    avatar_url: str | None = None
    has_checklist: bool = False


class FamilyMemberUpdate(BaseModel):
    """
    Body of PUT /admin/family/{id}. Only fields that are sent change.

    An empty or null `pin` clears the member's PIN.
    """
    name: str | None = Field(default=None, min_length=1, max_length=100)
    role: FamilyRole | None = None
    pin: str | None = None
    avatar_url: str | None = None
    has_checklist: bool | None = None


# -----------------------------------------------------------------------------
# PIN Users
# -----------------------------------------------------------------------------

class UserCreate(BaseModel):
    """Body of POST /admin/users."""
    name: str = Field(..., min_length=1, max_length=100)
    role: str = Field(..., min_length=1, max_length=20)
    pin: str


class PinUpdate(BaseModel):
    """Body of PUT /admin/users/{id}/pin."""
    pin: str


# -----------------------------------------------------------------------------
# Children
# -----------------------------------------------------------------------------

class ChildCreate(BaseModel):
    """Body of POST /admin/children."""
    name: str = Field(..., min_length=1, max_length=100)
    age: int | None = Field(default=None, ge=0, le=25)
    grade: str | None = None


class ChildUpdate(BaseModel):
    """Body of PUT /admin/children/{id}."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    age: int | None = Field(default=None, ge=0, le=25)
    grade: str | None = None


# -----------------------------------------------------------------------------
# Checklist Items
# -----------------------------------------------------------------------------

class ChecklistItemCreate(BaseModel):
    """
    Body of POST /admin/checklist.

    The item belongs to a family member (member_id) or a child
    (child_id); member_id wins when both are sent. New items go to the
    end of the owner's list.
    """
    member_id: str | None = None
    child_id: str | None = None
    title: str = Field(..., min_length=1, max_length=200)
    icon: str | None = None
    weekdays_only: bool = True
    reset_daily: bool | None = None
    active_days: list[str] | None = None


class ChecklistItemUpdate(BaseModel):
    """Body of PUT /admin/checklist/{id}. Only fields that are sent change."""
    title: str | None = Field(default=None, min_length=1, max_length=200)
    icon: str | None = None
    weekdays_only: bool | None = None
    reset_daily: bool | None = None
    is_active: bool | None = None
    active_days: list[str] | None = None


class ChecklistOrder(BaseModel):
    id: str
    display_order: int = Field(..., ge=0)


class ChecklistReorderRequest(BaseModel):
    """Body of PATCH /admin/checklist."""
    items: list[ChecklistOrder]
