# =============================================================================
# core/models/checklist.py - Kids Checklist Schemas
# =============================================================================
# These models define the API contract for the children's kiosk:
# - Child: A child shown on the kiosk
# - ChecklistItem: One daily routine step ("Brush teeth")
# - ChecklistStats: Progress summary for today
# - ChecklistToggleRequest: Tap on an item
#
# Completions are stored per child, per item, per day in
# checklist_completions; nothing needs resetting at midnight.
# =============================================================================

from pydantic import BaseModel, Field


class Child(BaseModel):
    """A child in the family."""
    model_config = {"extra": "allow"}

    id: str
    name: str
    age: int | None = None
    grade: str | None = None
    avatar_type: str | None = None
    avatar_data: str | None = None
    avatar_background: str | None = None


class ChecklistItem(BaseModel):
    """
    A routine step, flagged with today's completion state.

    Weekday-only items are hidden on Saturday and Sunday.
    """
    model_config = {"extra": "allow"}

    id: str
    title: str
    description: str | None = None
    icon: str | None = None
    display_order: int = 0
    weekdays_only: bool = True
    is_active: bool = True
    is_completed: bool = False


class ChecklistStats(BaseModel):
    """
    Today's progress.

    `is_complete` is only true when there is at least one item and every
    item is done.
    """
    total: int = 0
    completed: int = 0
    remaining: int = 0
    is_complete: bool = False

    @classmethod
    def from_items(cls, items: list[ChecklistItem]) -> "ChecklistStats":
        completed = sum(1 for item in items if item.is_completed)
        return cls(
            total=len(items),
            completed=completed,
            remaining=len(items) - completed,
            is_complete=bool(items) and completed == len(items),
        )


class ChildChecklist(Child):
    """A child with today's checklist and stats."""
    checklist: list[ChecklistItem] = Field(default_factory=list)
    stats: ChecklistStats = Field(default_factory=ChecklistStats)


class ChecklistToggleRequest(BaseModel):
    """
    Body of POST /checklist.

    `is_completed` is the item's state BEFORE the tap: true removes
    today's completion, false records one.
    """
    child_id: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1)
    is_completed: bool
