# =============================================================================
# core/models/priorities.py - Weekly Priorities Schemas
# =============================================================================
# Each week (starting Monday) has up to five numbered priorities stored in
# weekly_priorities, one row per (week_start, priority_number).
# =============================================================================

from pydantic import BaseModel, Field

MAX_PRIORITIES = 5


class WeeklyPriority(BaseModel):
    week_start: str = Field(..., description="Monday of the week (YYYY-MM-DD)")
    priority_number: int = Field(..., ge=1, le=MAX_PRIORITIES)
    content: str


class SetPrioritiesRequest(BaseModel):
    """
    Body of PUT /priorities. Replaces the current week's list.

    Example:
        {"priorities": ["Book flights", "Finish taxes", "Call grandma"]}
    """
    priorities: list[str] = Field(..., max_length=MAX_PRIORITIES)


class UpdatePriorityRequest(BaseModel):
    """Body of PATCH /priorities/{number}."""
    content: str = Field(..., min_length=1, max_length=500)
