# =============================================================================
# app/routers/priorities.py - Weekly Priorities
# =============================================================================

from typing import Annotated, Any

from fastapi import APIRouter, Path, Query

from core.models.priorities import MAX_PRIORITIES, SetPrioritiesRequest, UpdatePriorityRequest
from core.services.priority_service import (
    PriorityService,
    get_current_week_start,
    get_previous_week_start,
)

router = APIRouter()


@router.get("")
async def get_priorities(
    previous_week: Annotated[bool, Query(description="Last week instead of this week")] = False,
) -> dict[str, Any]:
    week_start = get_previous_week_start() if previous_week else get_current_week_start()
    priorities = PriorityService.get_weekly_priorities(week_start)
    return {"week_start": week_start, "priorities": [p.model_dump() for p in priorities]}


@router.put("")
async def set_priorities(request: SetPrioritiesRequest) -> dict[str, Any]:
    """Replace this week's list (1-5 items, numbered in order)."""
    week_start = PriorityService.set_weekly_priorities(request.priorities)
    return {"week_start": week_start, "priorities_set": len(request.priorities)}


@router.patch("/{number}")
async def update_priority(
    request: UpdatePriorityRequest,
    number: Annotated[int, Path(ge=1, le=MAX_PRIORITIES)],
) -> dict[str, Any]:
    return PriorityService.update_weekly_priority(number, request.content).model_dump()
