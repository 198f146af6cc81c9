# =============================================================================
# app/routers/checklist.py - Kids Checklist (Kiosk)
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter

from app.exceptions import OperationFailedError
from core.models.checklist import ChecklistToggleRequest
from core.services.checklist_service import ChecklistService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def get_checklists() -> dict[str, Any]:
    """Every child with today's checklist and progress."""
    children = ChecklistService.get_children_with_checklists()
    return {"children": [child.model_dump() for child in children]}


@router.post("")
async def toggle_item(request: ChecklistToggleRequest) -> dict[str, Any]:
    """
    Tap on an item.

    `is_completed` is the state before the tap.
    """
    ok = ChecklistService.toggle_checklist_item(
        request.child_id,
        request.item_id,
        is_currently_completed=request.is_completed,
    )
    if not ok:
        raise OperationFailedError(
            "Failed to update checklist item",
            details={"child_id": request.child_id, "item_id": request.item_id},
        )
    return {"success": True}
