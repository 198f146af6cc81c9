# =============================================================================
# app/routers/reminders.py - Cached Phone Reminders
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query

from app.exceptions import InvalidInputError
from core.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_reminders(
    user_id: Annotated[str | None, Query(description="User id or name")] = None,
) -> dict[str, Any]:
    """
    Incomplete reminders for a user, soonest due first.

    Lookup failures return an empty list.
    """
    if not user_id:
        raise InvalidInputError("user_id is required", field="user_id")

    try:
        return {"reminders": ReminderService.get_cached_reminders(user_id)}
    except Exception as e:
        logger.error(f"Failed to fetch reminders for {user_id}: {e}")
        return {"reminders": []}
