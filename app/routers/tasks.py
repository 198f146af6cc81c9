# =============================================================================
# app/routers/tasks.py - Project Task Lists
# =============================================================================
# The shared "House Tasks" list and each kid's own Todoist project, shown
# on the kiosk with a tap-to-complete action.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Path

from app.config import settings
from app.exceptions import InvalidInputError
from core.models.tasks import TaskCompleteRequest
from core.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()


def _complete(request: TaskCompleteRequest) -> dict[str, Any]:
    if not request.task_id:
        raise InvalidInputError("Task ID required", field="task_id")
    TaskService.complete_task(request.task_id)
    return {"success": True}


@router.get("/house-tasks")
async def house_tasks() -> dict[str, Any]:
    """Open tasks in the house project."""
    return TaskService.project_tasks(settings.HOUSE_TASKS_PROJECT)


@router.post("/house-tasks")
async def complete_house_task(request: TaskCompleteRequest) -> dict[str, Any]:
    return _complete(request)


@router.get("/kid-tasks/{name}")
async def kid_tasks(
    name: str = Path(..., min_length=1, description="Kid's name (matches a Todoist project)"),
) -> dict[str, Any]:
    """Open tasks in the project named after the kid (case-insensitive)."""
    return TaskService.project_tasks(name)


@router.post("/kid-tasks/{name}")
async def complete_kid_task(
    request: TaskCompleteRequest,
    name: str = Path(..., min_length=1),
) -> dict[str, Any]:
    logger.debug(f"Completing task for {name}")
    return _complete(request)
