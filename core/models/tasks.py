# =============================================================================
# core/models/tasks.py - Task Schemas
# =============================================================================
# Request bodies for the Todoist-backed task widgets.
# =============================================================================

from typing import Literal

from pydantic import BaseModel, Field


class TaskActionRequest(BaseModel):
    """
    Body of POST /dashboard/tasks.

    Only "complete" is supported.

    Example:
        {"action": "complete", "task_id": "7812345678"}
    """
    action: Literal["complete"]
    task_id: str = Field(..., min_length=1)


class TaskCompleteRequest(BaseModel):
    """Body of POST /house-tasks and POST /kid-tasks/{name}."""
    task_id: str | None = Field(default=None, description="Todoist task id to complete")
