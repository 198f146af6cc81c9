# =============================================================================
# lib/todoist.py - Todoist REST Client
# =============================================================================
# Thin wrapper around the Todoist REST API (v2) used by the task widgets,
# the kid/house task lists and the chat assistant's task tools.
#
# Usage:
#   from lib.todoist import TodoistClient
#   tasks = TodoistClient.get_tasks()
#   TodoistClient.complete_task("123")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

TODOIST_API_URL = "https://api.todoist.com/rest/v2"
REQUEST_TIMEOUT = 15


class TodoistError(ApplicationError):
    """Raised when the Todoist API is unreachable or answers with an error."""

    def __init__(
        self,
        message: str,
        code: str = "TODOIST_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


class TodoistClient:
    """
    Todoist REST operations.

    All methods are class methods; each call opens a short-lived httpx
    request authenticated with TODOIST_API_TOKEN.
    """

    @staticmethod
    def _token() -> str:
        token = settings.TODOIST_API_TOKEN
        if not token:
            raise TodoistError(
                message="Todoist is not configured",
                code="TODOIST_NOT_CONFIGURED",
                suggestion="Set TODOIST_API_TOKEN in your .env file",
            )
        return token

    @classmethod
    def _request(
        cls,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {cls._token()}"}
        url = f"{TODOIST_API_URL}{path}"

        try:
            response = httpx.request(method, url, headers=headers, json=json, timeout=REQUEST_TIMEOUT)
        except httpx.HTTPError as e:
            raise TodoistError(
                message=f"Todoist request failed: {e}",
                code="TODOIST_UNREACHABLE",
                suggestion="Check network connectivity to api.todoist.com",
                details={"method": method, "path": path},
            )

        if response.status_code >= 400:
            raise TodoistError(
                message=f"Todoist API error: {response.status_code}",
                code="TODOIST_API_ERROR",
                suggestion="Check that TODOIST_API_TOKEN is valid" if response.status_code in (401, 403) else None,
                details={"method": method, "path": path, "status": response.status_code},
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    @classmethod
    def get_tasks(cls) -> list[dict[str, Any]]:
        """Fetch all active tasks."""
        tasks = cls._request("GET", "/tasks") or []
        logger.debug(f"Fetched {len(tasks)} Todoist tasks")
        return tasks

    @classmethod
    def get_projects(cls) -> list[dict[str, Any]]:
        """Fetch all projects."""
        return cls._request("GET", "/projects") or []

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    @classmethod
    def create_task(
        cls,
        content: str,
        description: str | None = None,
        due_string: str | None = None,
        priority: int | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a task.

        Args:
            content: Task title
            description: Optional longer description
            due_string: Natural language due date ("tomorrow", "jan 20")
            priority: 1 (normal) to 4 (urgent)
            project_id: Target project (Inbox when omitted)
        """
        payload = {
            "content": content,
            "description": description,
            "due_string": due_string,
            "priority": priority,
            "project_id": project_id,
        }
        task = cls._request("POST", "/tasks", json={k: v for k, v in payload.items() if v is not None})
        logger.info(f"Created Todoist task {task.get('id')}")
        return task

    @classmethod
    def update_task(
        cls,
        task_id: str,
        content: str | None = None,
        description: str | None = None,
        due_string: str | None = None,
        priority: int | None = None,
    ) -> dict[str, Any]:
        """Update the given fields of a task."""
        payload = {
            "content": content,
            "description": description,
            "due_string": due_string,
            "priority": priority,
        }
        return cls._request(
            "POST",
            f"/tasks/{task_id}",
            json={k: v for k, v in payload.items() if v is not None},
        )

    @classmethod
    def complete_task(cls, task_id: str) -> None:
        """Close (complete) a task."""
        cls._request("POST", f"/tasks/{task_id}/close")
        logger.info(f"Completed Todoist task {task_id}")

    @classmethod
    def delete_task(cls, task_id: str) -> None:
        """Delete a task permanently."""
        cls._request("DELETE", f"/tasks/{task_id}")
        logger.info(f"Deleted Todoist task {task_id}")
