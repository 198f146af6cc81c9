# =============================================================================
# core/services/task_service.py - Todoist Task Views
# =============================================================================
# Shapes Todoist data for the dashboard widgets:
# - Dashboard: every task with its project name, minus private projects
#   unless the viewer owns them; anonymous kiosk viewers only see the
#   shared house project
# - House tasks / kid tasks: one project's tasks in a compact form
# =============================================================================

import logging
from typing import Any

from app.config import settings
from lib.todoist import TodoistClient

logger = logging.getLogger(__name__)

INBOX = "Inbox"


def enrich_with_project_names(
    tasks: list[dict[str, Any]],
    projects: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Add project_name to each task ("Inbox" when the project is unknown)."""
    names = {p.get("id"): p.get("name") for p in projects}
    return [{**task, "project_name": names.get(task.get("project_id")) or INBOX} for task in tasks]


def filter_private_projects(
    tasks: list[dict[str, Any]],
    viewer_name: str | None,
) -> list[dict[str, Any]]:
    """
    Hide PRIVATE_TASK_PROJECTS from everyone but PRIVATE_TASK_OWNER.

    Tasks must already carry project_name.
    """
    if viewer_name and viewer_name.lower() == settings.PRIVATE_TASK_OWNER.lower():
        return tasks
    private = set(settings.private_task_projects_list)
    return [t for t in tasks if (t.get("project_name") or "").lower() not in private]


def find_project(projects: list[dict[str, Any]], name: str) -> dict[str, Any] | None:
    """Case-insensitive project lookup by name."""
    for project in projects:
        if (project.get("name") or "").lower() == name.lower():
            return project
    return None


def compact_task(task: dict[str, Any]) -> dict[str, Any]:
    """Small task view used by the house and kid widgets."""
    due = task.get("due") or {}
    return {
        "id": task.get("id"),
        "content": task.get("content"),
        "description": task.get("description"),
        "priority": task.get("priority"),
        "due": due.get("string") or None,
    }


class TaskService:
    """
    Service for Todoist-backed task lists.

    Every method raises lib.todoist.TodoistError when Todoist is
    unreachable or not configured.
    """

    @staticmethod
    def get_all_tasks(viewer_name: str | None) -> list[dict[str, Any]]:
        """All tasks with project names, private projects filtered for the viewer."""
        tasks = TodoistClient.get_tasks()
        projects = TodoistClient.get_projects()
        return filter_private_projects(enrich_with_project_names(tasks, projects), viewer_name)

    @staticmethod
    def get_dashboard_tasks(viewer_name: str | None, signed_in: bool) -> list[dict[str, Any]]:
        """
        Tasks for the dashboard widget.

        Anonymous viewers only get the house project (empty when that
        project doesn't exist).
        """
        tasks = TodoistClient.get_tasks()
        projects = TodoistClient.get_projects()

        if not signed_in:
            house = find_project(projects, settings.HOUSE_TASKS_PROJECT)
            if not house:
                return []
            tasks = [t for t in tasks if t.get("project_id") == house.get("id")]
            return enrich_with_project_names(tasks, projects)

        return filter_private_projects(enrich_with_project_names(tasks, projects), viewer_name)

    @staticmethod
    def project_tasks(project_name: str) -> dict[str, Any]:
        """
        Compact tasks of one project, matched by name (case-insensitive).

        Returns:
            {"tasks": [...], "project_id": id}, or no tasks and a None id
            when the project doesn't exist
        """
        tasks = TodoistClient.get_tasks()
        projects = TodoistClient.get_projects()

        project = find_project(projects, project_name)
        if not project:
            logger.debug(f"No Todoist project named '{project_name}'")
            return {"tasks": [], "project_id": None}

        return {
            "tasks": [compact_task(t) for t in tasks if t.get("project_id") == project.get("id")],
            "project_id": project.get("id"),
        }

    @staticmethod
    def complete_task(task_id: str) -> None:
        TodoistClient.complete_task(task_id)
