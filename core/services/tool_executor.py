# =============================================================================
# core/services/tool_executor.py - Assistant Tool Execution
# =============================================================================
# Runs a tool the chat model asked for and wraps the outcome in a
# ToolResult. Failures are reported back to the model as
# {"success": false, "error": "..."} so it can explain them to the user;
# nothing here raises.
#
# `user` is the signed-in family member (None for guests). It decides
# which private task projects are visible and who may read reminders.
# =============================================================================

import logging
from typing import Any, Callable

from app.auth.models import AuthUser
from app.config import settings
from core.models.calendar import SuggestTimeRequest
from core.models.chat import ToolResult
from core.services.calendar_service import CalendarService
from core.services.knowledge_base import KnowledgeBaseService
from core.services.priority_service import (
    PriorityService,
    get_current_week_start,
    get_previous_week_start,
)
from core.services.reminder_service import ReminderService
from core.services.task_service import TaskService
from lib.todoist import TodoistClient

logger = logging.getLogger(__name__)

DEFAULT_DAYS = 7
DEFAULT_MIN_DURATION = 30


# -----------------------------------------------------------------------------
# Handlers
# -----------------------------------------------------------------------------

def _get_tasks(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    return ToolResult(success=True, data=TaskService.get_all_tasks(user.name if user else None))


def _create_task(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    task = TodoistClient.create_task(
        content=tool_input["content"],
        description=tool_input.get("description"),
        due_string=tool_input.get("due_string"),
        priority=tool_input.get("priority"),
        project_id=tool_input.get("project_id"),
    )
    return ToolResult(success=True, data=task)


def _update_task(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    task = TodoistClient.update_task(
        tool_input["task_id"],
        content=tool_input.get("content"),
        due_string=tool_input.get("due_string"),
        priority=tool_input.get("priority"),
    )
    return ToolResult(success=True, data=task)


def _complete_task(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    TodoistClient.complete_task(tool_input["task_id"])
    return ToolResult(success=True, data={"completed": True, "task_id": tool_input["task_id"]})


def _delete_task(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    TodoistClient.delete_task(tool_input["task_id"])
    return ToolResult(success=True, data={"deleted": True, "task_id": tool_input["task_id"]})


def _get_family_info(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    return ToolResult(success=True, data=KnowledgeBaseService.fetch_all_family_data())


def _get_calendar(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    days = int(tool_input.get("days") or DEFAULT_DAYS)
    return ToolResult(success=True, data=CalendarService.get_cached_events(days))


def _get_reminders(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    owner = settings.REMINDERS_OWNER
    if user is not None and user.name.lower() != owner.lower():
        return ToolResult(
            success=True,
            data=[],
            error=f"Reminders are only available for {owner.title()}",
        )
    return ToolResult(success=True, data=ReminderService.get_cached_reminders(owner))


def _get_priorities(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    week_start = get_previous_week_start() if tool_input.get("previous_week") else get_current_week_start()
    priorities = PriorityService.get_weekly_priorities(week_start)
    return ToolResult(success=True, data={
        "week_start": week_start,
        "priorities": [{"number": p.priority_number, "content": p.content} for p in priorities],
    })


def _set_priorities(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    priorities = list(tool_input.get("priorities") or [])
    week_start = PriorityService.set_weekly_priorities(priorities)
    return ToolResult(success=True, data={"week_start": week_start, "priorities_set": len(priorities)})


def _update_priority(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    priority = PriorityService.update_weekly_priority(
        int(tool_input["priority_number"]),
        tool_input["content"],
    )
    return ToolResult(success=True, data={
        "priority_number": priority.priority_number,
        "content": priority.content,
    })


def _get_free_time(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    free = CalendarService.get_free_time(
        days=int(tool_input.get("days") or DEFAULT_DAYS),
        min_duration=int(tool_input.get("min_duration") or DEFAULT_MIN_DURATION),
    )
    return ToolResult(success=True, data=free)


def _suggest_time_block(tool_input: dict[str, Any], user: AuthUser | None) -> ToolResult:
    request = SuggestTimeRequest(
        task=tool_input["task_description"],
        duration_minutes=tool_input.get("estimated_minutes"),
        prefer_morning=bool(tool_input.get("prefer_morning", False)),
    )
    return ToolResult(success=True, data=CalendarService.suggest_time(request))


TOOL_HANDLERS: dict[str, Callable[[dict[str, Any], AuthUser | None], ToolResult]] = {
    "get_tasks": _get_tasks,
    "create_task": _create_task,
    "update_task": _update_task,
    "complete_task": _complete_task,
    "delete_task": _delete_task,
    "get_family_info": _get_family_info,
    "get_calendar": _get_calendar,
    "get_reminders": _get_reminders,
    "get_priorities": _get_priorities,
    "set_priorities": _set_priorities,
    "update_priority": _update_priority,
    "get_free_time": _get_free_time,
    "suggest_time_block": _suggest_time_block,
}


def execute_tool(name: str, tool_input: dict[str, Any] | None, user: AuthUser | None) -> ToolResult:
    """
    Execute one tool call.

    Args:
        name: Tool name from the model
        tool_input: Parsed JSON arguments
        user: Signed-in family member, or None for guests

    Returns:
        ToolResult; unknown tools and any failure give success=False
    """
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return ToolResult(success=False, error=f"Unknown tool: {name}")

    try:
        result = handler(tool_input or {}, user)
    except KeyError as e:
        return ToolResult(success=False, error=f"Missing required argument: {e.args[0]}")
    except Exception as e:
        logger.error(f"Tool {name} failed: {e}")
        return ToolResult(success=False, error=getattr(e, "message", None) or str(e))

    logger.debug(f"Tool {name} succeeded")
    return result
