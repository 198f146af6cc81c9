# =============================================================================
# core/services/chat_tools.py - Assistant Tool Definitions
# =============================================================================
# OpenAI function-calling schemas for every tool the full assistant can
# call. Execution lives in core/services/tool_executor.py.
# =============================================================================

from typing import Any


def _tool(name: str, description: str, properties: dict[str, Any] | None = None,
          required: list[str] | None = None) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties or {},
                "required": required or [],
            },
        },
    }


_TASK_ID = {"type": "string", "description": "The Todoist task ID"}

TOOLS: list[dict[str, Any]] = [
    _tool(
        "get_tasks",
        "Refresh and get the current list of Todoist tasks. Use this to get updated task data.",
    ),
    _tool(
        "create_task",
        "Create a new task in Todoist. Returns the created task.",
        {
            "content": {"type": "string", "description": "The task content/title"},
            "description": {"type": "string", "description": "Optional task description"},
            "due_string": {
                "type": "string",
                "description": 'Natural language due date like "tomorrow", "next monday", "jan 20"',
            },
            "priority": {"type": "integer", "description": "Priority 1-4. 1=normal, 4=urgent"},
            "project_id": {"type": "string", "description": "Optional Todoist project ID"},
        },
        ["content"],
    ),
    _tool(
        "update_task",
        "Update an existing task. Can change content, due date, or priority.",
        {
            "task_id": _TASK_ID,
            "content": {"type": "string", "description": "New task content/title"},
            "due_string": {"type": "string", "description": "New due date in natural language"},
            "priority": {"type": "integer", "description": "New priority 1-4"},
        },
        ["task_id"],
    ),
    _tool("complete_task", "Mark a task as complete/done.", {"task_id": _TASK_ID}, ["task_id"]),
    _tool("delete_task", "Delete a task from Todoist permanently.", {"task_id": _TASK_ID}, ["task_id"]),
    _tool(
        "get_family_info",
        "Get family reference information - doctors, contacts, insurance, etc. "
        "Use when the user asks about family contacts or info.",
    ),
    _tool(
        "get_calendar",
        "Get upcoming calendar events for the family.",
        {"days": {"type": "integer", "description": "Number of days to look ahead (default 7)"}},
    ),
    _tool("get_reminders", "Get the family's cached phone reminders."),
    _tool(
        "get_priorities",
        "Get weekly priorities. Returns the current week by default, or the previous week if specified.",
        {
            "previous_week": {
                "type": "boolean",
                "description": "Set true to get last week's priorities instead of this week's",
            },
        },
    ),
    _tool(
        "set_priorities",
        "Set priorities for the current week. Replaces any existing priorities.",
        {
            "priorities": {
                "type": "array",
                "items": {"type": "string"},
                "description": "1-5 priority strings for the week",
            },
        },
        ["priorities"],
    ),
    _tool(
        "update_priority",
        "Update a single priority by its number (1-5).",
        {
            "priority_number": {"type": "integer", "description": "Which priority to update (1-5)"},
            "content": {"type": "string", "description": "New priority text"},
        },
        ["priority_number", "content"],
    ),
    _tool(
        "get_free_time",
        "Find free time slots during working hours. Use when the user asks about availability, "
        'wants to schedule something, or asks "when do I have time for..."',
        {
            "days": {"type": "integer", "description": "Number of days to analyze (default 7)"},
            "min_duration": {"type": "integer", "description": "Minimum slot length in minutes (default 30)"},
        },
    ),
    _tool(
        "suggest_time_block",
        "Suggest when to schedule a task based on its estimated duration and calendar availability.",
        {
            "task_description": {"type": "string", "description": "What the user needs to do"},
            "estimated_minutes": {
                "type": "integer",
                "description": "Estimated time needed in minutes. Estimated from the task if omitted.",
            },
            "prefer_morning": {"type": "boolean", "description": "Prefer morning slots if available"},
        },
        ["task_description"],
    ),
]

TOOL_NAMES = [tool["function"]["name"] for tool in TOOLS]
