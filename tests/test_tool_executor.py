# =============================================================================
# tests/test_tool_executor.py - Assistant Tool Tests
# =============================================================================

from unittest.mock import patch

from app.auth.models import AuthUser
from core.services.calendar_service import CalendarService
from core.services.knowledge_base import KnowledgeBaseService
from core.services.priority_service import PriorityService
from core.services.reminder_service import ReminderService
from core.services.tool_executor import TOOL_HANDLERS, execute_tool
from lib.todoist import TodoistClient, TodoistError

ALEX = AuthUser(id="u1", name="Alex", role="parent")
MAX = AuthUser(id="u2", name="Max", role="parent")


class TestExecuteTool:

    def test_unknown_tool(self):
        result = execute_tool("launch_rocket", {}, None)
        assert result.success is False
        assert result.error == "Unknown tool: launch_rocket"

    def test_missing_argument(self):
        result = execute_tool("complete_task", {}, ALEX)
        assert result.success is False
        assert result.error == "Missing required argument: task_id"

    def test_failure_uses_error_message(self):
        with patch.object(TodoistClient, "delete_task", side_effect=TodoistError("Todoist request failed: 500")):
            result = execute_tool("delete_task", {"task_id": "t1"}, ALEX)
        assert result.success is False
        assert result.error == "Todoist request failed: 500"

    def test_none_input(self):
        with patch.object(KnowledgeBaseService, "fetch_all_family_data", return_value="## PEOPLE"):
            result = execute_tool("get_family_info", None, None)
        assert result.success is True
        assert result.data == "## PEOPLE"

    def test_every_tool_has_a_handler(self):
        from core.services.chat_tools import TOOLS

        names = {tool["function"]["name"] for tool in TOOLS}
        assert names == set(TOOL_HANDLERS)


class TestReminderTool:

    def test_owner_gets_reminders(self):
        with patch.object(ReminderService, "get_cached_reminders", return_value=[{"title": "Milk"}]) as get:
            result = execute_tool("get_reminders", {}, ALEX)
        get.assert_called_once_with("alex")
        assert result.data == [{"title": "Milk"}]

    def test_other_user_is_refused(self):
        with patch.object(ReminderService, "get_cached_reminders") as get:
            result = execute_tool("get_reminders", {}, MAX)
        get.assert_not_called()
        assert result.success is True
        assert result.data == []
        assert result.error == "Reminders are only available for Alex"

    def test_guest_gets_owner_reminders(self):
        with patch.object(ReminderService, "get_cached_reminders", return_value=[]) as get:
            execute_tool("get_reminders", {}, None)
        get.assert_called_once()


class TestOtherTools:

    def test_set_priorities(self):
        with patch.object(PriorityService, "set_weekly_priorities", return_value="2024-01-15"):
            result = execute_tool("set_priorities", {"priorities": ["A", "B"]}, ALEX)
        assert result.data == {"week_start": "2024-01-15", "priorities_set": 2}

    def test_calendar_default_days(self):
        with patch.object(CalendarService, "get_cached_events", return_value=[]) as get:
            execute_tool("get_calendar", {}, ALEX)
        get.assert_called_once_with(7)

    def test_create_task(self):
        with patch.object(TodoistClient, "create_task", return_value={"id": "t9"}) as create:
            result = execute_tool("create_task", {"content": "Buy milk", "priority": 4}, ALEX)
        assert result.data == {"id": "t9"}
        assert create.call_args.kwargs["content"] == "Buy milk"
        assert create.call_args.kwargs["priority"] == 4

    def test_free_time_arguments(self):
        with patch.object(CalendarService, "get_free_time", return_value={"slots": []}) as get:
            execute_tool("get_free_time", {"days": "3"}, ALEX)
        get.assert_called_once_with(days=3, min_duration=30)
