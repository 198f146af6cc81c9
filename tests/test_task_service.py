# =============================================================================
# tests/test_task_service.py - Task Widget Tests
# =============================================================================
# Todoist client, task shaping (private projects, house project) and the
# dashboard / house / kid task routes.
# =============================================================================

from unittest.mock import MagicMock, patch

import httpx
import pytest

from app.config import settings
from core.services.task_service import (
    TaskService,
    compact_task,
    enrich_with_project_names,
    filter_private_projects,
    find_project,
)
from lib.supabase_client import SupabaseClient
from lib.todoist import TodoistClient, TodoistError

PROJECTS = [
    {"id": "p-house", "name": "House Tasks"},
    {"id": "p-personal", "name": "Personal"},
    {"id": "p-riley", "name": "Riley"},
]

TASKS = [
    {"id": "t1", "content": "Take out trash", "project_id": "p-house", "due": {"string": "today"}, "priority": 1},
    {"id": "t2", "content": "Dentist for me", "project_id": "p-personal", "priority": 4},
    {"id": "t3", "content": "Read 20 minutes", "project_id": "p-riley", "priority": 1},
    {"id": "t4", "content": "Loose task", "project_id": "p-gone"},
]


@pytest.fixture
def todoist():
    """Patch the Todoist client with the sample projects and tasks."""
    with patch.object(TodoistClient, "get_tasks", return_value=[dict(t) for t in TASKS]), \
            patch.object(TodoistClient, "get_projects", return_value=PROJECTS), \
            patch.object(TodoistClient, "complete_task") as complete:
        yield complete


# =============================================================================
# Helpers
# =============================================================================

class TestTaskHelpers:

    def test_project_names_default_to_inbox(self):
        enriched = enrich_with_project_names(TASKS, PROJECTS)
        assert [t["project_name"] for t in enriched] == ["House Tasks", "Personal", "Riley", "Inbox"]

    def test_private_projects_hidden_from_others(self):
        enriched = enrich_with_project_names(TASKS, PROJECTS)
        visible = filter_private_projects(enriched, "Alex")
        assert "t2" not in [t["id"] for t in visible]

    def test_private_projects_visible_to_owner(self, monkeypatch):
        monkeypatch.setattr(settings, "PRIVATE_TASK_OWNER", "Max")
        enriched = enrich_with_project_names(TASKS, PROJECTS)
        assert len(filter_private_projects(enriched, "max")) == 4

    def test_find_project_case_insensitive(self):
        assert find_project(PROJECTS, "riley")["id"] == "p-riley"
        assert find_project(PROJECTS, "Devin") is None

    def test_compact_task(self):
        assert compact_task(TASKS[0]) == {
            "id": "t1",
            "content": "Take out trash",
            "description": None,
            "priority": 1,
            "due": "today",
        }
        assert compact_task(TASKS[1])["due"] is None


# =============================================================================
# TaskService
# =============================================================================

class TestTaskService:

    def test_anonymous_dashboard_sees_house_project_only(self, todoist):
        tasks = TaskService.get_dashboard_tasks(viewer_name=None, signed_in=False)
        assert [t["id"] for t in tasks] == ["t1"]
        assert tasks[0]["project_name"] == "House Tasks"

    def test_anonymous_without_house_project(self, todoist, monkeypatch):
        monkeypatch.setattr(settings, "HOUSE_TASKS_PROJECT", "Chores")
        assert TaskService.get_dashboard_tasks(viewer_name=None, signed_in=False) == []

    def test_signed_in_dashboard_filters_private(self, todoist, monkeypatch):
        monkeypatch.setattr(settings, "PRIVATE_TASK_OWNER", "Max")
        others = TaskService.get_dashboard_tasks(viewer_name="Alex", signed_in=True)
        owner = TaskService.get_dashboard_tasks(viewer_name="Max", signed_in=True)

        assert [t["id"] for t in others] == ["t1", "t3", "t4"]
        assert len(owner) == 4

    def test_project_tasks(self, todoist):
        result = TaskService.project_tasks("RILEY")
        assert result["project_id"] == "p-riley"
        assert [t["content"] for t in result["tasks"]] == ["Read 20 minutes"]

    def test_unknown_project(self, todoist):
        assert TaskService.project_tasks("Parker") == {"tasks": [], "project_id": None}


# =============================================================================
# TodoistClient
# =============================================================================

class TestTodoistClient:

    def test_not_configured(self, monkeypatch):
        monkeypatch.setattr(settings, "TODOIST_API_TOKEN", None)
        with pytest.raises(TodoistError) as exc:
            TodoistClient.get_tasks()
        assert exc.value.code == "TODOIST_NOT_CONFIGURED"

    def test_sends_bearer_token(self, monkeypatch):
        monkeypatch.setattr(settings, "TODOIST_API_TOKEN", "todo-token")
        response = MagicMock(status_code=200, content=b"[]")
        response.json.return_value = [{"id": "t1"}]

        with patch("lib.todoist.httpx.request", return_value=response) as request:
            assert TodoistClient.get_tasks() == [{"id": "t1"}]

        method, url = request.call_args.args
        assert method == "GET"
        assert url.endswith("/tasks")
        assert request.call_args.kwargs["headers"] == {"Authorization": "Bearer todo-token"}

    def test_create_task_drops_empty_fields(self, monkeypatch):
        monkeypatch.setattr(settings, "TODOIST_API_TOKEN", "todo-token")
        response = MagicMock(status_code=200, content=b"{}")
        response.json.return_value = {"id": "new"}

        with patch("lib.todoist.httpx.request", return_value=response) as request:
            TodoistClient.create_task("Buy milk", due_string="tomorrow")

        assert request.call_args.kwargs["json"] == {"content": "Buy milk", "due_string": "tomorrow"}

    def test_complete_task_no_content(self, monkeypatch):
        monkeypatch.setattr(settings, "TODOIST_API_TOKEN", "todo-token")
        with patch("lib.todoist.httpx.request", return_value=MagicMock(status_code=204, content=b"")) as request:
            assert TodoistClient.complete_task("t1") is None
        assert request.call_args.args == ("POST", "https://api.todoist.com/rest/v2/tasks/t1/close")

    def test_api_error(self, monkeypatch):
        monkeypatch.setattr(settings, "TODOIST_API_TOKEN", "todo-token")
        with patch("lib.todoist.httpx.request", return_value=MagicMock(status_code=401)):
            with pytest.raises(TodoistError) as exc:
                TodoistClient.get_projects()
        assert exc.value.code == "TODOIST_API_ERROR"
        assert exc.value.suggestion

    def test_network_error(self, monkeypatch):
        monkeypatch.setattr(settings, "TODOIST_API_TOKEN", "todo-token")
        with patch("lib.todoist.httpx.request", side_effect=httpx.ConnectTimeout("slow")):
            with pytest.raises(TodoistError) as exc:
                TodoistClient.get_tasks()
        assert exc.value.code == "TODOIST_UNREACHABLE"


# =============================================================================
# Routes
# =============================================================================

class TestDashboardTaskRoutes:

    def test_anonymous(self, client, todoist):
        response = client.get("/api/v1/dashboard/tasks")
        assert [t["id"] for t in response.json()["tasks"]] == ["t1"]

    def test_viewer_resolved_from_user_id(self, client, todoist, monkeypatch):
        monkeypatch.setattr(settings, "PRIVATE_TASK_OWNER", "Max")
        with patch.object(SupabaseClient, "fetch_user", return_value={"id": "u1", "name": "Max", "role": "parent"}):
            response = client.get("/api/v1/dashboard/tasks", params={"user_id": "u1"})
        assert len(response.json()["tasks"]) == 4

    def test_malformed_user_id_is_anonymous(self, client, todoist, fake_db):
        fake_db.results["users"] = [RuntimeError("22P02 invalid input syntax for type uuid")]
        response = client.get("/api/v1/dashboard/tasks", params={"user_id": "abc"})
        assert [t["id"] for t in response.json()["tasks"]] == ["t1"]

    def test_failure_returns_empty_list(self, client):
        with patch.object(TodoistClient, "get_tasks", side_effect=TodoistError("down")):
            response = client.get("/api/v1/dashboard/tasks")
        assert response.status_code == 200
        assert response.json() == {"tasks": []}

    def test_complete(self, client, todoist):
        response = client.post("/api/v1/dashboard/tasks", json={"action": "complete", "task_id": "t1"})
        assert response.json() == {"success": True}
        todoist.assert_called_once_with("t1")

    def test_unknown_action(self, client, todoist):
        response = client.post("/api/v1/dashboard/tasks", json={"action": "archive", "task_id": "t1"})
        assert response.status_code == 400


class TestProjectTaskRoutes:

    def test_house_tasks(self, client, todoist):
        body = client.get("/api/v1/house-tasks").json()
        assert body["project_id"] == "p-house"
        assert body["tasks"][0]["due"] == "today"

    def test_kid_tasks(self, client, todoist):
        body = client.get("/api/v1/kid-tasks/riley").json()
        assert [t["id"] for t in body["tasks"]] == ["t3"]

    def test_complete_requires_task_id(self, client, todoist):
        assert client.post("/api/v1/house-tasks", json={}).status_code == 400
        todoist.assert_not_called()

    def test_complete_kid_task(self, client, todoist):
        response = client.post("/api/v1/kid-tasks/riley", json={"task_id": "t3"})
        assert response.json() == {"success": True}
        todoist.assert_called_once_with("t3")

    def test_todoist_not_configured_is_503(self, client, monkeypatch):
        monkeypatch.setattr(settings, "TODOIST_API_TOKEN", None)
        response = client.get("/api/v1/house-tasks")
        assert response.status_code == 503
        assert response.json()["code"] == "TODOIST_NOT_CONFIGURED"
