# =============================================================================
# tests/test_chat_service.py - Family Assistant Tests
# =============================================================================

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from app.auth.models import AuthUser
from app.config import settings
from core.models.chat import ChatHistoryItem, ToolResult
from core.services import chat_service
from core.services.analytics_service import AnalyticsService
from core.services.calendar_service import CalendarService
from core.services.chat_service import (
    BLOCKED_QUICK_MESSAGE,
    DONE,
    EMPTY_QUICK_MESSAGE,
    FALLBACK_QUICK_MESSAGE,
    ChatService,
    build_messages,
    format_event_context,
    is_blocked_quick_request,
    record_chat_event,
)
from core.services.knowledge_base import KnowledgeBaseService
from lib.llm import LLMError

ALEX = AuthUser(id="u1", name="Alex", role="parent")


def reply(content=None, tool_calls=None):
    return SimpleNamespace(content=content, tool_calls=tool_calls)


def tool_call(call_id, name, arguments="{}"):
    return SimpleNamespace(id=call_id, function=SimpleNamespace(name=name, arguments=arguments))


def history(n):
    return [
        ChatHistoryItem(role="user" if i % 2 == 0 else "assistant", content=f"turn {i}")
        for i in range(n)
    ]


class TestBuildMessages:

    def test_keeps_last_nine_history_items(self):
        messages = build_messages("now?", history(12), "DATA")
        assert messages[0]["role"] == "system"
        assert len(messages) == 1 + 9 + 1
        assert messages[-1]["content"] == "now?"

    def test_family_data_goes_on_first_user_turn(self):
        messages = build_messages("now?", history(12), "DATA")
        # history[3:] starts with an assistant turn, so the first user turn is "turn 4"
        assert messages[1] == {"role": "assistant", "content": "turn 3"}
        assert messages[2]["content"].startswith("FAMILY DATA (for reference lookups):\nDATA")
        assert messages[2]["content"].endswith("QUESTION: turn 4")
        assert messages[4]["content"] == "turn 6"

    def test_no_history(self):
        messages = build_messages("Who is the dentist?", [], "DATA")
        assert messages[1]["content"].endswith("QUESTION: Who is the dentist?")


class TestQuickChatGuards:

    @pytest.mark.parametrize("message,blocked", [
        ("Add a task to buy milk", True),
        ("please delete my reminder", True),
        ("Mark the todo done", True),
        ("What's on the calendar tomorrow?", False),
        ("How many tasks are there?", False),
        ("Make me laugh", False),
    ])
    def test_blocked(self, message, blocked):
        assert is_blocked_quick_request(message) is blocked

    def test_event_context(self):
        events = [{"title": "Soccer", "start_time": "2024-03-09T14:00:00+00:00"}]
        assert format_event_context(events) == "Upcoming events:\n- Soccer on Sat Mar 09"

    def test_event_context_empty(self):
        assert format_event_context([]) == "No upcoming events."


class TestQuickChat:

    def test_empty(self):
        assert ChatService.quick_chat("   ") == EMPTY_QUICK_MESSAGE

    def test_blocked_never_calls_model(self):
        with patch.object(chat_service, "complete_text") as complete:
            assert ChatService.quick_chat("create a task") == BLOCKED_QUICK_MESSAGE
        complete.assert_not_called()

    def test_answer(self):
        with patch.object(CalendarService, "get_cached_events", return_value=[]), \
                patch.object(chat_service, "complete_text", return_value="Pizza night!") as complete:
            assert ChatService.quick_chat("What's for dinner?") == "Pizza night!"

        system, question = complete.call_args.args
        assert "No upcoming events." in system
        assert question == "What's for dinner?"
        assert complete.call_args.kwargs["max_tokens"] == 300

    def test_error_becomes_apology(self):
        with patch.object(CalendarService, "get_cached_events", return_value=[]), \
                patch.object(chat_service, "complete_text", side_effect=LLMError("down")):
            assert ChatService.quick_chat("hello") == FALLBACK_QUICK_MESSAGE

    def test_route_always_200(self, client):
        with patch.object(CalendarService, "get_cached_events", side_effect=RuntimeError("db")):
            response = client.post("/api/v1/chat/quick", json={"message": "hi"})
        assert response.status_code == 200
        assert response.json() == {"response": FALLBACK_QUICK_MESSAGE}


class TestToolLoop:

    def test_plain_answer(self):
        with patch.object(chat_service, "create_completion", return_value=reply("Hello!")):
            events = list(ChatService.run_tool_loop([], ALEX))
        assert events == [{"type": "text", "content": "Hello!"}]

    def test_tool_round_then_answer(self):
        replies = [
            reply(None, [tool_call("c1", "get_calendar", '{"days": 2}')]),
            reply("You have soccer."),
        ]
        messages = [{"role": "system", "content": "s"}]

        with patch.object(chat_service, "create_completion", side_effect=replies) as create, \
                patch.object(chat_service, "execute_tool", return_value=ToolResult(success=True, data=[])) as execute:
            events = list(ChatService.run_tool_loop(messages, ALEX))

        assert [e["type"] for e in events] == ["tool_call", "tool_result", "text"]
        assert events[1] == {
            "type": "tool_result",
            "tool": "get_calendar",
            "result": {"success": True, "data": [], "error": None},
        }
        execute.assert_called_once_with("get_calendar", {"days": 2}, ALEX)
        assert create.call_count == 2
        assert messages[1]["tool_calls"][0]["id"] == "c1"
        assert messages[2]["role"] == "tool"
        assert messages[2]["tool_call_id"] == "c1"

    def test_bad_arguments(self):
        replies = [reply(None, [tool_call("c1", "get_calendar", "{not json")]), reply("ok")]
        with patch.object(chat_service, "create_completion", side_effect=replies), \
                patch.object(chat_service, "execute_tool") as execute:
            events = list(ChatService.run_tool_loop([], ALEX))
        execute.assert_not_called()
        assert events[1]["result"]["error"] == "Tool arguments were not valid JSON"

    def test_last_round_has_no_tools(self, monkeypatch):
        monkeypatch.setattr(settings, "CHAT_MAX_TOOL_ROUNDS", 2)
        replies = [reply(None, [tool_call("c1", "get_tasks")]), reply("done")]

        with patch.object(chat_service, "create_completion", side_effect=replies) as create, \
                patch.object(chat_service, "execute_tool", return_value=ToolResult(success=True)):
            list(ChatService.run_tool_loop([], ALEX))

        assert create.call_args_list[0].kwargs["tools"] is not None
        assert create.call_args_list[1].kwargs["tools"] is None

    def test_error_event(self):
        with patch.object(chat_service, "create_completion", side_effect=LLMError("Model unavailable")):
            events = list(ChatService.run_tool_loop([], ALEX))
        assert events == [{"type": "error", "message": "Model unavailable"}]


class TestStreamChat:

    def test_ends_with_done(self):
        with patch.object(KnowledgeBaseService, "fetch_all_family_data", return_value=""), \
                patch.object(chat_service, "create_completion", return_value=reply("Hi")), \
                patch.object(chat_service, "record_chat_event") as record:
            chunks = list(ChatService.stream_chat("hello", [], None, user_agent="kiosk"))

        assert json.loads(chunks[0]) == {"type": "text", "content": "Hi"}
        assert chunks[-1] == DONE
        query, _, user_agent, cached = record.call_args.args
        assert (query, user_agent, cached) == ("hello", "kiosk", False)

    def test_prepare_failure(self):
        with patch.object(ChatService, "prepare", side_effect=RuntimeError("kb down")):
            chunks = list(ChatService.stream_chat("hello", [], None))
        assert json.loads(chunks[0]) == {"type": "error", "message": "kb down"}
        assert chunks[-1] == DONE

    def test_route_streams_events(self, client):
        with patch.object(KnowledgeBaseService, "fetch_all_family_data", return_value=""), \
                patch.object(chat_service, "create_completion", return_value=reply("Hi")), \
                patch.object(chat_service, "record_chat_event"):
            response = client.post("/api/v1/chat", json={"message": "hello"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert 'data: {"type": "text", "content": "Hi"}' in response.text
        assert "data: [DONE]" in response.text

    def test_route_rejects_empty_message(self, client):
        assert client.post("/api/v1/chat", json={"message": ""}).status_code == 400


class TestRecordChatEvent:

    def test_skipped_without_analytics(self, monkeypatch):
        monkeypatch.setattr(settings, "SUPABASE_ANALYTICS_URL", None)
        with patch.object(AnalyticsService, "log_chat_event") as log:
            record_chat_event("q", 10, None, False)
        log.assert_not_called()

    def test_queued(self, monkeypatch):
        monkeypatch.setattr(settings, "SUPABASE_ANALYTICS_URL", "https://analytics.supabase.co")
        monkeypatch.setattr(settings, "SUPABASE_ANALYTICS_KEY", "key")

        with patch("workers.tasks.log_chat_event") as task:
            record_chat_event("q", 10, "ua", True)

        task.delay.assert_called_once_with(
            query="q", response_time_ms=10, user_agent="ua", cached_knowledge=True,
        )

    def test_inline_when_queue_unavailable(self, monkeypatch):
        monkeypatch.setattr(settings, "SUPABASE_ANALYTICS_URL", "https://analytics.supabase.co")
        monkeypatch.setattr(settings, "SUPABASE_ANALYTICS_KEY", "key")
        task = MagicMock()
        task.delay.side_effect = ConnectionError("redis down")

        with patch("workers.tasks.log_chat_event", task), \
                patch.object(AnalyticsService, "log_chat_event") as log:
            record_chat_event("q", 10, None, False)

        log.assert_called_once_with("q", 10, None, False)
