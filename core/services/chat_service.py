# =============================================================================
# core/services/chat_service.py - Family Assistant
# =============================================================================
# Two chat surfaces share the same model:
#
# 1. Full chat (parents): the knowledge base is prepended to the first user
#    turn, the model may call tools (tasks, calendar, reminders, priorities,
#    free time), and progress is streamed as events:
#
#       {"type": "text", "content": "..."}
#       {"type": "tool_call", "tool": "get_calendar"}
#       {"type": "tool_result", "tool": "get_calendar", "result": {...}}
#       {"type": "error", "message": "..."}
#       [DONE]
#
# 2. Quick chat (kiosk): one short read-only answer with next week's events
#    as context. Never fails; errors become a friendly apology.
# =============================================================================

import json
import logging
import time
from typing import Any, Iterator

from app.auth.models import AuthUser
from app.config import settings
from core.models.chat import ChatEventType, ChatHistoryItem, MessageRole, ToolResult
from core.prompts.assistant_system import (
    ASSISTANT_SYSTEM_PROMPT,
    build_first_user_turn,
    build_quick_chat_prompt,
)
from core.services.analytics_service import AnalyticsService
from core.services.calendar_service import CalendarService
from core.services.chat_tools import TOOLS
from core.services.knowledge_base import KnowledgeBaseService
from core.services.tool_executor import execute_tool
from lib.llm import complete_text, create_completion
from lib.utils import ApplicationError, parse_datetime

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 9
QUICK_CHAT_MAX_TOKENS = 300
QUICK_CHAT_EVENT_DAYS = 7
QUICK_CHAT_EVENT_LIMIT = 10
DONE = "[DONE]"

BLOCKED_ACTIONS = [
    "create", "add", "make", "new", "delete", "remove", "update",
    "change", "edit", "modify", "complete", "finish", "mark",
]
BLOCKED_SUBJECTS = ["task", "reminder", "todo"]

EMPTY_QUICK_MESSAGE = "Please ask a question!"
BLOCKED_QUICK_MESSAGE = (
    "I can only answer questions from the family home screen. To create or modify "
    "tasks, tap the Parents button to access the full dashboard."
)
FALLBACK_QUICK_MESSAGE = "Sorry, I'm having trouble right now. Try again?"
EMPTY_ANSWER_MESSAGE = "I couldn't understand that."


def build_messages(
    message: str,
    history: list[ChatHistoryItem],
    family_data: str,
) -> list[dict[str, Any]]:
    """
    System prompt, the last nine history items and the new message.

    The first user turn carries the knowledge base.
    """
    turns = [{"role": item.role.value, "content": item.content} for item in history[-HISTORY_LIMIT:]]
    turns.append({"role": MessageRole.USER.value, "content": message})

    for turn in turns:
        if turn["role"] == MessageRole.USER.value:
            turn["content"] = build_first_user_turn(family_data, turn["content"])
            break

    return [{"role": "system", "content": ASSISTANT_SYSTEM_PROMPT}, *turns]


def is_blocked_quick_request(message: str) -> bool:
    """Mutating requests about tasks/reminders/todos are for the parents dashboard."""
    lowered = message.lower()
    return (
        any(action in lowered for action in BLOCKED_ACTIONS)
        and any(subject in lowered for subject in BLOCKED_SUBJECTS)
    )


def format_event_context(events: list[dict[str, Any]]) -> str:
    if not events:
        return "No upcoming events."

    lines = []
    for event in events[:QUICK_CHAT_EVENT_LIMIT]:
        start = parse_datetime(event.get("start_time"))
        when = start.strftime("%a %b %d") if start else event.get("start_time")
        lines.append(f"- {event.get('title')} on {when}")
    return "Upcoming events:\n" + "\n".join(lines)


def _event(event_type: ChatEventType, **fields: Any) -> dict[str, Any]:
    return {"type": event_type.value, **fields}


def _parse_arguments(raw: str | None) -> dict[str, Any] | None:
    try:
        parsed = json.loads(raw or "{}")
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


class ChatService:
    """Service for the full assistant and the kiosk quick chat."""

    # -------------------------------------------------------------------------
    # Full Chat
    # -------------------------------------------------------------------------

    @staticmethod
    def prepare(message: str, history: list[ChatHistoryItem]) -> tuple[list[dict[str, Any]], bool]:
        """
        Build the model messages.

        Returns:
            (messages, whether the knowledge base came from cache)
        """
        cached = KnowledgeBaseService.is_cached()
        family_data = KnowledgeBaseService.fetch_all_family_data()
        return build_messages(message, history, family_data), cached

    @staticmethod
    def run_tool_loop(
        messages: list[dict[str, Any]],
        user: AuthUser | None,
    ) -> Iterator[dict[str, Any]]:
        """
        Ask the model, execute requested tools, repeat.

        Stops when the model answers without tools. The last allowed round
        (CHAT_MAX_TOOL_ROUNDS) is sent without tools so it must answer.
        Errors end the loop with an error event.
        """
        max_rounds = settings.CHAT_MAX_TOOL_ROUNDS

        try:
            for round_number in range(1, max_rounds + 1):
                tools = TOOLS if round_number < max_rounds else None
                reply = create_completion(messages, max_tokens=settings.CHAT_MAX_TOKENS, tools=tools)

                if reply.content:
                    yield _event(ChatEventType.TEXT, content=reply.content)

                tool_calls = reply.tool_calls or []
                if not tool_calls:
                    return

                messages.append({
                    "role": "assistant",
                    "content": reply.content,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {"name": call.function.name, "arguments": call.function.arguments},
                        }
                        for call in tool_calls
                    ],
                })

                for call in tool_calls:
                    name = call.function.name
                    yield _event(ChatEventType.TOOL_CALL, tool=name)

                    arguments = _parse_arguments(call.function.arguments)
                    if arguments is None:
                        result = ToolResult(success=False, error="Tool arguments were not valid JSON")
                    else:
                        result = execute_tool(name, arguments, user)

                    yield _event(ChatEventType.TOOL_RESULT, tool=name, result=result.model_dump())
                    messages.append({
                        "role": "tool",
                        "tool_call_id": call.id,
                        "content": result.model_dump_json(),
                    })

                logger.debug(f"Chat tool round {round_number} ran {len(tool_calls)} tool(s)")

        except ApplicationError as e:
            logger.error(f"Chat error: {e}")
            yield _event(ChatEventType.ERROR, message=e.message)
        except Exception as e:
            logger.exception(f"Unexpected chat error: {e}")
            yield _event(ChatEventType.ERROR, message=str(e))

    @staticmethod
    def stream_chat(
        message: str,
        history: list[ChatHistoryItem],
        user: AuthUser | None,
        user_agent: str | None = None,
    ) -> Iterator[str]:
        """
        Full chat as serialized event payloads, ending with [DONE].

        Analytics are recorded once the stream is finished.
        """
        started = time.monotonic()

        try:
            messages, cached = ChatService.prepare(message, history)
        except Exception as e:
            logger.exception(f"Failed to prepare chat: {e}")
            yield json.dumps(_event(ChatEventType.ERROR, message=str(e)))
            yield DONE
            return

        for event in ChatService.run_tool_loop(messages, user):
            yield json.dumps(event, default=str)
        yield DONE

        elapsed_ms = int((time.monotonic() - started) * 1000)
        record_chat_event(message, elapsed_ms, user_agent, cached)

    # -------------------------------------------------------------------------
    # Quick Chat
    # -------------------------------------------------------------------------

    @staticmethod
    def quick_chat(message: str) -> str:
        """
        One short answer for the kiosk.

        Returns a prompt for empty messages, a pointer to the parents
        dashboard for mutating requests and an apology when anything fails.
        """
        message = (message or "").strip()
        if not message:
            return EMPTY_QUICK_MESSAGE

        if is_blocked_quick_request(message):
            return BLOCKED_QUICK_MESSAGE

        try:
            events = CalendarService.get_cached_events(QUICK_CHAT_EVENT_DAYS)
            system = build_quick_chat_prompt(format_event_context(events))
            answer = complete_text(system, message, max_tokens=QUICK_CHAT_MAX_TOKENS)
        except Exception as e:
            logger.error(f"Quick chat error: {e}")
            return FALLBACK_QUICK_MESSAGE

        return answer or EMPTY_ANSWER_MESSAGE


def record_chat_event(query: str, response_time_ms: int, user_agent: str | None, cached: bool) -> None:
    """
    Hand the analytics write to the worker.

    Runs inline when the worker queue can't be reached. Skipped entirely
    when analytics aren't configured.
    """
    if not settings.analytics_enabled:
        return

    try:
        from workers.tasks import log_chat_event

        log_chat_event.delay(
            query=query,
            response_time_ms=response_time_ms,
            user_agent=user_agent,
            cached_knowledge=cached,
        )
    except Exception as e:
        logger.warning(f"Could not queue analytics ({e}), logging inline")
        AnalyticsService.log_chat_event(query, response_time_ms, user_agent, cached)
