# =============================================================================
# lib/llm.py - OpenAI Chat Completions Wrapper
# =============================================================================
# Shared access to the chat model used by:
# - The full chat assistant (tool calling)
# - Quick chat on the kiosk (short plain answers)
# - Daily jokes and fun facts (JSON mode)
#
# The client is created lazily so the API can start without OPENAI_API_KEY;
# calls fail with an actionable LLMError instead.
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any

from openai import OpenAI

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

_client: OpenAI | None = None


class LLMError(ApplicationError):
    """Raised when the chat model is unavailable or returns unusable output."""

    def __init__(
        self,
        message: str,
        code: str = "LLM_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


def get_openai_client() -> OpenAI:
    """Get or create the OpenAI client (lazy initialization)."""
    global _client
    if _client is None:
        if not settings.OPENAI_API_KEY:
            raise LLMError(
                message="OpenAI is not configured",
                code="LLM_NOT_CONFIGURED",
                suggestion="Set OPENAI_API_KEY in your .env file",
            )
        _client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


def reset_client() -> None:
    global _client
    _client = None


def create_completion(
    messages: list[dict[str, Any]],
    max_tokens: int = 500,
    tools: list[dict[str, Any]] | None = None,
    json_mode: bool = False,
    temperature: float | None = None,
) -> Any:
    """
    Call chat.completions.create and return the first choice's message.

    Raises:
        LLMError: If the client is missing or the API call fails
    """
    client = get_openai_client()

    kwargs: dict[str, Any] = {
        "model": settings.OPENAI_MODEL,
        "messages": messages,
        "max_tokens": max_tokens,
    }
    if tools:
        kwargs["tools"] = tools
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    if temperature is not None:
        kwargs["temperature"] = temperature

    try:
        response = client.chat.completions.create(**kwargs)
    except Exception as e:
        raise LLMError(
            message=f"OpenAI API call failed: {e}",
            code="OPENAI_ERROR",
            suggestion="Check your OPENAI_API_KEY and network connection",
            details={"model": settings.OPENAI_MODEL},
        )

    message = response.choices[0].message
    logger.debug(f"OpenAI response: {(message.content or '')[:200]}")
    return message


def complete_text(system: str, user: str, max_tokens: int = 300) -> str:
    """Single-turn plain text answer."""
    message = create_completion(
        [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        max_tokens=max_tokens,
    )
    return (message.content or "").strip()


def complete_json(system: str, user: str, max_tokens: int = 300) -> dict[str, Any]:
    """
    Single-turn answer in JSON mode, parsed to a dict.

    Raises:
        LLMError: If the answer is not a JSON object
    """
    message = create_completion(
        [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        max_tokens=max_tokens,
        json_mode=True,
        temperature=1.0,
    )

    try:
        data = json.loads(message.content or "")
    except json.JSONDecodeError as e:
        raise LLMError(
            message=f"Model returned invalid JSON: {e}",
            code="LLM_INVALID_JSON",
        )

    if not isinstance(data, dict):
        raise LLMError(message="Model returned JSON that is not an object", code="LLM_INVALID_JSON")
    return data
