# =============================================================================
# app/routers/chat.py - Family Assistant Endpoints
# =============================================================================
# POST /chat        - Full assistant, streamed as Server-Sent Events
# POST /chat/quick  - One-shot kiosk answer (always 200)
#
# Signing in is optional: the token only decides which private task
# projects and reminders the assistant may show.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header
from sse_starlette.sse import EventSourceResponse

from app.auth import AuthUser, get_current_user_optional
from core.models.chat import ChatRequest, QuickChatRequest, QuickChatResponse
from core.services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def chat(
    request: ChatRequest,
    user: AuthUser | None = Depends(get_current_user_optional),
    user_agent: Annotated[str | None, Header()] = None,
):
    """
    Ask the family assistant.

    Streams `data: {"type": ...}` events while the model answers and calls
    tools, then `data: [DONE]`.

    Example:
        POST /api/v1/chat
        {"message": "Who is Riley's dentist?", "history": []}
    """
    logger.info(f"Chat request from {user.name if user else 'guest'}")
    return EventSourceResponse(
        ChatService.stream_chat(request.message, request.history, user, user_agent=user_agent),
        headers={"Cache-Control": "no-cache"},
    )


@router.post("/quick", response_model=QuickChatResponse)
async def quick_chat(request: QuickChatRequest) -> QuickChatResponse:
    """Short read-only answer for the kiosk."""
    return QuickChatResponse(response=ChatService.quick_chat(request.message))
