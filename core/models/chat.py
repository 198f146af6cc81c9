# =============================================================================
# core/models/chat.py - Chat Schemas
# =============================================================================
# These models define the API contract for the family assistant:
# - ChatRequest: A question plus recent conversation history
# - QuickChatRequest / QuickChatResponse: One-shot kiosk questions
# - ChatEventType: Kinds of Server-Sent Events streamed back
#
# Flow (full chat):
# 1. Client POSTs ChatRequest
# 2. Server streams {"type": "text" | "tool_call" | "tool_result" | "error"}
#    events while the model answers and calls tools
# 3. Stream ends with a literal [DONE]
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """
    Who sent the message in a conversation.

    - user: The family member
    - assistant: The model
    """
    USER = "user"
    ASSISTANT = "assistant"


class ChatEventType(str, Enum):
    TEXT = "text"
    TOOL_CALL = "tool_call"
    TOOL_RESULT = "tool_result"
    ERROR = "error"


class ChatHistoryItem(BaseModel):
    """A previous turn sent back by the client."""
    role: MessageRole
    content: str


class ChatRequest(BaseModel):
    """
    Body of POST /chat.

    Only the last nine history items are sent to the model.

    Example:
        {
            "message": "What's the pediatrician's phone number?",
            "history": [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "Hello!"}]
        }
    """
    message: str = Field(..., min_length=1, max_length=4000)
    history: list[ChatHistoryItem] = Field(default_factory=list)


class QuickChatRequest(BaseModel):
    """Body of POST /chat/quick. An empty message gets a prompt back."""
    message: str = Field(default="", max_length=1000)


class QuickChatResponse(BaseModel):
    response: str


class ToolResult(BaseModel):
    """
    Outcome of one assistant tool call, sent back to the model as JSON.

    `error` may accompany a successful result as an explanation (e.g. why
    the data is empty).
    """
    success: bool
    data: Any = None
    error: str | None = None
