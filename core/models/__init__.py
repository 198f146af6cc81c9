# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - calendar.py: Cached events, sync results, time-block requests
# - reminder.py: Pushed and cached reminders
# - tasks.py: Task widget actions
# - checklist.py: Children, checklist items and progress
# - doodle.py: Drawing board
# - family.py: Parents dashboard (members, users, children, items)
# - chat.py: Family assistant requests and stream events
# - priorities.py: Weekly priorities
#
# These models define the "contract" between API and clients.
# =============================================================================

from .calendar import (
    CachedCalendarEvent,
    CalendarSyncResult,
    FeedSyncResult,
    ShortcutCalendarSyncResult,
    SuggestTimeRequest,
)
from .reminder import CachedReminder, ReminderIn, ReminderSyncRequest
from .tasks import TaskActionRequest, TaskCompleteRequest
from .checklist import (
    ChecklistItem,
    ChecklistStats,
    ChecklistToggleRequest,
    Child,
    ChildChecklist,
)
from .doodle import DoodleCreate, DoodleSummary
from .family import (
    ChecklistItemCreate,
    ChecklistItemUpdate,
    ChecklistOrder,
    ChecklistReorderRequest,
    ChildCreate,
    ChildUpdate,
    FamilyMemberCreate,
    FamilyMemberUpdate,
    FamilyRole,
    PinUpdate,
    UserCreate,
)
from .chat import (
    ChatEventType,
    ChatHistoryItem,
    ChatRequest,
    MessageRole,
    QuickChatRequest,
    QuickChatResponse,
    ToolResult,
)
from .media import UploadUrlRequest, UploadUrlResponse
from .priorities import (
    MAX_PRIORITIES,
    SetPrioritiesRequest,
    UpdatePriorityRequest,
    WeeklyPriority,
)

__all__ = [
    # Calendar
    "CachedCalendarEvent",
    "CalendarSyncResult",
    "FeedSyncResult",
    "ShortcutCalendarSyncResult",
    "SuggestTimeRequest",
    # Reminders
    "CachedReminder",
    "ReminderIn",
    "ReminderSyncRequest",
    # Tasks
    "TaskActionRequest",
    "TaskCompleteRequest",
    # Checklist
    "ChecklistItem",
    "ChecklistStats",
    "ChecklistToggleRequest",
    "Child",
    "ChildChecklist",
    # Doodles
    "DoodleCreate",
    "DoodleSummary",
    # Family / Admin
    "ChecklistItemCreate",
    "ChecklistItemUpdate",
    "ChecklistOrder",
    "ChecklistReorderRequest",
    "ChildCreate",
    "ChildUpdate",
    "FamilyMemberCreate",
    "FamilyMemberUpdate",
    "FamilyRole",
    "PinUpdate",
    "UserCreate",
    # Chat
    "ChatEventType",
    "ChatHistoryItem",
    "ChatRequest",
    "MessageRole",
    "QuickChatRequest",
    "QuickChatResponse",
    "ToolResult",
    "UploadUrlRequest",
    "UploadUrlResponse",
    # Priorities
    "MAX_PRIORITIES",
    "SetPrioritiesRequest",
    "UpdatePriorityRequest",
    "WeeklyPriority",
]
