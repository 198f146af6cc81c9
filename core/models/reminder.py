# =============================================================================
# core/models/reminder.py - Reminder Schemas
# =============================================================================
# Reminders are pushed from a phone automation and cached per user in
# cached_reminders, keyed by reminder_id.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field


class ReminderIn(BaseModel):
    """
    A reminder as sent by the phone automation.

    Only the title is really required; the rest are optional because
    the automation omits empty fields.
    """
    model_config = {"extra": "ignore"}

    id: str | None = None
    title: str = ""
    due_date: str | None = None
    list_name: str | None = None
    priority: int | None = None
    is_completed: bool | None = None


class ReminderSyncRequest(BaseModel):
    """
    Body of POST /shortcuts/reminders.

    Example:
        {"user": "alex", "reminders": [{"title": "Call dentist", "list_name": "Errands"}]}
    """
    user: str = Field(..., min_length=1, description="Family member name (case-insensitive)")
    reminders: list[ReminderIn]


class CachedReminder(BaseModel):
    """One row of cached_reminders."""
    reminder_id: str
    user_id: str
    title: str
    due_date: str | None = None
    list_name: str | None = None
    priority: int = 0
    is_completed: bool = False
    updated_at: str | None = None

    @classmethod
    def from_push(cls, reminder: ReminderIn, user_id: str, updated_at: str) -> "CachedReminder":
        """Apply the defaults used when a pushed reminder lacks fields."""
        return cls(
            reminder_id=reminder.id or f"{reminder.title}{reminder.list_name or ''}",
            user_id=user_id,
            title=reminder.title,
            due_date=reminder.due_date,
            list_name=reminder.list_name,
            priority=reminder.priority or 0,
            is_completed=reminder.is_completed or False,
            updated_at=updated_at,
        )

    def to_row(self) -> dict[str, Any]:
        return self.model_dump()
