# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - ApplicationError: base class for integration-layer errors
# - TTLCache: tiny in-process cache for slow external lookups
# - Datetime helpers shared by the calendar and sync code
# =============================================================================

import time
from datetime import datetime, timezone
from typing import Any, Callable, Generic, TypeVar
from uuid import UUID

T = TypeVar("T")


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def is_uuid(value: str) -> bool:
    """True if `value` parses as a UUID."""
    try:
        UUID(str(value))
        return True
    except ValueError:
        return False


# =============================================================================
# Datetime Utilities
# =============================================================================

def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return utc_now().isoformat()


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse an ISO 8601 timestamp into an aware datetime.

    Accepts datetimes, "Z" suffixes and naive strings (assumed UTC).
    Returns None for empty or unparseable input.

    Example:
        parse_datetime("2024-01-15T10:30:00Z")  # 2024-01-15 10:30:00+00:00
        parse_datetime("next tuesday")          # None
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# TTL Cache
# =============================================================================

class TTLCache(Generic[T]):
    """
    Single-value cache with a time-to-live.

    Holds the last value returned by a loader. `stale()` still returns an
    expired value so callers can serve it when the upstream is down.

    Example:
        cache = TTLCache(ttl_seconds=300)
        data = cache.get_or_load(fetch_everything)
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: T | None = None
        self._stored_at: float = 0.0

    def get(self) -> T | None:
        """Return the cached value if still fresh, else None."""
        if self._value is not None and (self._clock() - self._stored_at) < self.ttl_seconds:
            return self._value
        return None

    def set(self, value: T) -> None:
        self._value = value
        self._stored_at = self._clock()

    def stale(self) -> T | None:
        """Return the last value regardless of age."""
        return self._value

    def get_or_load(self, loader: Callable[[], T]) -> T:
        cached = self.get()
        if cached is not None:
            return cached
        value = loader()
        self.set(value)
        return value

    def is_fresh(self) -> bool:
        return self.get() is not None

    def clear(self) -> None:
        self._value = None
        self._stored_at = 0.0


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class TodoistError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="TODOIST_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result
