# =============================================================================
# lib/ - Integration & Utility Modules
# =============================================================================
# This package contains clients for external services and pure helpers:
# - supabase_client.py: Supabase singleton (main + analytics projects)
# - todoist.py / notion.py / llm.py: Task API, knowledge base, chat model
# - ical_feed.py: iCal feed download and recurrence expansion
# - calendar_utils.py / time_blocking.py: Calendar windows and free time
# - zodiac.py / school_feed.py: Pure lookups and filters
# - utils.py: Shared utilities (errors, caching, datetimes)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import ApplicationError, TTLCache, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "ApplicationError",
    "TTLCache",
    "normalize_uuid",
]
