# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources and shared-secret checks.
# These are injected into route handlers using Depends().
#
# Two kinds of machine callers hit the API without a PIN session:
# - Phone automations pushing calendar/reminder data (X-Shortcut-Key)
# - The scheduler calling the calendar sync (Authorization: Bearer CRON_SECRET)
# =============================================================================

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Header

from app.config import settings
from app.exceptions import UnauthorizedError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client instance.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


# Type alias for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]


def _matches(provided: str | None, expected: str | None) -> bool:
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def require_shortcut_key(
    x_shortcut_key: Annotated[str | None, Header(alias="X-Shortcut-Key")] = None,
) -> None:
    """
    Require X-Shortcut-Key to equal SHORTCUTS_SECRET_KEY.

    When no key is configured every request is rejected.
    """
    if not _matches(x_shortcut_key, settings.SHORTCUTS_SECRET_KEY):
        logger.warning("Rejected shortcut request with missing or wrong key")
        raise UnauthorizedError(
            suggestion="Send the X-Shortcut-Key header configured in SHORTCUTS_SECRET_KEY",
        )


async def require_cron_secret(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """
    Require `Authorization: Bearer <CRON_SECRET>`.

    With no CRON_SECRET configured (local development) access is allowed.
    """
    if not settings.CRON_SECRET:
        return
    if not _matches(authorization, f"Bearer {settings.CRON_SECRET}"):
        logger.warning("Rejected cron request with missing or wrong secret")
        raise UnauthorizedError(suggestion="Send Authorization: Bearer <CRON_SECRET>")


async def require_manual_sync_key(
    x_shortcut_key: Annotated[str | None, Header(alias="X-Shortcut-Key")] = None,
) -> None:
    """Manual sync triggers may use either the shortcut key or the cron secret."""
    if _matches(x_shortcut_key, settings.SHORTCUTS_SECRET_KEY):
        return
    if _matches(x_shortcut_key, settings.CRON_SECRET):
        return
    logger.warning("Rejected manual sync with missing or wrong key")
    raise UnauthorizedError(
        suggestion="Send X-Shortcut-Key equal to SHORTCUTS_SECRET_KEY or CRON_SECRET",
    )
