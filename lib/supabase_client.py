# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides lookups shared by several services:
# - Family users (by id, by name, by PIN hash)
#
# A second, optional client points at the analytics project. It is None
# when SUPABASE_ANALYTICS_URL / SUPABASE_ANALYTICS_KEY are not set.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   user = SupabaseClient.fetch_user_by_name("alex")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError, is_uuid, normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NOT_FOUND_CODE = "PGRST116"

USER_COLUMNS = "id, name, role"


class SupabaseClientError(ApplicationError):
    """
    Error during Supabase operations.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


def is_not_found(error: Exception) -> bool:
    """True if a PostgREST error means '.single() matched no rows'."""
    return NOT_FOUND_CODE in str(error)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        client = SupabaseClient.get_client()
        rows = client.table("children").select("*").execute().data
    """

    _instance: Client | None = None
    _analytics_instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def get_analytics_client(cls) -> Client | None:
        """
        Get the analytics project client, or None when analytics are off.

        Analytics are best-effort: a failing client creation is logged and
        treated as "disabled" rather than raised.
        """
        if not settings.analytics_enabled:
            return None

        if cls._analytics_instance is None:
            try:
                cls._analytics_instance = create_client(
                    settings.SUPABASE_ANALYTICS_URL,
                    settings.SUPABASE_ANALYTICS_KEY,
                )
                logger.info("Supabase analytics client initialized")
            except Exception as e:
                logger.warning(f"Analytics client unavailable: {e}")
                return None
        return cls._analytics_instance

    @classmethod
    def reset(cls) -> None:
        """Drop cached clients (used by tests)."""
        cls._instance = None
        cls._analytics_instance = None

    # -------------------------------------------------------------------------
    # User Lookups
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_user(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a family user by ID.

        Returns:
            User dict with id, name, role, or None if not found (an ID that is
            not a UUID cannot match a row)

        Raises:
            SupabaseClientError: If query fails
        """
        user_id_str = normalize_uuid(user_id)
        if not is_uuid(user_id_str):
            return None

        client = cls.get_client()

        try:
            response = (
                client.table("users")
                .select(USER_COLUMNS)
                .eq("id", user_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch user: {e}",
                code="FETCH_USER_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def fetch_user_by_name(cls, name: str) -> dict[str, Any] | None:
        """
        Fetch a family user by name (case-insensitive).

        Returns:
            User dict, or None if no user has that name
        """
        client = cls.get_client()

        try:
            response = (
                client.table("users")
                .select(USER_COLUMNS)
                .ilike("name", name)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to look up user by name: {e}",
                code="FETCH_USER_FAILED",
                details={"name": name}
            )

    @classmethod
    def fetch_user_by_pin_hash(cls, pin_hash: str) -> dict[str, Any] | None:
        """
        Fetch the user whose PIN hashes to `pin_hash`.

        Returns:
            User dict, or None if no user has that PIN
        """
        client = cls.get_client()

        try:
            response = (
                client.table("users")
                .select(USER_COLUMNS)
                .eq("pin_hash", pin_hash)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to verify PIN: {e}",
                code="FETCH_USER_FAILED",
                suggestion="Check that the users table exists and has a pin_hash column",
            )
