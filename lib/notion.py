# =============================================================================
# lib/notion.py - Notion Knowledge Base Client
# =============================================================================
# Reads the family's curated Notion databases (people & providers, health,
# assets, accounts) through the Notion REST API and flattens page properties
# into plain strings.
#
# Usage:
#   from lib.notion import NotionClient, extract_property
#   pages = NotionClient.query_database(database_id)
#   name = extract_property(pages[0]["properties"]["Name"])
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

NOTION_API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
PAGE_SIZE = 100
REQUEST_TIMEOUT = 20


class NotionError(ApplicationError):
    """Raised when a Notion database cannot be queried."""

    def __init__(
        self,
        message: str,
        code: str = "NOTION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


# =============================================================================
# Property Extraction
# =============================================================================

def extract_plain_text(rich_text: list[dict[str, Any]] | None) -> str | None:
    """Join the plain_text of a rich text array; None when empty."""
    if not isinstance(rich_text, list) or not rich_text:
        return None
    return "".join(block.get("plain_text") or "" for block in rich_text)


def extract_property(prop: dict[str, Any] | None) -> str | None:
    """
    Flatten a Notion page property into a string.

    Supports title, rich_text, select, multi_select (comma-joined),
    phone_number, email, url, place, date (start) and formula values.
    Anything else, or an empty value, returns None.

    Example:
        extract_property({"type": "select", "select": {"name": "Doctor"}})  # "Doctor"
    """
    if not prop:
        return None

    prop_type = prop.get("type")

    if prop_type in ("title", "rich_text"):
        return extract_plain_text(prop.get(prop_type))

    if prop_type == "select":
        selected = prop.get("select") or {}
        return selected.get("name") or None

    if prop_type == "multi_select":
        names = [s.get("name") for s in prop.get("multi_select") or [] if s.get("name")]
        return ", ".join(names) or None

    if prop_type in ("phone_number", "email", "url"):
        return prop.get(prop_type) or None

    if prop_type == "place":
        place = prop.get("place") or {}
        return place.get("name") or None

    if prop_type == "date":
        date_value = prop.get("date") or {}
        return date_value.get("start") or None

    if prop_type == "formula":
        formula = prop.get("formula") or {}
        if formula.get("string"):
            return formula["string"]
        number = formula.get("number")
        if number is not None:
            return str(number)
        return None

    return None


# =============================================================================
# Client
# =============================================================================

class NotionClient:
    """Notion database queries authenticated with NOTION_API_KEY."""

    @staticmethod
    def _headers() -> dict[str, str]:
        if not settings.NOTION_API_KEY:
            raise NotionError(
                message="Notion is not configured",
                code="NOTION_NOT_CONFIGURED",
                suggestion="Set NOTION_API_KEY and the NOTION_*_DB_ID variables in your .env file",
            )
        return {
            "Authorization": f"Bearer {settings.NOTION_API_KEY}",
            "Notion-Version": NOTION_VERSION,
            "Content-Type": "application/json",
        }

    @classmethod
    def query_database(cls, database_id: str) -> list[dict[str, Any]]:
        """
        Fetch the first page (up to 100 rows) of a database.

        Returns:
            List of page objects, each with "id" and "properties"

        Raises:
            NotionError: If the integration is missing or the query fails
        """
        url = f"{NOTION_API_URL}/databases/{database_id}/query"

        try:
            response = httpx.post(
                url,
                headers=cls._headers(),
                json={"page_size": PAGE_SIZE},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NotionError(
                message=f"Failed to query Notion database: {e}",
                code="NOTION_QUERY_FAILED",
                suggestion="Check that the database is shared with the integration",
                details={"database_id": database_id},
            )

        results = response.json().get("results", [])
        logger.debug(f"Fetched {len(results)} rows from Notion database {database_id}")
        return results
