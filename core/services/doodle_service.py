# =============================================================================
# core/services/doodle_service.py - Drawing Board
# =============================================================================
# Stores drawings from the kiosk's doodle pad in doodle_drawings. Every
# query is scoped to FAMILY_USER_ID.
# =============================================================================

import logging
from datetime import date
from typing import Any

from app.config import settings
from app.exceptions import InvalidInputError, NotFoundError
from core.models.doodle import DoodleCreate, DoodleSummary
from lib.calendar_utils import day_bounds
from lib.supabase_client import SupabaseClient, SupabaseClientError, is_not_found

logger = logging.getLogger(__name__)

TABLE = "doodle_drawings"


def default_title(today: date | None = None) -> str:
    """'Doodle MM/DD/YYYY' for today."""
    today = today or day_bounds()[0].date()
    return f"Doodle {today.strftime('%m/%d/%Y')}"


class DoodleService:
    """Service for saved drawings."""

    @staticmethod
    def list_doodles() -> list[DoodleSummary]:
        """Gallery entries, newest first."""
        client = SupabaseClient.get_client()
        response = (
            client.table(TABLE)
            .select("id, title, thumbnail_data, created_at")
            .eq("user_id", settings.FAMILY_USER_ID)
            .order("created_at", desc=True)
            .execute()
        )
        return [DoodleSummary(**row) for row in response.data or []]

    @staticmethod
    def create_doodle(request: DoodleCreate, today: date | None = None) -> dict[str, Any]:
        """
        Save a drawing. The thumbnail is the image itself.

        Raises:
            InvalidInputError: If image_data is missing
        """
        if not request.image_data:
            raise InvalidInputError("Image data is required", field="image_data")

        client = SupabaseClient.get_client()
        response = client.table(TABLE).insert({
            "user_id": settings.FAMILY_USER_ID,
            "title": request.title or default_title(today),
            "image_data": request.image_data,
            "thumbnail_data": request.image_data,
        }).execute()

        if not response.data:
            raise SupabaseClientError(message="Insert returned no data", code="CREATE_DOODLE_FAILED")

        drawing = response.data[0]
        logger.info(f"Saved doodle {drawing['id']}")
        return drawing

    @staticmethod
    def get_doodle(doodle_id: str) -> dict[str, Any]:
        """
        Full drawing including image_data.

        Raises:
            NotFoundError: If the drawing doesn't exist in this family
        """
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("id", doodle_id)
                .eq("user_id", settings.FAMILY_USER_ID)
                .single()
                .execute()
            )
        except Exception as e:
            if is_not_found(e):
                raise NotFoundError("Drawing", doodle_id)
            raise

        if not response.data:
            raise NotFoundError("Drawing", doodle_id)
        return response.data

    @staticmethod
    def delete_doodle(doodle_id: str) -> None:
        client = SupabaseClient.get_client()
        (
            client.table(TABLE)
            .delete()
            .eq("id", doodle_id)
            .eq("user_id", settings.FAMILY_USER_ID)
            .execute()
        )
        logger.info(f"Deleted doodle {doodle_id}")
