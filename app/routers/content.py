# =============================================================================
# app/routers/content.py - Joke & Fun Fact Widget
# =============================================================================

from typing import Any

from fastapi import APIRouter

from core.services.content_service import ContentService

router = APIRouter()


@router.get("")
async def get_content() -> dict[str, Any]:
    """This hour's joke and fun fact with their next refresh times."""
    return ContentService.get_content()
