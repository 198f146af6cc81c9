# =============================================================================
# app/routers/family.py - Family Pages
# =============================================================================
# Family member cards (from the Notion health database) and each child's
# school feed.
# =============================================================================

from typing import Annotated, Any

from fastapi import APIRouter, Path

from core.services.knowledge_base import KnowledgeBaseService
from core.services.school_service import SchoolService

router = APIRouter()


@router.get("")
async def list_family_members() -> dict[str, Any]:
    """Family members with health info and zodiac sign."""
    return {"members": KnowledgeBaseService.fetch_family_members()}


@router.get("/{name}/school")
async def school_feed(
    name: Annotated[str, Path(min_length=1, description="Child's name")],
) -> dict[str, Any]:
    """Upcoming school events, action items, announcements and teacher emails."""
    return SchoolService.get_school_feed(name)
