# =============================================================================
# app/routers/doodles.py - Drawing Board Endpoints
# =============================================================================

from typing import Annotated, Any

from fastapi import APIRouter, Path, Query, status

from app.exceptions import InvalidInputError
from core.models.doodle import DoodleCreate
from core.services.doodle_service import DoodleService

router = APIRouter()


@router.get("")
async def list_doodles() -> dict[str, Any]:
    """Saved drawings, newest first (thumbnails only)."""
    return {"drawings": [d.model_dump() for d in DoodleService.list_doodles()]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_doodle(request: DoodleCreate) -> dict[str, Any]:
    """
    Save a drawing.

    Example:
        {"title": "Rocket", "image_data": "data:image/png;base64,..."}
    """
    return {"drawing": DoodleService.create_doodle(request)}


@router.delete("")
async def delete_doodle_by_query(
    id: Annotated[str | None, Query(description="Drawing ID")] = None,
) -> dict[str, Any]:
    if not id:
        raise InvalidInputError("Drawing ID is required", field="id")
    DoodleService.delete_doodle(id)
    return {"success": True}


@router.get("/{doodle_id}")
async def get_doodle(
    doodle_id: Annotated[str, Path(description="Drawing ID")],
) -> dict[str, Any]:
    """A drawing with its full image."""
    return {"drawing": DoodleService.get_doodle(doodle_id)}


@router.delete("/{doodle_id}")
async def delete_doodle(
    doodle_id: Annotated[str, Path(description="Drawing ID")],
) -> dict[str, Any]:
    DoodleService.delete_doodle(doodle_id)
    return {"success": True}
