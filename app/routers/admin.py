# =============================================================================
# app/routers/admin.py - Parents Dashboard Endpoints
# =============================================================================
# Management endpoints behind the PIN login. Every route requires a token
# whose user has an adult role (admin, adult, parent).
#
# Sections:
# - Children and their checklist items
# - Family members and PIN users
# - Media library (Supabase Storage)
# - Calendar feed diagnostics and chat analytics
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status

from app.auth.dependencies import require_adult
from app.exceptions import InvalidInputError, NotConfiguredError
from core.models.family import (
    ChecklistItemCreate,
    ChecklistItemUpdate,
    ChecklistReorderRequest,
    ChildCreate,
    ChildUpdate,
    FamilyMemberCreate,
    FamilyMemberUpdate,
    PinUpdate,
    UserCreate,
)
from core.models.media import UploadUrlRequest, UploadUrlResponse
from core.services.analytics_service import AnalyticsService
from core.services.calendar_sync import CalendarSyncService
from core.services.checklist_service import ChecklistService
from core.services.family_service import FamilyService
from core.services.media_service import MediaService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_adult)])


# =============================================================================
# Children
# =============================================================================

@router.get("/children")
async def list_children() -> dict[str, Any]:
    """Children with all their checklist items."""
    return {"children": FamilyService.list_children_with_items()}


@router.post("/children", status_code=status.HTTP_201_CREATED)
async def create_child(request: ChildCreate) -> dict[str, Any]:
    return {"child": FamilyService.create_child(request)}


@router.put("/children/{child_id}")
async def update_child(
    request: ChildUpdate,
    child_id: Annotated[str, Path(description="Child ID")],
) -> dict[str, Any]:
    return {"child": FamilyService.update_child(child_id, request)}


# =============================================================================
# Checklist Items
# =============================================================================

@router.get("/checklist")
async def list_checklist_items(
    member_id: Annotated[str | None, Query(description="Family member owning the items")] = None,
    child_id: Annotated[str | None, Query(description="Child owning the items")] = None,
) -> dict[str, Any]:
    return {"items": ChecklistService.list_items(member_id=member_id, child_id=child_id)}


@router.post("/checklist", status_code=status.HTTP_201_CREATED)
async def create_checklist_item(request: ChecklistItemCreate) -> dict[str, Any]:
    """
    Add an item to the end of a member's or child's list.

    Example:
        {"child_id": "c1", "title": "Brush teeth", "icon": "🪥"}
    """
    return {"item": ChecklistService.create_item(request)}


@router.put("/checklist/{item_id}")
async def update_checklist_item(
    request: ChecklistItemUpdate,
    item_id: Annotated[str, Path(description="Checklist item ID")],
) -> dict[str, Any]:
    return {"item": ChecklistService.update_item(item_id, request)}


@router.delete("/checklist/{item_id}")
async def delete_checklist_item(
    item_id: Annotated[str, Path(description="Checklist item ID")],
) -> dict[str, Any]:
    ChecklistService.delete_item(item_id)
    return {"success": True}


@router.patch("/checklist")
async def reorder_checklist_items(request: ChecklistReorderRequest) -> dict[str, Any]:
    """Set display_order for many items at once (drag and drop)."""
    updated = ChecklistService.reorder_items(request.items)
    return {"success": True, "updated": updated}


# =============================================================================
# Family Members
# =============================================================================

@router.get("/family")
async def list_family_members() -> dict[str, Any]:
    return {"members": FamilyService.list_members()}


@router.post("/family", status_code=status.HTTP_201_CREATED)
async def create_family_member(request: FamilyMemberCreate) -> dict[str, Any]:
    return {"member": FamilyService.create_member(request)}


@router.put("/family/{member_id}")
async def update_family_member(
    request: FamilyMemberUpdate,
    member_id: Annotated[str, Path(description="Family member ID")],
) -> dict[str, Any]:
    """Partial update. Sending `"pin": ""` removes the PIN."""
    return {"member": FamilyService.update_member(member_id, request)}


@router.delete("/family/{member_id}")
async def delete_family_member(
    member_id: Annotated[str, Path(description="Family member ID")],
) -> dict[str, Any]:
    FamilyService.delete_member(member_id)
    return {"success": True}


# =============================================================================
# PIN Users
# =============================================================================

@router.get("/users")
async def list_users() -> dict[str, Any]:
    return {"users": FamilyService.list_users()}


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(request: UserCreate) -> dict[str, Any]:
    return {"user": FamilyService.create_user(request)}


@router.put("/users/{user_id}/pin")
async def update_user_pin(
    request: PinUpdate,
    user_id: Annotated[str, Path(description="User ID")],
) -> dict[str, Any]:
    FamilyService.update_user_pin(user_id, request.pin)
    return {"success": True}


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: Annotated[str, Path(description="User ID")],
) -> dict[str, Any]:
    FamilyService.delete_user(user_id)
    return {"success": True}


# =============================================================================
# Media Library
# =============================================================================

@router.get("/media")
async def list_media(
    category: Annotated[str | None, Query(description="Media category folder")] = None,
) -> dict[str, Any]:
    return {"files": MediaService.list_media(category)}


@router.post("/media", status_code=status.HTTP_201_CREATED)
async def upload_media(
    file: UploadFile = File(..., description="Image or video file"),
    category: str | None = Form(default=None),
    name: str | None = Form(default=None),
) -> dict[str, Any]:
    """
    Upload a file into the family media folder.

    Large videos should use POST /upload-url and go straight to storage.
    """
    content = await file.read()
    result = MediaService.upload_media(
        content,
        filename=file.filename or "upload",
        content_type=file.content_type,
        category=category,
        custom_name=name,
    )
    return {"success": True, **result}


@router.delete("/media")
async def delete_media(
    path: Annotated[str | None, Query(description="Storage path of the file")] = None,
) -> dict[str, Any]:
    if not path:
        raise InvalidInputError("File path is required", field="path")
    MediaService.delete_media(path)
    return {"success": True}


@router.post("/upload-url", response_model=UploadUrlResponse)
async def create_upload_url(request: UploadUrlRequest) -> UploadUrlResponse:
    """Signed URL the browser uploads to directly."""
    signed = MediaService.create_upload_url(
        request.filename,
        request.content_type,
        category=request.category,
    )
    return UploadUrlResponse(**signed)


# =============================================================================
# Diagnostics
# =============================================================================

@router.get("/calendar/feeds")
async def calendar_feed_diagnostics(
    calendar: Annotated[str | None, Query(description="Only this feed name")] = None,
    days: Annotated[int, Query(ge=1, le=365)] = 14,
) -> dict[str, Any]:
    """Fetch status and event counts for each configured iCal feed."""
    feeds = CalendarSyncService.inspect_feeds(calendar=calendar, days=days)
    return {"count": len(feeds), "feeds": feeds}


@router.get("/analytics")
async def chat_analytics() -> dict[str, Any]:
    """
    Chat usage summary.

    Raises:
        NotConfiguredError: If no analytics database is set up (503)
    """
    summary = AnalyticsService.get_analytics_summary()
    if summary is None:
        raise NotConfiguredError(
            "Analytics",
            ["SUPABASE_ANALYTICS_URL", "SUPABASE_ANALYTICS_KEY"],
        )
    return summary
