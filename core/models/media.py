# =============================================================================
# core/models/media.py - Media Library Schemas
# =============================================================================

from pydantic import BaseModel, Field


class UploadUrlRequest(BaseModel):
    """
    Body of POST /admin/upload-url.

    Example:
        {"filename": "birthday.mp4", "content_type": "video/mp4", "category": "celebrations"}
    """
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., min_length=1)
    category: str | None = None


class UploadUrlResponse(BaseModel):
    signed_url: str | None
    token: str | None
    path: str
    public_url: str
