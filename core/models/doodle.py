# =============================================================================
# core/models/doodle.py - Drawing Board Schemas
# =============================================================================

from pydantic import BaseModel, Field


class DoodleCreate(BaseModel):
    """
    Body of POST /doodles.

    `image_data` is the canvas exported as a data URL.
    """
    title: str | None = Field(default=None, max_length=200)
    image_data: str | None = Field(default=None, description="PNG data URL")


class DoodleSummary(BaseModel):
    """Gallery entry (no full-size image)."""
    id: str
    title: str | None = None
    thumbnail_data: str | None = None
    created_at: str | None = None
