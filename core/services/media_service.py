# =============================================================================
# core/services/media_service.py - Family Media Library
# =============================================================================
# Images and videos used around the hub (avatars, celebration animations,
# backgrounds) live in the MEDIA_BUCKET storage bucket under
#
#   {FAMILY_USER_ID}/{category}/{safe-name}-{timestamp}.{ext}
#
# Nothing outside the family folder can be deleted.
# =============================================================================

import logging
import re
from typing import Any

from app.config import settings
from app.exceptions import (
    FileTooLargeError,
    ForbiddenError,
    InvalidFileTypeError,
    InvalidInputError,
    StorageError,
)
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now

logger = logging.getLogger(__name__)

MEDIA_CATEGORIES = ["avatars", "celebrations", "icons", "backgrounds", "general"]
DEFAULT_CATEGORY = "general"

ALLOWED_MEDIA_TYPES = [
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/webm",
    "video/quicktime",
]

LIST_LIMIT = 100
PLACEHOLDER_FILE = ".emptyFolderPlaceholder"

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")


def safe_stem(name: str) -> str:
    """File name without extension, unsafe characters replaced by '_'."""
    stem = name.rsplit(".", 1)[0] if "." in name else name
    return _UNSAFE_NAME_CHARS.sub("_", stem) or "file"


def extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"


def build_media_path(filename: str, category: str | None, custom_name: str | None = None) -> tuple[str, str]:
    """
    Storage path for a new file.

    Returns:
        (path, final filename)

    Raises:
        InvalidInputError: If the category is unknown
    """
    category = category or DEFAULT_CATEGORY
    if category not in MEDIA_CATEGORIES:
        raise InvalidInputError(
            f"Unknown media category: {category}",
            field="category",
            suggestion=f"Use one of: {', '.join(MEDIA_CATEGORIES)}",
        )

    timestamp = int(utc_now().timestamp() * 1000)
    stem = _UNSAFE_NAME_CHARS.sub("_", custom_name) if custom_name else safe_stem(filename)
    final_name = f"{stem}-{timestamp}.{extension(filename)}"
    return f"{settings.FAMILY_USER_ID}/{category}/{final_name}", final_name


def is_family_path(path: str) -> bool:
    return path.startswith(f"{settings.FAMILY_USER_ID}/") and ".." not in path.split("/")


class MediaService:
    """Service for the family media bucket."""

    @staticmethod
    def _bucket():
        return SupabaseClient.get_client().storage.from_(settings.MEDIA_BUCKET)

    @staticmethod
    def list_media(category: str | None = None) -> list[dict[str, Any]]:
        """Files in a category (or the family root), newest first, with public URLs."""
        if category and category not in MEDIA_CATEGORIES:
            raise InvalidInputError(f"Unknown media category: {category}", field="category")

        folder = f"{settings.FAMILY_USER_ID}/{category}" if category else settings.FAMILY_USER_ID
        bucket = MediaService._bucket()

        try:
            files = bucket.list(folder, {
                "limit": LIST_LIMIT,
                "sortBy": {"column": "created_at", "order": "desc"},
            })
        except Exception as e:
            logger.error(f"Error listing media in {folder}: {e}")
            raise StorageError("list", str(e))

        result = []
        for file in files or []:
            if file.get("name") == PLACEHOLDER_FILE:
                continue
            path = f"{folder}/{file['name']}"
            result.append({
                **file,
                "path": path,
                "url": bucket.get_public_url(path),
                "category": category or DEFAULT_CATEGORY,
            })
        return result

    @staticmethod
    def upload_media(
        content: bytes,
        filename: str,
        content_type: str | None,
        category: str | None = None,
        custom_name: str | None = None,
    ) -> dict[str, Any]:
        """
        Validate and upload a file.

        Raises:
            InvalidFileTypeError: If the type isn't an allowed image/video
            FileTooLargeError: If over MAX_UPLOAD_SIZE_MB
            StorageError: If the upload fails
        """
        if content_type not in ALLOWED_MEDIA_TYPES:
            raise InvalidFileTypeError(content_type or "unknown", ALLOWED_MEDIA_TYPES)

        if len(content) > settings.max_upload_size_bytes:
            raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

        path, final_name = build_media_path(filename, category, custom_name)
        bucket = MediaService._bucket()

        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "false"},
            )
        except Exception as e:
            logger.error(f"Media upload failed for {path}: {e}")
            raise StorageError("upload", str(e))

        logger.info(f"Uploaded media: {path}")
        return {
            "path": path,
            "url": bucket.get_public_url(path),
            "category": category or DEFAULT_CATEGORY,
            "name": final_name,
        }

    @staticmethod
    def delete_media(path: str) -> None:
        """
        Delete a file from the family folder.

        Raises:
            ForbiddenError: If the path is outside the family folder
        """
        if not is_family_path(path):
            raise ForbiddenError("Path is outside the family media folder")

        try:
            MediaService._bucket().remove([path])
        except Exception as e:
            logger.error(f"Media delete failed for {path}: {e}")
            raise StorageError("delete", str(e))

        logger.info(f"Deleted media: {path}")

    @staticmethod
    def create_upload_url(filename: str, content_type: str, category: str | None = None) -> dict[str, Any]:
        """
        Signed URL for a direct browser upload (large videos).

        Raises:
            InvalidFileTypeError: If the type isn't an allowed image/video
        """
        if content_type not in ALLOWED_MEDIA_TYPES:
            raise InvalidFileTypeError(content_type, ALLOWED_MEDIA_TYPES)

        path, _ = build_media_path(filename, category)
        bucket = MediaService._bucket()

        try:
            signed = bucket.create_signed_upload_url(path)
        except Exception as e:
            logger.error(f"Error creating signed upload URL for {path}: {e}")
            raise StorageError("signed upload URL", str(e))

        return {
            "signed_url": signed.get("signed_url") or signed.get("signedUrl"),
            "token": signed.get("token"),
            "path": path,
            "public_url": bucket.get_public_url(path),
        }
