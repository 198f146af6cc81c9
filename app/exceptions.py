# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Two families of errors reach the handlers:
# - FamilyHubException: raised by routes/services, carries its status code
# - lib.utils.ApplicationError: raised by integration clients (Supabase,
#   Todoist, Notion, OpenAI, iCal). Mapped to 502, or 503 when the
#   integration simply isn't configured.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class FamilyHubException(Exception):
    """
    Base exception for the Family Hub API.

    All HTTP-facing exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "FAMILY_HUB_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Input Exceptions
# =============================================================================

class InvalidInputError(FamilyHubException):
    """Raised when a required field is missing or malformed."""

    def __init__(self, message: str, field: str | None = None, suggestion: str | None = None):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
            status_code=400,
            suggestion=suggestion,
            details={"field": field} if field else None,
        )


class NotFoundError(FamilyHubException):
    """Raised when a looked-up record doesn't exist."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource.lower()} exists",
            details={"id": identifier},
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class InvalidPinFormatError(FamilyHubException):
    """Raised when a PIN isn't exactly four digits."""

    def __init__(self):
        super().__init__(
            message="Invalid PIN format",
            code="INVALID_PIN_FORMAT",
            status_code=400,
            suggestion="PINs are exactly 4 digits",
        )


class InvalidPinError(FamilyHubException):
    """Raised when no user has the given PIN."""

    def __init__(self):
        super().__init__(
            message="Invalid PIN",
            code="INVALID_PIN",
            status_code=401,
            suggestion="Ask a parent to check your PIN in the parents dashboard",
        )


class UnauthorizedError(FamilyHubException):
    """Raised when a shared-secret header is missing or wrong."""

    def __init__(self, message: str = "Unauthorized", suggestion: str | None = None):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            suggestion=suggestion,
        )


class ForbiddenError(FamilyHubException):
    """Raised when the caller is known but not allowed."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
            suggestion=suggestion,
        )


# =============================================================================
# Media Exceptions
# =============================================================================

class InvalidFileTypeError(FamilyHubException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, content_type: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {content_type}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed},
        )


class FileTooLargeError(FamilyHubException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


class StorageError(FamilyHubException):
    """Raised when a Supabase Storage operation fails."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Storage {operation} failed: {error}",
            code="STORAGE_ERROR",
            status_code=500,
            suggestion="Check that the media bucket exists and is public",
            details={"operation": operation},
        )


# =============================================================================
# Integration Exceptions
# =============================================================================

class NotConfiguredError(FamilyHubException):
    """Raised when an optional integration is switched off."""

    def __init__(self, integration: str, env_vars: list[str]):
        super().__init__(
            message=f"{integration} is not configured",
            code="NOT_CONFIGURED",
            status_code=503,
            suggestion=f"Set {', '.join(env_vars)} in your .env file",
        )


class OperationFailedError(FamilyHubException):
    """Raised when a write the caller asked for did not happen."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="OPERATION_FAILED",
            status_code=500,
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def family_hub_exception_handler(
    request: Request,
    exc: FamilyHubException
) -> JSONResponse:
    """
    Convert FamilyHubException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def application_error_handler(
    request: Request,
    exc: ApplicationError
) -> JSONResponse:
    """
    Convert an upstream integration error to JSON.

    "Not configured" codes become 503; everything else is a bad gateway.
    """
    status_code = 503 if exc.code.endswith("NOT_CONFIGURED") else 502
    logger.error(f"Upstream error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Malformed bodies are client errors (400) with the pydantic message.
    """
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
