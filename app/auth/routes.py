# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# PIN login for the kiosk and user lookups.
#
# A family member types their 4-digit PIN; a correct PIN returns their
# profile and a session token used by the parents dashboard and the chat.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, PinVerifyRequest, PinVerifyResponse, UserResponse
from app.auth.security import create_access_token, hash_pin, validate_pin_format
from app.config import settings
from app.exceptions import InvalidInputError, InvalidPinError, InvalidPinFormatError, NotFoundError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/verify-pin", response_model=PinVerifyResponse)
async def verify_pin(request: PinVerifyRequest) -> PinVerifyResponse:
    """
    Exchange a 4-digit PIN for a session token.

    Raises:
        400: PIN is not exactly 4 digits
        401: No family member has this PIN
    """
    if not validate_pin_format(request.pin):
        raise InvalidPinFormatError()

    user = SupabaseClient.fetch_user_by_pin_hash(hash_pin(request.pin))
    if not user:
        logger.info("PIN verification failed")
        raise InvalidPinError()

    logger.info(f"PIN verified for user {user['id']}")
    return PinVerifyResponse(
        user_id=str(user["id"]),
        name=user["name"],
        role=user["role"],
        access_token=create_access_token(user),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.get("/user", response_model=UserResponse)
async def get_user(
    id: Annotated[str | None, Query(description="User ID")] = None,
) -> UserResponse:
    """
    Look up a family user by ID.

    Raises:
        400: No id given
        404: Unknown user
    """
    if not id:
        raise InvalidInputError("User ID required", field="id")

    user = SupabaseClient.fetch_user(id)
    if not user:
        raise NotFoundError("User", id)

    return UserResponse(id=str(user["id"]), name=user["name"], role=user["role"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the signed-in family member.

    Raises:
        401: If not authenticated
    """
    return UserResponse(id=user.id, name=user.name, role=user.role)


@router.get("/verify")
async def verify_token(user: AuthUser = Depends(get_current_user)):
    """
    Verify that the session token is valid.

    Returns simple confirmation with user ID.
    Useful for the kiosk to check whether its stored token still works.
    """
    return {
        "valid": True,
        "user_id": user.id,
        "role": user.role,
    }
