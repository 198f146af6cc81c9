# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for PIN-session authentication.
#
# Usage:
#   from app.auth import get_current_user, require_adult, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, ExpiredSignatureError

from app.auth.models import AuthUser
from app.auth.security import decode_access_token

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor; auto_error is off so a missing header is a
# 401 with our own message rather than FastAPI's 403
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate the family member from a PIN session token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the HS256 signature against SECRET_KEY
    3. Validates the token hasn't expired
    4. Returns an AuthUser with id, name and role

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
    except ExpiredSignatureError:
        logger.warning("Session token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"Session token validation failed: {e}")
        raise _unauthorized(f"Invalid token: {str(e)}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Session token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(
        id=user_id,
        name=payload.get("name") or "",
        role=payload.get("role") or "",
    )


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[AuthUser]:
    """
    Optionally get the current user from a session token.

    Returns None if no token is provided or the token is invalid,
    instead of raising an error. Used by kiosk routes that work for
    anonymous viewers but personalize for signed-in ones.
    """
    if credentials is None:
        return None

    try:
        return await get_current_user(credentials)
    except HTTPException:
        # If token is invalid, treat as no auth rather than error
        return None


async def require_adult(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Require a signed-in adult (admin, adult or parent role).

    Raises:
        HTTPException: 403 for kids and other roles
    """
    if not user.is_adult:
        logger.warning(f"User {user.id} with role '{user.role}' denied adult access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Parents only",
        )
    return user
