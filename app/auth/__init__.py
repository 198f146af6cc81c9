# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides PIN-based authentication with signed session tokens.
#
# Usage:
#   from app.auth import get_current_user, require_adult, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(require_adult)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import get_current_user, get_current_user_optional, require_adult
from app.auth.models import ADULT_ROLES, AuthUser, UserResponse
from app.auth.security import create_access_token, hash_pin, validate_pin_format

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "require_adult",
    "ADULT_ROLES",
    "AuthUser",
    "UserResponse",
    "create_access_token",
    "hash_pin",
    "validate_pin_format",
]
