# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for PIN authentication and session tokens.
# =============================================================================

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# Roles that may use the parents dashboard
ADULT_ROLES = frozenset({"admin", "adult", "parent"})


class AuthUser(BaseModel):
    """
    Family member extracted from a PIN session token.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: str

    @property
    def is_adult(self) -> bool:
        return self.role in ADULT_ROLES


class UserResponse(BaseModel):
    """Public view of a family user."""
    id: str
    name: str
    role: str


class PinVerifyRequest(BaseModel):
    """
    Body of POST /auth/verify-pin.

    `pin` is typed loosely so that a wrong type is reported as an
    invalid PIN format rather than a generic validation error.
    """
    pin: Any = Field(default=None, examples=["1234"])


class PinVerifyResponse(BaseModel):
    """User info plus the session token issued for a correct PIN."""
    user_id: str
    name: str
    role: str
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")


class TokenPayload(BaseModel):
    """
    Decoded session token payload.

    Tokens are signed with SECRET_KEY (HS256).
    """
    sub: str  # User ID
    name: str
    role: str
    exp: int  # Expiration timestamp
    iat: Optional[int] = None  # Issued at timestamp
