# =============================================================================
# app/auth/security.py - PIN Hashing & Session Tokens
# =============================================================================
# PINs are 4-digit codes stored as SHA-256 hex digests in users.pin_hash.
# A correct PIN is exchanged for a short-lived HS256 token signed with
# SECRET_KEY; the token carries the user's id, name and role so routes
# don't need a database round-trip to authorize.
# =============================================================================

import hashlib
from datetime import timedelta
from typing import Any

from jose import jwt

from app.config import settings
from lib.utils import utc_now

ALGORITHM = "HS256"
PIN_LENGTH = 4


def hash_pin(pin: str) -> str:
    """SHA-256 hex digest of a PIN."""
    return hashlib.sha256(pin.encode("utf-8")).hexdigest()


def validate_pin_format(pin: Any) -> bool:
    """True only for a string of exactly four ASCII digits."""
    return (
        isinstance(pin, str)
        and len(pin) == PIN_LENGTH
        and pin.isascii()
        and pin.isdigit()
    )


def create_access_token(user: dict[str, Any], expires_minutes: int | None = None) -> str:
    """
    Sign a session token for a user row.

    Args:
        user: Dict with id, name and role
        expires_minutes: Lifetime (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    issued = utc_now()
    lifetime = timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user["id"]),
        "name": user.get("name") or "",
        "role": user.get("role") or "",
        "iat": int(issued.timestamp()),
        "exp": int((issued + lifetime).timestamp()),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a session token.

    Raises:
        jose.ExpiredSignatureError: If the token has expired
        jose.JWTError: If the signature or format is invalid
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
