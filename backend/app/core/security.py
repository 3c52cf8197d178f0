"""Access-token handling.

Tokens are minted by the identity provider; this service verifies them and,
for tests and local tooling, can mint compatible ones.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from app.core.config import settings

ACCESS_TOKEN_TYPE = "access"


def _signing_key() -> str:
    if not settings.JWT_SECRET:
        raise RuntimeError("JWT_SECRET is not configured")
    return settings.JWT_SECRET


def create_access_token(user_id: Any, role: str, expires_in: timedelta | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    ttl = expires_in if expires_in is not None else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user_id),
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(claims, _signing_key(), algorithm=settings.JWT_ALG)


def verify_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an access token.

    Raises:
        jwt.InvalidTokenError: Bad signature, expired, or not an access token
    """
    claims = jwt.decode(
        token,
        _signing_key(),
        algorithms=[settings.JWT_ALG],
        options={"require": ["sub", "exp"]},
    )
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Not an access token")
    return claims
