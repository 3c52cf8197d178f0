"""Request dependencies: database session and the authenticated user."""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, Header, status
from sqlalchemy.orm import Session

from app.core.app_exceptions import AppError
from app.core.security import verify_access_token
from app.db.session import get_db
from app.models.user import User

DbSession = Annotated[Session, Depends(get_db)]


def _unauthorized(message: str) -> AppError:
    return AppError(status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", message)


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise _unauthorized("Authorization header missing")
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise _unauthorized("Expected 'Authorization: Bearer <token>'")
    return token


def get_current_user(
    db: DbSession,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Resolve the bearer token to an active user."""
    token = _bearer_token(authorization)
    try:
        user_id = UUID(verify_access_token(token)["sub"])
    except (jwt.InvalidTokenError, ValueError) as exc:
        raise _unauthorized("Invalid or expired token") from exc

    user = db.get(User, user_id)
    if user is None:
        raise _unauthorized("Unknown user")
    if not user.is_active:
        raise AppError(status.HTTP_403_FORBIDDEN, "USER_INACTIVE", "User account is inactive")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
