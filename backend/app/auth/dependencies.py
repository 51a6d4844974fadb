"""FastAPI authentication dependencies.

Booking routes resolve the caller with ``get_optional_user`` and let the
booking service decide between ``Unauthenticated`` and ``Forbidden``, so an
absent or invalid token is reported the same way for every booking
operation.
"""

import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import ACCESS, decode_token
from app.core.exceptions import Forbidden, Unauthenticated
from app.database import get_db
from app.models.user import User

_bearer_scheme = HTTPBearer(auto_error=False)


async def _user_from_token(token: str, db: AsyncSession) -> User:
    """Resolve an access token to an active user or raise ``Unauthenticated``."""
    try:
        payload = decode_token(token, expected_type=ACCESS)
    except JWTError:
        raise Unauthenticated("Invalid access token") from None

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise Unauthenticated("Invalid access token") from None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise Unauthenticated("Invalid access token")
    if not user.is_active:
        raise Unauthenticated("User account is inactive")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Return the authenticated user.

    Raises:
        Unauthenticated: No bearer token, or the token is invalid, expired,
            a refresh token, or names an unknown or inactive user.
    """
    if credentials is None:
        raise Unauthenticated("Access token required")
    return await _user_from_token(credentials.credentials, db)


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Return the authenticated user, or ``None`` when no valid token is presented."""
    if credentials is None:
        return None
    try:
        return await _user_from_token(credentials.credentials, db)
    except Unauthenticated:
        return None


async def get_current_host(user: User = Depends(get_current_user)) -> User:
    """Return the current user if they are a host."""
    if not user.is_host:
        raise Forbidden("Insufficient permissions")
    return user
