"""Auth API router: register, login, refresh, me."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.auth.jwt import REFRESH, create_token_pair, decode_token
from app.auth.passwords import hash_password, verify_password
from app.core.exceptions import Forbidden, Unauthenticated
from app.models.user import User
from app.schemas.auth import (
    AuthData,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserData,
    UserResponse,
)
from app.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _auth_payload(user: User) -> AuthData:
    tokens = create_token_pair(str(user.id), user.role)
    return AuthData(user=UserResponse.model_validate(user), tokens=TokenResponse(**tokens))


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)) -> ApiResponse[AuthData]:
    """Register a renter or host with email and password."""
    result = await db.execute(select(User).where(User.email == body.email))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = User(
        email=body.email,
        hashed_password=hash_password(body.password),
        name=body.name,
        role=body.role,
        phone=body.phone,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("Registered %s %s", user.role, user.id)
    return ApiResponse[AuthData](message="User registered successfully", data=_auth_payload(user))


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)) -> ApiResponse[AuthData]:
    """Authenticate with email and password."""
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if user is None or user.hashed_password is None or not verify_password(body.password, user.hashed_password):
        raise Unauthenticated("Invalid email or password")
    if not user.is_active:
        raise Forbidden("Account is inactive")

    return ApiResponse[AuthData](message="Login successful", data=_auth_payload(user))


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)) -> ApiResponse[TokenResponse]:
    """Exchange a valid refresh token for a new token pair."""
    try:
        payload = decode_token(body.refresh_token, expected_type=REFRESH)
        user_id = uuid.UUID(str(payload.get("sub")))
    except (JWTError, ValueError):
        raise Unauthenticated("Invalid or expired refresh token") from None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise Unauthenticated("User not found or inactive")

    return ApiResponse[TokenResponse](data=TokenResponse(**create_token_pair(str(user.id), user.role)))


@router.get("/me", response_model=ApiResponse[UserData])
async def me(current_user: User = Depends(get_current_user)) -> ApiResponse[UserData]:
    """Return the currently authenticated user's profile."""
    return ApiResponse[UserData](data=UserData(user=UserResponse.model_validate(current_user)))
