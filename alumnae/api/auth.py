"""Authentication API endpoints."""

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumnae.core import get_db
from alumnae.core.clock import Clock, utcnow
from alumnae.core.logging import bind_user
from alumnae.models.user import User
from alumnae.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    SessionUser,
    UserProfile,
)
from alumnae.services.auth import AuthError, AuthService, LoginResult
from alumnae.services.session_guard import SessionGuard
from alumnae.services.token_blacklist import TokenBlacklistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_clock() -> Clock:
    """Dependency for the time source (overridden in tests)."""
    return utcnow


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AuthService:
    """Dependency to get auth service."""
    return AuthService(db, clock=clock)


def get_session_guard(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> SessionGuard:
    return SessionGuard(db, clock=clock)


def extract_bearer_token(request: Request) -> str | None:
    """Extract the session token from an Authorization: Bearer header."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def raise_http_error(e: AuthError) -> NoReturn:
    """Re-raise a service error as the matching HTTP error."""
    headers = {"WWW-Authenticate": "Bearer"} if e.status_code == 401 else None
    raise HTTPException(status_code=e.status_code, detail=e.message, headers=headers) from e


async def get_current_user(
    request: Request,
    guard: SessionGuard = Depends(get_session_guard),
) -> User:
    """Dependency to get the current authenticated user from the session token."""
    try:
        user = await guard.authenticate(extract_bearer_token(request))
    except AuthError as e:
        logger.debug(f"Session rejected for {request.method} {request.url.path}: {e}")
        raise_http_error(e)
    bind_user(user.id)
    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency that additionally requires the admin role."""
    try:
        return SessionGuard.require_admin(current_user)
    except AuthError as e:
        raise_http_error(e)


def _session_user(result: LoginResult) -> SessionUser:
    return SessionUser(
        id=result.user.id,
        username=result.user.username,
        email=result.user.email,
        is_admin=result.user.is_admin,
        token=result.token,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new account and return a session token."""
    try:
        result = await auth_service.register(
            username=request.username,
            email=request.email,
            password=request.password,
        )
    except AuthError as e:
        raise_http_error(e)
    return AuthResponse(data=_session_user(result), message="User registered successfully")


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Authenticate by username or email.

    Five consecutive failures lock the account for 30 minutes.
    """
    try:
        result = await auth_service.login(login=request.login, password=request.password)
    except AuthError as e:
        raise_http_error(e)
    return AuthResponse(data=_session_user(result), message="Login successful")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Log out by revoking the presented session token.

    The token stays blacklisted until its natural expiry.
    """
    token = extract_bearer_token(request)
    if token:
        try:
            await TokenBlacklistService(db, clock=clock).revoke(token, current_user.id)
        except AuthError as e:
            raise_http_error(e)
    logger.info(f"User logged out: {current_user.username}")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=ProfileResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> ProfileResponse:
    """Get the current user's information."""
    return ProfileResponse(data=UserProfile.model_validate(current_user))


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Change the current user's password."""
    try:
        await auth_service.change_password(
            user=current_user,
            current_password=request.current_password,
            new_password=request.new_password,
        )
    except AuthError as e:
        raise_http_error(e)
    return MessageResponse(message="Password changed successfully")
