"""Pydantic schemas for authentication API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from alumnae.core import settings

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    """Request for account registration."""

    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(
        ...,
        min_length=settings.password_min_length,
        max_length=128,
        description=f"Password (minimum {settings.password_min_length} characters)",
    )

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username must not be blank")
        if "@" in v:
            raise ValueError("Username must not contain '@'")
        return v


class LoginRequest(BaseModel):
    """Request for login by username or email."""

    login: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    """Request for password change."""

    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., min_length=1, alias="currentPassword")
    new_password: str = Field(
        ...,
        min_length=settings.password_min_length,
        max_length=128,
        alias="newPassword",
    )


class SessionUser(BaseModel):
    """User summary returned alongside a fresh session token."""

    id: UUID
    username: str
    email: str
    is_admin: bool = Field(serialization_alias="isAdmin")
    token: str


class AuthResponse(BaseModel):
    """Response after successful registration or login."""

    success: bool = True
    data: SessionUser
    message: str


class UserProfile(BaseModel):
    """Current user's profile. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    is_admin: bool = Field(serialization_alias="isAdmin")
    last_login_at: datetime | None = Field(serialization_alias="lastLogin")
    created_at: datetime = Field(serialization_alias="dateCreated")


class ProfileResponse(BaseModel):
    success: bool = True
    data: UserProfile


class MessageResponse(BaseModel):
    """Generic message response."""

    success: bool = True
    message: str
