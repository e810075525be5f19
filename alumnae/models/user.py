"""User model for authentication."""

from datetime import datetime

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from alumnae.core.database import UTCDateTime
from alumnae.models.base import BaseModel


class User(BaseModel):
    """Registered account that can sign in to the association backend.

    Lockout state lives on the row: ``login_attempts`` counts consecutive
    failed logins and ``lock_until`` holds the end of the current lock.
    Both are mutated only through LockoutPolicy.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    login_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lock_until: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    last_login_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.username}>"
