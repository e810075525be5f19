"""Revoked session tokens, persisted so logout survives process restarts."""

import uuid
from datetime import datetime

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from alumnae.core.clock import utcnow
from alumnae.core.database import Base, UTCDateTime


class TokenBlacklist(Base):
    """A session token revoked before its natural expiry.

    Entries are created on logout and purged once ``expires_at`` passes.
    """

    __tablename__ = "token_blacklist"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    token: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    # Not a foreign key: revocations outlive the account they belonged to
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
