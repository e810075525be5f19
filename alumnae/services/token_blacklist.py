"""Token blacklist - database-backed revocation list for session tokens."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumnae.core.clock import Clock, utcnow
from alumnae.models.token_blacklist import TokenBlacklist
from alumnae.services.auth import TokenIssuer

logger = logging.getLogger(__name__)


class TokenBlacklistService:
    """Records tokens that must be rejected before their natural expiry.

    Expired rows are ignored on lookup and removed by ``purge_expired``.
    Pruning only saves space: an expired token already fails decoding.
    """

    def __init__(
        self,
        session: AsyncSession,
        issuer: TokenIssuer | None = None,
        clock: Clock = utcnow,
    ):
        self.session = session
        self.clock = clock
        self.issuer = issuer or TokenIssuer.from_settings(clock=clock)

    async def revoke(self, token: str, user_id: UUID) -> None:
        """Blacklist a token until its natural expiry. Idempotent."""
        claims = self.issuer.decode(token)

        if await self.is_revoked(token):
            return

        self.session.add(
            TokenBlacklist(token=token, expires_at=claims.expires_at, user_id=user_id)
        )
        try:
            await self.session.commit()
        except IntegrityError:
            # A concurrent logout inserted the same token first
            await self.session.rollback()
            logger.debug(f"Token for user {user_id} was already revoked")
            return

        logger.info(f"Token revoked for user {user_id}")

    async def is_revoked(self, token: str) -> bool:
        """Check whether an unexpired blacklist entry exists for the token."""
        result = await self.session.execute(
            select(TokenBlacklist.id).where(
                TokenBlacklist.token == token,
                TokenBlacklist.expires_at > self.clock(),
            )
        )
        return result.scalar_one_or_none() is not None

    async def purge_expired(self) -> int:
        """Remove expired entries from the blacklist. Returns count removed."""
        result: CursorResult[Any] = await self.session.execute(  # type: ignore[assignment]
            delete(TokenBlacklist).where(TokenBlacklist.expires_at <= self.clock())
        )
        await self.session.commit()
        return result.rowcount
