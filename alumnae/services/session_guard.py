"""Per-request session validation."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from alumnae.core.clock import Clock, utcnow
from alumnae.models.user import User
from alumnae.services.auth import (
    AccountLockedError,
    AuthService,
    ForbiddenError,
    TokenIssuer,
    TokenRevokedError,
    UnauthenticatedError,
    UnknownUserError,
)
from alumnae.services.lockout import LockoutPolicy
from alumnae.services.token_blacklist import TokenBlacklistService

logger = logging.getLogger(__name__)


class SessionGuard:
    """Resolves a presented session token to a user.

    Checks run in a fixed order and the first failure decides the error:
    missing token, bad signature or expiry, revocation, unknown user,
    account lock. A revoked token for a deleted user therefore reports
    revocation, not the missing user.
    """

    def __init__(
        self,
        session: AsyncSession,
        issuer: TokenIssuer | None = None,
        clock: Clock = utcnow,
    ):
        self.issuer = issuer or TokenIssuer.from_settings(clock=clock)
        self.users = AuthService(session, issuer=self.issuer, clock=clock)
        self.blacklist = TokenBlacklistService(session, issuer=self.issuer, clock=clock)
        self.lockout = LockoutPolicy(session, clock=clock)

    async def authenticate(self, token: str | None) -> User:
        if not token:
            raise UnauthenticatedError()

        claims = self.issuer.decode(token)

        if await self.blacklist.is_revoked(token):
            logger.warning(f"Revoked token presented for user {claims.user_id}")
            raise TokenRevokedError()

        user = await self.users.get_user_by_id(claims.user_id)
        if user is None:
            raise UnknownUserError()

        if self.lockout.is_locked(user):
            raise AccountLockedError()

        return user

    @staticmethod
    def require_admin(user: User) -> User:
        """Reject authenticated users without the admin role."""
        if not user.is_admin:
            logger.warning(f"Admin route refused for non-admin user: {user.username}")
            raise ForbiddenError()
        return user
