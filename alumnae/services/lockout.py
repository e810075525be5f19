"""Progressive account lockout after repeated failed logins."""

import logging
from datetime import timedelta

from sqlalchemy import case, literal, update
from sqlalchemy.ext.asyncio import AsyncSession

from alumnae.core import UTCDateTime, settings
from alumnae.core.clock import Clock, utcnow
from alumnae.models.user import User

logger = logging.getLogger(__name__)


class LockoutPolicy:
    """Tracks failed login attempts on the user row and escalates to a timed lock.

    Both mutations are single UPDATE statements computed in SQL, so
    concurrent failures against one account are serialized by the database
    rather than by this process. Each mutation commits immediately: the
    caller raises right after a failure and the request session would
    otherwise roll the increment back.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Clock = utcnow,
        max_attempts: int | None = None,
        lock_duration: timedelta | None = None,
    ):
        self.session = session
        self.clock = clock
        self.max_attempts = max_attempts or settings.lockout_max_attempts
        self.lock_duration = lock_duration or timedelta(minutes=settings.lockout_minutes)

    def is_locked(self, user: User) -> bool:
        """True while ``lock_until`` is set and still in the future.

        An expired lock reads as unlocked but is left in place; it is
        cleared by the next successful login.
        """
        return user.lock_until is not None and user.lock_until > self.clock()

    async def record_failure(self, user: User) -> User:
        """Increment the attempt counter, locking once it reaches the threshold."""
        lock_until = self.clock() + self.lock_duration
        attempts = User.login_attempts + 1
        await self.session.execute(
            update(User)
            .where(User.id == user.id)
            .values(
                login_attempts=attempts,
                lock_until=case(
                    (attempts >= self.max_attempts, literal(lock_until, UTCDateTime)),
                    else_=User.lock_until,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        await self.session.refresh(user)

        if self.is_locked(user) and user.login_attempts >= self.max_attempts:
            logger.warning(
                f"Account locked: {user.username} after {user.login_attempts} failed attempts "
                f"(until {user.lock_until.isoformat()})"
            )
        return user

    async def record_success(self, user: User) -> User:
        """Reset the attempt counter, clear any lock, and stamp the login time."""
        await self.session.execute(
            update(User)
            .where(User.id == user.id)
            .values(login_attempts=0, lock_until=None, last_login_at=self.clock())
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        await self.session.refresh(user)
        return user
