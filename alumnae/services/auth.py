"""Authentication service: password hashing, session tokens, and login."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jwt.exceptions import PyJWTError
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumnae.core import settings
from alumnae.core.clock import Clock, utcnow
from alumnae.models.user import User
from alumnae.services.lockout import LockoutPolicy

logger = logging.getLogger(__name__)

ph = PasswordHasher(
    time_cost=settings.password_hash_time_cost,
    memory_cost=settings.password_hash_memory_cost,
    parallelism=4,
    hash_len=32,
    salt_len=16,
)


class AuthError(Exception):
    """Base authentication error.

    Subclasses carry the public message and HTTP status used when the
    error reaches the API layer.
    """

    status_code = 401
    message = "Authentication failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Missing or malformed input."""

    status_code = 400
    message = "Invalid request data"


class UserExistsError(ValidationError):
    """Username or email already registered."""

    message = "User already exists with this email or username"


class InvalidCredentialsError(AuthError):
    """Unknown login or wrong password (deliberately indistinguishable)."""

    message = "Invalid credentials"


class AccountLockedError(AuthError):
    """Too many failed logins; the account is temporarily locked."""

    message = "Account is locked due to too many failed login attempts"


class UnauthenticatedError(AuthError):
    """No session token was presented."""

    message = "No token, authorization denied"


class InvalidTokenError(AuthError):
    """Session token is malformed, expired, or carries a bad signature."""

    message = "Token is not valid"


class TokenRevokedError(AuthError):
    """Session token was revoked by logout."""

    message = "Token has been invalidated. Please log in again."


class UnknownUserError(AuthError):
    """Session token refers to a user that no longer exists."""

    message = "Token is not valid - user not found"


class ForbiddenError(AuthError):
    """Authenticated, but lacking the admin role."""

    status_code = 403
    message = "Access denied. Admin rights required."


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash using constant-time comparison."""
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


@dataclass(frozen=True)
class TokenClaims:
    """Identity and expiry carried by a decoded session token."""

    user_id: UUID
    expires_at: datetime


class TokenIssuer:
    """Mints and verifies signed, time-bound session tokens.

    Expiry is checked against the injected clock rather than PyJWT's wall
    clock, so lock and expiry tests can move time without sleeping.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "ssa-alumnae-app",
        audience: str = "ssa-alumnae-users",
        lifetime: timedelta = timedelta(days=30),
        clock: Clock = utcnow,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.lifetime = lifetime
        self.clock = clock

    @classmethod
    def from_settings(cls, clock: Clock = utcnow) -> "TokenIssuer":
        return cls(
            secret_key=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            lifetime=timedelta(days=settings.jwt_expire_days),
            clock=clock,
        )

    def issue(self, user_id: UUID) -> str:
        """Create a session token for a user."""
        now = self.clock()
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + self.lifetime,
            "iss": self.issuer,
            "aud": self.audience,
        }
        # PyJWT 2.x returns str; older type stubs may declare bytes
        return str(jwt.encode(payload, self.secret_key, algorithm=self.algorithm))

    def decode(self, token: str) -> TokenClaims:
        """Decode and validate a session token.

        Every failure raises the same InvalidTokenError so callers cannot
        tell which check rejected the token.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "require": ["sub", "exp", "iss", "aud"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            user_id = UUID(payload["sub"])
            expires_at = datetime.fromtimestamp(payload["exp"], tz=UTC)
        except (PyJWTError, ValueError, TypeError, KeyError) as e:
            logger.debug(f"Token rejected: {e}")
            raise InvalidTokenError() from e

        if expires_at <= self.clock():
            logger.debug(f"Token expired at {expires_at.isoformat()}")
            raise InvalidTokenError()

        return TokenClaims(user_id=user_id, expires_at=expires_at)


@dataclass(frozen=True)
class LoginResult:
    """A freshly authenticated user and their session token."""

    user: User
    token: str


class AuthService:
    """Service for account registration, login, and password changes."""

    def __init__(
        self,
        session: AsyncSession,
        issuer: TokenIssuer | None = None,
        clock: Clock = utcnow,
    ):
        self.session = session
        self.clock = clock
        self.issuer = issuer or TokenIssuer.from_settings(clock=clock)
        self.lockout = LockoutPolicy(session, clock=clock)

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_login(self, login: str) -> User | None:
        """Get user by username or email, case-insensitive on both.

        An identifier containing '@' is matched against emails only, so a
        login never resolves to more than one account.
        """
        login = login.strip().lower()
        column = User.email if "@" in login else User.username
        result = await self.session.execute(select(User).where(func.lower(column) == login))
        return result.scalar_one_or_none()

    async def register(self, username: str, email: str, password: str) -> LoginResult:
        """Create a new account and sign it in.

        Usernames and emails share one login namespace, so each new
        identifier is checked against both columns of every existing row.
        """
        username = username.strip()
        email = email.strip().lower()
        if "@" in username:
            raise ValidationError("Username must not contain '@'")

        identifiers = (username.lower(), email)
        existing = await self.session.execute(
            select(User.id).where(
                or_(
                    func.lower(User.username).in_(identifiers),
                    func.lower(User.email).in_(identifiers),
                )
            )
        )
        if existing.first() is not None:
            raise UserExistsError()

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            last_login_at=self.clock(),
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same identity
            await self.session.rollback()
            raise UserExistsError() from e
        await self.session.refresh(user)

        logger.info(f"Registered user: {user.username}")
        return LoginResult(user=user, token=self.issuer.issue(user.id))

    async def login(self, login: str, password: str) -> LoginResult:
        """Authenticate by username or email and issue a session token.

        Unknown logins and wrong passwords raise the same
        InvalidCredentialsError to prevent user enumeration. The lock check
        runs before the password check.
        """
        user = await self.get_user_by_login(login)

        if user is None:
            # Perform a dummy hash to prevent timing attacks
            verify_password(password, hash_password("dummy"))
            logger.info("Login failed: unknown identifier")
            raise InvalidCredentialsError()

        if self.lockout.is_locked(user):
            logger.warning(f"Login refused for locked account: {user.username}")
            raise AccountLockedError()

        if not verify_password(password, user.password_hash):
            await self.lockout.record_failure(user)
            logger.info(f"Login failed for {user.username} (attempt {user.login_attempts})")
            raise InvalidCredentialsError()

        await self.lockout.record_success(user)
        logger.info(f"User logged in: {user.username}")
        return LoginResult(user=user, token=self.issuer.issue(user.id))

    async def change_password(
        self, user: User, current_password: str, new_password: str
    ) -> None:
        """Change a user's password after re-checking the current one."""
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        await self.session.commit()

        logger.info(f"Password changed for user: {user.username}")
