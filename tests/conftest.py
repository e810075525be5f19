"""Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database, so no external
services are needed. Time-dependent behavior (lockout windows, token
expiry) runs against a FrozenClock that tests advance explicitly.
"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-for-testing-only-0123456789"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
# Cheap hashing keeps the lockout scenarios fast
os.environ["PASSWORD_HASH_TIME_COST"] = "1"
os.environ["PASSWORD_HASH_MEMORY_COST"] = "8192"

TEST_USERNAME = "jane"
TEST_EMAIL = "jane@x.com"
TEST_PASSWORD = "secret1"


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def issuer(clock):
    from alumnae.services.auth import TokenIssuer

    return TokenIssuer.from_settings(clock=clock)


# --- Database Fixtures ---


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite database for testing."""
    from alumnae.core.database import Base
    from alumnae.models import Alumna, BatchYear, Event, TokenBlacklist, User  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession, clock) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database and clock overrides."""
    from alumnae.api.auth import get_clock
    from alumnae.core.database import get_db
    from alumnae.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# --- Test Factories ---


@pytest.fixture
def user_factory(db_session):
    """Factory for creating test users."""
    from alumnae.models.user import User
    from alumnae.services.auth import hash_password

    async def _create_user(
        username: str = TEST_USERNAME,
        email: str = TEST_EMAIL,
        password: str = TEST_PASSWORD,
        is_admin: bool = False,
        **kwargs,
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            is_admin=is_admin,
            **kwargs,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest_asyncio.fixture
async def user(user_factory):
    """Create a regular test user."""
    return await user_factory()


@pytest_asyncio.fixture
async def admin_user(user_factory):
    """Create a test admin user."""
    return await user_factory(username="admin", email="admin@x.com", is_admin=True)


@pytest.fixture
def user_headers(user, issuer) -> dict[str, str]:
    """Headers with a session token for the regular user."""
    return {"Authorization": f"Bearer {issuer.issue(user.id)}"}


@pytest.fixture
def admin_headers(admin_user, issuer) -> dict[str, str]:
    """Headers with a session token for the admin user."""
    return {"Authorization": f"Bearer {issuer.issue(admin_user.id)}"}


@pytest.fixture
def batch_year_factory(db_session):
    """Factory for creating batch years."""
    from alumnae.models.batch_year import BatchYear

    async def _create(year: int) -> BatchYear:
        batch_year = BatchYear(year=year)
        db_session.add(batch_year)
        await db_session.commit()
        await db_session.refresh(batch_year)
        return batch_year

    return _create


@pytest.fixture
def alumna_factory(db_session):
    """Factory for creating alumnae under a batch year."""
    from alumnae.models.alumna import Alumna

    async def _create(
        batch_year,
        first_name: str = "Maria",
        last_name: str = "Santos",
        **kwargs,
    ) -> Alumna:
        alumna = Alumna(
            first_name=first_name,
            last_name=last_name,
            batch_year_id=batch_year.id,
            **kwargs,
        )
        db_session.add(alumna)
        await db_session.commit()
        await db_session.refresh(alumna)
        return alumna

    return _create


@pytest.fixture
def event_factory(db_session, clock):
    """Factory for creating events, by default a week after the frozen clock."""
    from alumnae.models.event import Event

    async def _create(title: str = "Homecoming", **kwargs) -> Event:
        fields = {
            "event_date": (clock() + timedelta(days=7)).date(),
            "time": "18:00",
            "location": "School Auditorium",
            "organizer_name": "Alumnae Office",
            "organizer_email": "office@x.com",
            **kwargs,
        }
        event = Event(title=title, **fields)
        db_session.add(event)
        await db_session.commit()
        await db_session.refresh(event)
        return event

    return _create
