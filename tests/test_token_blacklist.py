"""Tests for the database-backed token blacklist."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from alumnae.models.token_blacklist import TokenBlacklist
from alumnae.services.auth import InvalidTokenError
from alumnae.services.token_blacklist import TokenBlacklistService


@pytest.fixture
def blacklist(db_session, issuer, clock):
    return TokenBlacklistService(db_session, issuer=issuer, clock=clock)


async def _count(db_session) -> int:
    result = await db_session.execute(select(func.count(TokenBlacklist.id)))
    return result.scalar_one()


class TestTokenBlacklist:
    @pytest.mark.asyncio
    async def test_fresh_token_not_revoked(self, blacklist, issuer, user):
        assert await blacklist.is_revoked(issuer.issue(user.id)) is False

    @pytest.mark.asyncio
    async def test_revoke_marks_token(self, blacklist, issuer, user):
        token = issuer.issue(user.id)
        await blacklist.revoke(token, user.id)
        assert await blacklist.is_revoked(token) is True

    @pytest.mark.asyncio
    async def test_revoke_only_affects_that_token(self, blacklist, issuer, user, clock):
        revoked = issuer.issue(user.id)
        clock.advance(seconds=1)
        other = issuer.issue(user.id)

        await blacklist.revoke(revoked, user.id)
        assert await blacklist.is_revoked(other) is False

    @pytest.mark.asyncio
    async def test_revoke_stores_natural_expiry(self, blacklist, issuer, user, db_session):
        token = issuer.issue(user.id)
        await blacklist.revoke(token, user.id)

        entry = (await db_session.execute(select(TokenBlacklist))).scalar_one()
        assert entry.expires_at == issuer.decode(token).expires_at
        assert entry.user_id == user.id

    @pytest.mark.asyncio
    async def test_revoke_twice_is_not_an_error(self, blacklist, issuer, user, db_session):
        token = issuer.issue(user.id)
        await blacklist.revoke(token, user.id)
        await blacklist.revoke(token, user.id)

        assert await blacklist.is_revoked(token) is True
        assert await _count(db_session) == 1

    @pytest.mark.asyncio
    async def test_revoke_invalid_token_raises(self, blacklist, user):
        with pytest.raises(InvalidTokenError):
            await blacklist.revoke("garbage", user.id)

    @pytest.mark.asyncio
    async def test_expired_entries_ignored_on_lookup(self, blacklist, issuer, user, clock):
        token = issuer.issue(user.id)
        await blacklist.revoke(token, user.id)

        clock.advance(days=31)
        assert await blacklist.is_revoked(token) is False

    @pytest.mark.asyncio
    async def test_purge_expired(self, blacklist, issuer, user, clock, db_session):
        old = issuer.issue(user.id)
        await blacklist.revoke(old, user.id)

        clock.advance(days=20)
        recent = issuer.issue(user.id)
        await blacklist.revoke(recent, user.id)

        clock.advance(days=11)
        removed = await blacklist.purge_expired()

        assert removed == 1
        assert await _count(db_session) == 1
        assert await blacklist.is_revoked(recent) is True

    @pytest.mark.asyncio
    async def test_purge_with_nothing_expired(self, blacklist, issuer, user):
        await blacklist.revoke(issuer.issue(user.id), user.id)
        assert await blacklist.purge_expired() == 0

    @pytest.mark.asyncio
    async def test_revoke_losing_insert_race_is_success(
        self, blacklist, issuer, user, db_session, monkeypatch
    ):
        token = issuer.issue(user.id)
        user_id = user.id
        # Another logout committed the same token after our lookup ran
        db_session.add(
            TokenBlacklist(token=token, expires_at=issuer.decode(token).expires_at, user_id=user_id)
        )
        await db_session.commit()
        monkeypatch.setattr(blacklist, "is_revoked", AsyncMock(return_value=False))

        await blacklist.revoke(token, user_id)

        assert await _count(db_session) == 1
