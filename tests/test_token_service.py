"""
Token service tests: issuance, verification, the per-account cap and expiry sweeps.
"""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SAWarning

from portfolio_api.core.config import settings
from portfolio_api.core.exceptions import ExpiredTokenError, InvalidTokenError
from portfolio_api.core.security import create_token, parse_duration, utcnow
from portfolio_api.db.repositories.refresh_token_repository import RefreshTokenRepository
from portfolio_api.models.refresh_token import RefreshToken
from portfolio_api.services.token_service import TokenService
from portfolio_api.services.token_sweeper import TokenSweeper


async def stored_tokens(database, account_id):
    async with database.session() as session:
        result = await session.execute(
            select(RefreshToken.token).where(RefreshToken.account_id == account_id)
        )
        return set(result.scalars().all())


@pytest.mark.asyncio
async def test_access_token_round_trip(database, user_account):
    async with database.session() as session:
        service = TokenService(session)
        token, expires_at = service.issue_access_token(user_account)
        claims = service.verify_access_token(token)

    assert claims["sub"] == str(user_account.id)
    assert claims["email"] == "user@example.com"
    assert claims["role"] == "USER"
    assert claims["iss"] == settings.JWT_ISSUER
    assert expires_at > utcnow()


@pytest.mark.asyncio
async def test_expired_access_token_is_rejected(database, user_account):
    token, _ = create_token(
        {"sub": str(user_account.id), "type": "access"},
        settings.JWT_SECRET,
        timedelta(seconds=-30),
    )
    async with database.session() as session:
        with pytest.raises(ExpiredTokenError):
            TokenService(session).verify_access_token(token)


@pytest.mark.asyncio
async def test_refresh_token_is_not_an_access_token(database, user_account):
    async with database.session() as session:
        service = TokenService(session)
        refresh_token, _ = service.issue_refresh_token(user_account)
        with pytest.raises(InvalidTokenError):
            service.verify_access_token(refresh_token)
        with pytest.raises(InvalidTokenError):
            service.verify_refresh_token("not-a-jwt")


@pytest.mark.asyncio
async def test_token_signed_with_other_secret_is_rejected(database, user_account):
    token, _ = create_token(
        {"sub": str(user_account.id), "type": "access"},
        "some-other-secret-0123456789abcdef0123456789",
        timedelta(minutes=5),
    )
    async with database.session() as session:
        with pytest.raises(InvalidTokenError):
            TokenService(session).verify_access_token(token)


@pytest.mark.asyncio
async def test_refresh_tokens_capped_per_account(database, user_account):
    issued = []
    for _ in range(7):
        async with database.session() as session:
            pair = await TokenService(session).issue_token_pair(user_account)
            issued.append(pair.refresh_token)

    remaining = await stored_tokens(database, user_account.id)
    assert len(remaining) == settings.MAX_REFRESH_TOKENS_PER_ACCOUNT
    assert remaining == set(issued[-5:])


@pytest.mark.asyncio
async def test_sweep_removes_only_expired_tokens(database, user_account):
    now = utcnow()
    async with database.session() as session:
        repo = RefreshTokenRepository(session)
        await repo.create(token="expired-1", account_id=user_account.id, expires_at=now - timedelta(hours=1))
        await repo.create(token="expired-2", account_id=user_account.id, expires_at=now - timedelta(days=2))
        await repo.create(token="live", account_id=user_account.id, expires_at=now + timedelta(days=1))

    async with database.session() as session:
        assert await TokenService(session).sweep_expired() == 2
    async with database.session() as session:
        assert await TokenService(session).sweep_expired() == 0

    assert await stored_tokens(database, user_account.id) == {"live"}


@pytest.mark.asyncio
async def test_revoked_and_expired_tokens_are_not_live(database, user_account):
    async with database.session() as session:
        service = TokenService(session)
        pair = await service.issue_token_pair(user_account)
        await RefreshTokenRepository(session).create(
            token="expired",
            account_id=user_account.id,
            expires_at=utcnow() - timedelta(minutes=1),
        )

    async with database.session() as session:
        service = TokenService(session)
        record = await service.find_live_refresh_token(pair.refresh_token)
        assert record is not None
        assert record.account.id == user_account.id
        assert await service.find_live_refresh_token("expired") is None

        assert await service.revoke_token(pair.refresh_token) == 1

    async with database.session() as session:
        assert await TokenService(session).find_live_refresh_token(pair.refresh_token) is None


@pytest.mark.asyncio
async def test_revoked_record_leaves_session_before_reissue(database, user_account, recwarn):
    async with database.session() as session:
        pair = await TokenService(session).issue_token_pair(user_account)

    async with database.session() as session:
        service = TokenService(session)
        record = await service.find_live_refresh_token(pair.refresh_token)
        assert await service.revoke_token(pair.refresh_token) == 1
        assert record not in session

        replacement = await service.issue_token_pair(user_account)
        reloaded = await service.find_live_refresh_token(replacement.refresh_token)
        assert reloaded.token == replacement.refresh_token

    assert await stored_tokens(database, user_account.id) == {replacement.refresh_token}
    assert not [warning for warning in recwarn if issubclass(warning.category, SAWarning)]


@pytest.mark.asyncio
async def test_revoke_all_for_account(database, user_account, admin_account):
    for account in (user_account, user_account, admin_account):
        async with database.session() as session:
            await TokenService(session).issue_token_pair(account)

    async with database.session() as session:
        assert await TokenService(session).revoke_all_for_account(user_account.id) == 2

    assert await stored_tokens(database, user_account.id) == set()
    assert len(await stored_tokens(database, admin_account.id)) == 1


@pytest.mark.parametrize(
    "value, expected",
    [
        ("15m", timedelta(minutes=15)),
        ("12h", timedelta(hours=12)),
        ("7d", timedelta(days=7)),
        (" 30d ", timedelta(days=30)),
        ("10s", timedelta(days=7)),
        ("abc", timedelta(days=7)),
        ("", timedelta(days=7)),
        (None, timedelta(days=7)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.asyncio
async def test_sweeper_sweep_once(database, user_account):
    async with database.session() as session:
        await RefreshTokenRepository(session).create(
            token="stale",
            account_id=user_account.id,
            expires_at=utcnow() - timedelta(seconds=1),
        )

    sweeper = TokenSweeper(database, interval_seconds=3600)
    assert await sweeper.sweep_once() == 1
    assert await sweeper.sweep_once() == 0


@pytest.mark.asyncio
async def test_sweeper_runs_in_background_and_stops(database, user_account):
    async with database.session() as session:
        await RefreshTokenRepository(session).create(
            token="stale",
            account_id=user_account.id,
            expires_at=utcnow() - timedelta(seconds=1),
        )

    sweeper = TokenSweeper(database, interval_seconds=0.01)
    sweeper.start()
    assert sweeper.running
    await asyncio.sleep(0.2)
    await sweeper.stop()

    assert not sweeper.running
    assert await stored_tokens(database, user_account.id) == set()
