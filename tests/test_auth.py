"""
Authentication endpoint tests: register, login, refresh, logout and access control.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import delete, update

from portfolio_api.core.config import settings
from portfolio_api.core.security import create_token, utcnow
from portfolio_api.db.repositories.account_repository import AccountRepository
from portfolio_api.models.account import Account
from portfolio_api.models.refresh_token import RefreshToken

from conftest import ADMIN_PASSWORD, USER_PASSWORD, create_account

REGISTRATION = {"name": "Ada Lovelace", "email": "Ada@Example.com", "password": "Secret123"}


async def login_user(client: AsyncClient) -> dict:
    response = await client.post(
        "/api/auth/login", json={"email": "user@example.com", "password": USER_PASSWORD}
    )
    return response.json()["data"]


@pytest.mark.asyncio
async def test_register_me_logout_then_refresh_is_rejected(test_client: AsyncClient):
    response = await test_client.post("/api/auth/register", json=REGISTRATION)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["account"]["email"] == "ada@example.com"
    assert data["account"]["role"] == "USER"
    assert data["accessToken"] and data["refreshToken"] and data["refreshExpiresAt"]

    headers = {"Authorization": f"Bearer {data['accessToken']}"}
    me = await test_client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["data"]["account"]["name"] == "Ada Lovelace"

    logout = await test_client.post(
        "/api/auth/logout", json={"refreshToken": data["refreshToken"]}, headers=headers
    )
    assert logout.status_code == 200
    assert logout.json()["data"]["revokedTokens"] == 1

    refresh = await test_client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})
    assert refresh.status_code == 401
    assert refresh.json()["success"] is False


@pytest.mark.asyncio
async def test_register_duplicate_email(test_client: AsyncClient, user_account):
    response = await test_client.post(
        "/api/auth/register",
        json={"name": "Someone", "email": "USER@example.com", "password": "Secret123"},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_register_reports_every_invalid_field(test_client: AsyncClient):
    response = await test_client.post(
        "/api/auth/register",
        json={"name": "A", "email": "not-an-email", "password": "alllowercase"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    fields = {detail["field"] for detail in body["details"]}
    assert fields == {"name", "email", "password"}


@pytest.mark.asyncio
async def test_register_rejects_unknown_fields(test_client: AsyncClient):
    response = await test_client.post("/api/auth/register", json={**REGISTRATION, "role": "ADMIN"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login(test_client: AsyncClient, admin_account):
    response = await test_client.post(
        "/api/auth/login", json={"email": "admin@example.com", "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["account"]["role"] == "ADMIN"
    assert data["tokenType"] == "bearer"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email, password",
    [
        ("admin@example.com", "Wrong123"),
        ("nobody@example.com", ADMIN_PASSWORD),
    ],
)
async def test_login_invalid_credentials(test_client: AsyncClient, admin_account, email, password):
    response = await test_client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_login_inactive_account(test_client: AsyncClient, database):
    await create_account(database, "Gone", "gone@example.com", USER_PASSWORD, is_active=False)

    response = await test_client.post(
        "/api/auth/login", json={"email": "gone@example.com", "password": USER_PASSWORD}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_returns_new_access_token(test_client: AsyncClient, user_account):
    login = await test_client.post(
        "/api/auth/login", json={"email": "user@example.com", "password": USER_PASSWORD}
    )
    refresh_token = login.json()["data"]["refreshToken"]

    response = await test_client.post("/api/auth/refresh", json={"refreshToken": refresh_token})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["account"]["email"] == "user@example.com"
    assert data["refreshToken"] is None

    me = await test_client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert me.status_code == 200


@pytest.mark.asyncio
async def test_refresh_rotates_when_enabled(test_client: AsyncClient, user_account, monkeypatch):
    monkeypatch.setattr(settings, "ROTATE_REFRESH_TOKENS", True)
    login = await test_client.post(
        "/api/auth/login", json={"email": "user@example.com", "password": USER_PASSWORD}
    )
    old_token = login.json()["data"]["refreshToken"]

    response = await test_client.post("/api/auth/refresh", json={"refreshToken": old_token})
    assert response.status_code == 200
    new_token = response.json()["data"]["refreshToken"]
    assert new_token and new_token != old_token

    replay = await test_client.post("/api/auth/refresh", json={"refreshToken": old_token})
    assert replay.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"refreshToken": None}, {"refreshToken": "garbage"}])
async def test_refresh_rejects_missing_or_invalid_token(test_client: AsyncClient, body):
    response = await test_client.post("/api/auth/refresh", json=body)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_without_token_revokes_all(test_client: AsyncClient, user_account):
    tokens = []
    for _ in range(3):
        login = await test_client.post(
            "/api/auth/login", json={"email": "user@example.com", "password": USER_PASSWORD}
        )
        tokens.append(login.json()["data"])

    headers = {"Authorization": f"Bearer {tokens[0]['accessToken']}"}
    logout = await test_client.post("/api/auth/logout", json={}, headers=headers)
    assert logout.json()["data"]["revokedTokens"] == 3

    for pair in tokens:
        refresh = await test_client.post("/api/auth/refresh", json={"refreshToken": pair["refreshToken"]})
        assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_refresh_without_body(test_client: AsyncClient):
    response = await test_client.post("/api/auth/refresh")
    assert response.status_code == 401
    assert response.json()["error"] == "Refresh token required"


@pytest.mark.asyncio
async def test_logout_without_body_revokes_all(test_client: AsyncClient, user_account):
    first = await login_user(test_client)
    second = await login_user(test_client)

    headers = {"Authorization": f"Bearer {first['accessToken']}"}
    logout = await test_client.post("/api/auth/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.json()["data"]["revokedTokens"] == 2

    refresh = await test_client.post("/api/auth/refresh", json={"refreshToken": second["refreshToken"]})
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rejects_expired_stored_record(test_client: AsyncClient, database, user_account):
    refresh_token = (await login_user(test_client))["refreshToken"]
    async with database.session() as session:
        await session.execute(
            update(RefreshToken)
            .where(RefreshToken.token == refresh_token)
            .values(expires_at=utcnow() - timedelta(minutes=1))
        )

    response = await test_client.post("/api/auth/refresh", json={"refreshToken": refresh_token})
    assert response.status_code == 401
    assert response.json()["error"] == "Refresh token invalid or expired"


@pytest.mark.asyncio
async def test_refresh_rejects_deactivated_owner(test_client: AsyncClient, database, user_account):
    refresh_token = (await login_user(test_client))["refreshToken"]
    async with database.session() as session:
        await AccountRepository(session).update(user_account.id, is_active=False)

    response = await test_client.post("/api/auth/refresh", json={"refreshToken": refresh_token})
    assert response.status_code == 401
    assert response.json()["error"] == "Account not found or inactive"


@pytest.mark.asyncio
async def test_refresh_rejects_deleted_owner(test_client: AsyncClient, database, user_account):
    refresh_token = (await login_user(test_client))["refreshToken"]
    async with database.session() as session:
        await session.execute(delete(Account).where(Account.id == user_account.id))

    response = await test_client.post("/api/auth/refresh", json={"refreshToken": refresh_token})
    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_me_requires_token(test_client: AsyncClient):
    response = await test_client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["error"] == "Access token required"


@pytest.mark.asyncio
async def test_me_rejects_expired_token(test_client: AsyncClient, user_account):
    token, _ = create_token(
        {"sub": str(user_account.id), "type": "access"},
        settings.JWT_SECRET,
        timedelta(seconds=-30),
    )
    response = await test_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"] == "Token expired"


@pytest.mark.asyncio
async def test_me_rejects_deactivated_account(test_client: AsyncClient, database, user_headers, user_account):
    async with database.session() as session:
        await AccountRepository(session).update(user_account.id, is_active=False)

    response = await test_client.get("/api/auth/me", headers=user_headers)
    assert response.status_code == 401
    assert response.json()["error"] == "Account not found or inactive"
