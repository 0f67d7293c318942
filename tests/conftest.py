"""
Pytest configuration and fixtures.
Provides an in-memory database, the test app client and seeded accounts.
"""

import os

# Settings are read at import time
os.environ["JWT_SECRET"] = "test-access-secret-0123456789abcdef0123456789"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-0123456789abcdef0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from dependency_injector import providers
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from portfolio_api.core.config import settings
from portfolio_api.core.security import hash_password
from portfolio_api.db.init_db import create_tables
from portfolio_api.db.repositories.account_repository import AccountRepository
from portfolio_api.db.session import Database
from portfolio_api.deps.di_container import build_container
from portfolio_api.main import app
from portfolio_api.models.account import Account, AccountRole
from portfolio_api.services.token_service import TokenService


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PASSWORD = "Admin123"
USER_PASSWORD = "User1234"


@pytest.fixture(scope="function")
async def database():
    """
    Create a test database.
    Uses in-memory SQLite shared through a single connection.
    """
    test_db = Database(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await test_db.connect()
    await create_tables(test_db)

    yield test_db

    await test_db.disconnect()


@pytest.fixture(scope="function")
async def test_client(database):
    """
    Create a test HTTP client bound to the test database.
    """
    container = build_container(settings)
    container.database.override(providers.Object(database))
    app.state.container = container

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    container.database.reset_override()


async def create_account(
    database: Database,
    name: str,
    email: str,
    password: str,
    role: AccountRole = AccountRole.USER,
    is_active: bool = True,
) -> Account:
    async with database.session() as session:
        return await AccountRepository(session).create(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
        )


async def bearer_headers(database: Database, account: Account) -> dict:
    async with database.session() as session:
        token, _ = TokenService(session).issue_access_token(account)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_account(database) -> Account:
    return await create_account(
        database, "Site Admin", "admin@example.com", ADMIN_PASSWORD, role=AccountRole.ADMIN
    )


@pytest.fixture
async def user_account(database) -> Account:
    return await create_account(database, "Regular User", "user@example.com", USER_PASSWORD)


@pytest.fixture
async def admin_headers(database, admin_account) -> dict:
    return await bearer_headers(database, admin_account)


@pytest.fixture
async def user_headers(database, user_account) -> dict:
    return await bearer_headers(database, user_account)
