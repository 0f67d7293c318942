"""
API middleware for authentication and common concerns.
Centralized authentication enforcement for all protected routes.

Identity resolution returns an AuthResult instead of raising, so the
dependencies below decide whether a failure rejects the request or just
leaves the caller anonymous.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidTokenError,
    MissingCredentialsError,
    UnauthorizedAccountError,
)
from portfolio_api.db.repositories.account_repository import AccountRepository
from portfolio_api.db.session import get_db
from portfolio_api.models.account import Account
from portfolio_api.services.token_service import TokenService

# auto_error=False: a missing header is reported through our own error envelope
security = HTTPBearer(auto_error=False)


@dataclass
class AuthResult:
    """Outcome of identity resolution: an account or the error that stopped it."""
    account: Optional[Account] = None
    error: Optional[AuthenticationError] = None

    @property
    def authenticated(self) -> bool:
        return self.account is not None


async def resolve_identity(
    credentials: Optional[HTTPAuthorizationCredentials],
    session: AsyncSession,
) -> AuthResult:
    """
    Resolve the bearer token to an active account.

    Args:
        credentials: Parsed Authorization header, if any
        session: Database session

    Returns:
        AuthResult with either the account or the authentication error kind
    """
    if credentials is None or not credentials.credentials:
        return AuthResult(error=MissingCredentialsError())

    try:
        payload = TokenService(session).verify_access_token(credentials.credentials)
    except AuthenticationError as exc:
        return AuthResult(error=exc)

    try:
        account_id = UUID(payload["sub"])
    except ValueError:
        return AuthResult(error=InvalidTokenError())

    account = await AccountRepository(session).get(account_id)
    if account is None or not account.is_active:
        return AuthResult(error=UnauthorizedAccountError())

    return AuthResult(account=account)


async def require_authentication(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Account:
    """
    Centralized authentication dependency.

    Usage:
        @router.get("/endpoint")
        async def my_endpoint(
            current_account: Account = Depends(require_authentication)
        ):
            ...

    Raises:
        AuthenticationError: If the token is missing, invalid, expired or
            belongs to a missing or inactive account
    """
    result = await resolve_identity(credentials, db)
    if not result.authenticated:
        raise result.error
    request.state.account = result.account
    return result.account


async def require_admin(
    account: Account = Depends(require_authentication),
) -> Account:
    """Authenticated account with the ADMIN role."""
    if not account.is_admin:
        raise AuthorizationError()
    return account


async def optional_authentication(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Optional[Account]:
    """Account for a valid token, otherwise None. Never rejects the request."""
    result = await resolve_identity(credentials, db)
    request.state.account = result.account
    return result.account
