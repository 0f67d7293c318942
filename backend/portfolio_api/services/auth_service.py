"""
Authentication service: registration, login, token refresh and logout.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from portfolio_api.core.config import Settings, settings as default_settings
from portfolio_api.core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    MissingCredentialsError,
    UnauthorizedAccountError,
)
from portfolio_api.core.logging import get_logger
from portfolio_api.core.security import hash_password, verify_password
from portfolio_api.db.repositories.account_repository import AccountRepository
from portfolio_api.models.account import Account, AccountRole
from portfolio_api.schemas.auth import (
    AccountResponse,
    AuthData,
    LoginRequest,
    RefreshData,
    RegisterRequest,
)
from portfolio_api.services.base_service import BaseService
from portfolio_api.services.token_service import TokenPair, TokenService

logger = get_logger(__name__)


class AuthService(BaseService):
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        super().__init__(session)
        self.settings = settings or default_settings
        self.account_repo = AccountRepository(session)
        self.token_service = TokenService(session, self.settings)

    async def register(self, data: RegisterRequest) -> AuthData:
        """
        Create a USER account and sign it in.

        Raises:
            ConflictError: If the email is already registered
        """
        if await self.account_repo.get_by_email(data.email):
            raise ConflictError("An account with this email already exists")

        password_hash = await run_in_threadpool(hash_password, data.password)
        account = await self.account_repo.create(
            name=data.name,
            email=data.email,
            password_hash=password_hash,
            role=AccountRole.USER,
        )
        tokens = await self.token_service.issue_token_pair(account)
        await self.commit()

        logger.info("Account registered", extra={"account_id": str(account.id)})
        return self._to_auth_data(account, tokens)

    async def login(self, data: LoginRequest) -> AuthData:
        """
        Check credentials and issue a token pair.

        Raises:
            AuthenticationError: On unknown email, wrong password or inactive account
        """
        account = await self.account_repo.get_by_email(data.email)
        if account is None:
            raise AuthenticationError("Invalid credentials")

        if not account.is_active:
            raise AuthenticationError("Account is deactivated. Contact the administrator")

        valid = await run_in_threadpool(verify_password, data.password, account.password_hash)
        if not valid:
            raise AuthenticationError("Invalid credentials")

        tokens = await self.token_service.issue_token_pair(account)
        await self.commit()

        logger.info("Account logged in", extra={"account_id": str(account.id)})
        return self._to_auth_data(account, tokens)

    async def refresh(self, refresh_token: Optional[str]) -> RefreshData:
        """
        Exchange a live refresh token for a new access token.

        The token must verify as a JWT and still be stored server-side; its
        owner must exist and be active. With rotation enabled the presented
        token is revoked and replaced.
        """
        if not refresh_token:
            raise MissingCredentialsError("Refresh token required")

        claims = self.token_service.verify_refresh_token(refresh_token)

        record = await self.token_service.find_live_refresh_token(refresh_token)
        if record is None:
            raise InvalidTokenError("Refresh token invalid or expired")

        account = record.account
        if account is None or not account.is_active or str(account.id) != claims["sub"]:
            raise UnauthorizedAccountError()

        if self.settings.ROTATE_REFRESH_TOKENS:
            await self.token_service.revoke_token(refresh_token, account_id=account.id)
            tokens = await self.token_service.issue_token_pair(account)
            await self.commit()
            return RefreshData(
                account=self._to_account_response(account),
                access_token=tokens.access_token,
                access_expires_at=tokens.access_expires_at,
                refresh_token=tokens.refresh_token,
                refresh_expires_at=tokens.refresh_expires_at,
            )

        access_token, access_expires_at = self.token_service.issue_access_token(account)
        return RefreshData(
            account=self._to_account_response(account),
            access_token=access_token,
            access_expires_at=access_expires_at,
        )

    async def logout(self, account_id: UUID, refresh_token: Optional[str] = None) -> int:
        """Revoke one refresh token of the caller, or all of them."""
        if refresh_token:
            revoked = await self.token_service.revoke_token(refresh_token, account_id=account_id)
        else:
            revoked = await self.token_service.revoke_all_for_account(account_id)
        await self.commit()
        return revoked

    def profile(self, account: Account) -> AccountResponse:
        """Public view of the authenticated account."""
        return self._to_account_response(account)

    def _to_account_response(self, account: Account) -> AccountResponse:
        return AccountResponse(
            id=account.id,
            name=account.name,
            email=account.email,
            role=account.role,
            is_active=account.is_active,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )

    def _to_auth_data(self, account: Account, tokens: TokenPair) -> AuthData:
        return AuthData(
            account=self._to_account_response(account),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            access_expires_at=tokens.access_expires_at,
            refresh_expires_at=tokens.refresh_expires_at,
        )
