"""
Token service: issuance, verification, persistence and expiry of
access and refresh tokens.

Refresh tokens are stored server-side so they can be revoked before they
expire. Each account keeps at most ``MAX_REFRESH_TOKENS_PER_ACCOUNT`` live
tokens; issuing past the cap evicts the oldest ones.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.config import Settings, settings as default_settings
from portfolio_api.core.logging import get_logger
from portfolio_api.core.security import create_token, decode_token, parse_duration, utcnow
from portfolio_api.db.repositories.refresh_token_repository import RefreshTokenRepository
from portfolio_api.models.account import Account
from portfolio_api.models.refresh_token import RefreshToken
from portfolio_api.services.base_service import BaseService

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

DEFAULT_ACCESS_LIFETIME = timedelta(minutes=15)
DEFAULT_REFRESH_LIFETIME = timedelta(days=7)


@dataclass
class TokenPair:
    access_token: str
    access_expires_at: datetime
    refresh_token: str
    refresh_expires_at: datetime


class TokenService(BaseService):
    """Service for authentication token operations."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        super().__init__(session)
        self.settings = settings or default_settings
        self.refresh_token_repo = RefreshTokenRepository(session)

    @property
    def access_lifetime(self) -> timedelta:
        return parse_duration(self.settings.JWT_EXPIRES_IN, DEFAULT_ACCESS_LIFETIME)

    @property
    def refresh_lifetime(self) -> timedelta:
        return parse_duration(self.settings.JWT_REFRESH_EXPIRES_IN, DEFAULT_REFRESH_LIFETIME)

    def issue_access_token(self, account: Account) -> tuple[str, datetime]:
        """Sign a short-lived access token for ``account``."""
        claims = {
            "sub": str(account.id),
            "email": account.email,
            "role": account.role.value,
            "name": account.name,
            "type": ACCESS_TOKEN_TYPE,
        }
        return create_token(claims, self.settings.JWT_SECRET, self.access_lifetime)

    def issue_refresh_token(self, account: Account) -> tuple[str, datetime]:
        """Sign a refresh token; ``jti`` keeps same-second tokens distinct."""
        claims = {
            "sub": str(account.id),
            "email": account.email,
            "type": REFRESH_TOKEN_TYPE,
            "jti": uuid.uuid4().hex,
        }
        return create_token(claims, self.settings.JWT_REFRESH_SECRET, self.refresh_lifetime)

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        return decode_token(token, self.settings.JWT_SECRET, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        return decode_token(token, self.settings.JWT_REFRESH_SECRET, REFRESH_TOKEN_TYPE)

    async def persist_refresh_token(
        self,
        account_id: UUID,
        token: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """
        Store a refresh token, first pruning the account's expired tokens and
        evicting the oldest live ones so the cap holds after insertion.
        """
        now = utcnow()
        await self.refresh_token_repo.delete_expired(now, account_id=account_id)

        cap = self.settings.MAX_REFRESH_TOKENS_PER_ACCOUNT
        live_tokens = await self.refresh_token_repo.list_live_for_account(account_id, now)
        if len(live_tokens) >= cap:
            evicted = live_tokens[cap - 1:]
            await self.refresh_token_repo.delete_ids([record.id for record in evicted])
            logger.info(
                "Evicted oldest refresh tokens",
                extra={"account_id": str(account_id), "evicted": len(evicted)},
            )

        return await self.refresh_token_repo.create(
            token=token,
            account_id=account_id,
            expires_at=expires_at,
        )

    async def find_live_refresh_token(self, token: str) -> Optional[RefreshToken]:
        """Return the unexpired record for ``token`` with its account, if any."""
        return await self.refresh_token_repo.get_live_by_token(token, utcnow())

    async def revoke_token(self, token: str, account_id: Optional[UUID] = None) -> int:
        revoked = await self.refresh_token_repo.delete_by_token(token, account_id=account_id)
        logger.info("Refresh token revoked", extra={"revoked": revoked})
        return revoked

    async def revoke_all_for_account(self, account_id: UUID) -> int:
        revoked = await self.refresh_token_repo.delete_for_account(account_id)
        logger.info(
            "All refresh tokens revoked",
            extra={"account_id": str(account_id), "revoked": revoked},
        )
        return revoked

    async def sweep_expired(self) -> int:
        """Delete every expired refresh token. Safe to repeat."""
        swept = await self.refresh_token_repo.delete_expired(utcnow())
        await self.commit()
        if swept:
            logger.info("Expired refresh tokens removed", extra={"count": swept})
        return swept

    async def issue_token_pair(self, account: Account) -> TokenPair:
        """Issue an access/refresh pair and persist the refresh token."""
        access_token, access_expires_at = self.issue_access_token(account)
        refresh_token, refresh_expires_at = self.issue_refresh_token(account)
        await self.persist_refresh_token(account.id, refresh_token, refresh_expires_at)
        return TokenPair(
            access_token=access_token,
            access_expires_at=access_expires_at,
            refresh_token=refresh_token,
            refresh_expires_at=refresh_expires_at,
        )
