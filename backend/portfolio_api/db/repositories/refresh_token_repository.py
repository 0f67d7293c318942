"""
Refresh token repository for database operations.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.orm import selectinload

from portfolio_api.db.repositories.base_repository import BaseRepository
from portfolio_api.models.refresh_token import RefreshToken


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Repository for refresh token records."""

    def __init__(self, session: AsyncSession):
        super().__init__(RefreshToken, session)

    async def list_live_for_account(self, account_id: UUID, now: datetime) -> List[RefreshToken]:
        """List an account's unexpired tokens, newest first."""
        result = await self.session.execute(
            select(RefreshToken)
            .where(RefreshToken.account_id == account_id)
            .where(RefreshToken.expires_at > now)
            .order_by(RefreshToken.created_at.desc(), RefreshToken.id.desc())
        )
        return list(result.scalars().all())

    async def get_live_by_token(self, token: str, now: datetime) -> Optional[RefreshToken]:
        """Get an unexpired token record with its account loaded."""
        result = await self.session.execute(
            select(RefreshToken)
            .options(selectinload(RefreshToken.account))
            .where(RefreshToken.token == token)
            .where(RefreshToken.expires_at > now)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def delete_ids(self, ids: List[int]) -> int:
        if not ids:
            return 0
        result = await self.session.execute(
            delete(RefreshToken).where(RefreshToken.id.in_(ids))
        )
        await self.session.flush()
        return result.rowcount

    async def delete_by_token(self, token: str, account_id: Optional[UUID] = None) -> int:
        query = delete(RefreshToken).where(RefreshToken.token == token)
        if account_id is not None:
            query = query.where(RefreshToken.account_id == account_id)
        result = await self.session.execute(query)
        await self.session.flush()
        return result.rowcount

    async def delete_for_account(self, account_id: UUID) -> int:
        result = await self.session.execute(
            delete(RefreshToken)
            .where(RefreshToken.account_id == account_id)
        )
        await self.session.flush()
        return result.rowcount

    async def delete_expired(self, now: datetime, account_id: Optional[UUID] = None) -> int:
        """Delete expired tokens, optionally scoped to one account."""
        query = delete(RefreshToken).where(RefreshToken.expires_at <= now)
        if account_id is not None:
            query = query.where(RefreshToken.account_id == account_id)
        result = await self.session.execute(query)
        await self.session.flush()
        return result.rowcount
