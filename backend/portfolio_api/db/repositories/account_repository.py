"""
Account repository for database operations.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from portfolio_api.db.repositories.base_repository import BaseRepository
from portfolio_api.models.account import Account, AccountRole


class AccountRepository(BaseRepository[Account]):
    """Repository for account operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Account, session)

    async def get_by_email(self, email: str) -> Optional[Account]:
        """Get account by normalized email."""
        result = await self.session.execute(
            select(Account).where(Account.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_first_admin(self) -> Optional[Account]:
        """Get any administrator account."""
        result = await self.session.execute(
            select(Account).where(Account.role == AccountRole.ADMIN).limit(1)
        )
        return result.scalar_one_or_none()
