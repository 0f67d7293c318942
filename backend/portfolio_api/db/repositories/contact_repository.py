"""
Contact message repository for database operations.
"""

from datetime import datetime
from typing import Dict, Optional, List, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_, case, extract, func

from portfolio_api.db.repositories.base_repository import BaseRepository
from portfolio_api.models.contact import ContactMessage, ContactStatus

# Workflow order used when listing: pending messages surface first
STATUS_ORDER = case(
    {
        ContactStatus.PENDING: 0,
        ContactStatus.IN_PROGRESS: 1,
        ContactStatus.RESPONDED: 2,
        ContactStatus.ARCHIVED: 3,
    },
    value=ContactMessage.status,
    else_=4,
)


class ContactRepository(BaseRepository[ContactMessage]):
    """Repository for contact message operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(ContactMessage, session)

    def _filters(self, status: Optional[ContactStatus], search: Optional[str]) -> list:
        conditions = []
        if status is not None:
            conditions.append(ContactMessage.status == status)
        if search:
            conditions.append(
                or_(
                    ContactMessage.name.icontains(search, autoescape=True),
                    ContactMessage.email.icontains(search, autoescape=True),
                    ContactMessage.subject.icontains(search, autoescape=True),
                    ContactMessage.message.icontains(search, autoescape=True),
                )
            )
        return conditions

    async def list_filtered(
        self,
        skip: int = 0,
        limit: int = 10,
        status: Optional[ContactStatus] = None,
        search: Optional[str] = None,
    ) -> List[ContactMessage]:
        query = (
            select(ContactMessage)
            .where(*self._filters(status, search))
            .order_by(STATUS_ORDER, ContactMessage.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_filtered(
        self,
        status: Optional[ContactStatus] = None,
        search: Optional[str] = None,
    ) -> int:
        return await self.count(*self._filters(status, search))

    async def count_by_status(self) -> Dict[ContactStatus, int]:
        result = await self.session.execute(
            select(ContactMessage.status, func.count(ContactMessage.id))
            .group_by(ContactMessage.status)
        )
        return {ContactStatus(status): count for status, count in result.all()}

    async def list_recent(self, limit: int = 5) -> List[ContactMessage]:
        result = await self.session.execute(
            select(ContactMessage)
            .order_by(ContactMessage.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_month(self, since: datetime) -> List[Tuple[int, int, int]]:
        """Count messages per (year, month) created since ``since``, newest first."""
        year = extract("year", ContactMessage.created_at)
        month = extract("month", ContactMessage.created_at)
        result = await self.session.execute(
            select(year.label("year"), month.label("month"), func.count(ContactMessage.id))
            .where(ContactMessage.created_at >= since)
            .group_by(year, month)
            .order_by(year.desc(), month.desc())
        )
        return [(int(y), int(m), count) for y, m, count in result.all()]

    async def bulk_update(
        self,
        ids: List[UUID],
        status: ContactStatus,
        now: datetime,
        admin_notes: Optional[str] = None,
    ) -> int:
        """
        Set status (and optionally notes) on many messages in one statement.
        responded_at is stamped only on rows entering RESPONDED.
        """
        values = {"status": status, "updated_at": now}
        if status == ContactStatus.RESPONDED:
            values["responded_at"] = case(
                (ContactMessage.status != ContactStatus.RESPONDED, now),
                else_=ContactMessage.responded_at,
            )
        if admin_notes:
            values["admin_notes"] = admin_notes

        result = await self.session.execute(
            update(ContactMessage)
            .where(ContactMessage.id.in_(ids))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount
