"""
Contact message service with business logic.
"""

from datetime import timedelta
from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.exceptions import NotFoundError
from portfolio_api.core.logging import get_logger
from portfolio_api.core.security import utcnow
from portfolio_api.db.repositories.contact_repository import ContactRepository
from portfolio_api.models.contact import ContactMessage, ContactStatus
from portfolio_api.schemas.contact import (
    ContactBulkUpdate,
    ContactCreate,
    ContactResponse,
    ContactStatsData,
    ContactUpdate,
    MonthlyCount,
    RecentContact,
)
from portfolio_api.services.base_service import BaseService

logger = get_logger(__name__)

# Columns an update may clear by sending null
NULLABLE_FIELDS = {"admin_notes"}

RECENT_CONTACTS_LIMIT = 5
MONTHLY_STATS_WINDOW = timedelta(days=183)


class ContactService(BaseService):
    """Service for contact message operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.contact_repo = ContactRepository(session)

    async def create_contact(self, contact_data: ContactCreate) -> ContactResponse:
        """Store a visitor message as PENDING."""
        contact = await self.contact_repo.create(
            status=ContactStatus.PENDING,
            **contact_data.model_dump(),
        )
        await self.commit()
        logger.info("Contact message received", extra={"contact_id": str(contact.id)})
        return ContactResponse.model_validate(contact)

    async def get_contact(self, contact_id: UUID) -> ContactResponse:
        contact = await self._get_or_404(contact_id)
        return ContactResponse.model_validate(contact)

    async def list_contacts(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[ContactStatus] = None,
        search: Optional[str] = None,
    ) -> tuple[List[ContactResponse], int, Dict[str, int]]:
        """List one page of messages plus per-status counts over all messages."""
        contacts = await self.contact_repo.list_filtered(
            skip=(page - 1) * limit,
            limit=limit,
            status=status,
            search=search or None,
        )
        total = await self.contact_repo.count_filtered(status=status, search=search or None)
        stats = await self.status_counts()
        return [ContactResponse.model_validate(contact) for contact in contacts], total, stats

    async def update_contact(self, contact_id: UUID, contact_data: ContactUpdate) -> ContactResponse:
        """Update status and/or admin notes."""
        contact = await self._get_or_404(contact_id)
        update_dict = {
            key: value
            for key, value in contact_data.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        if update_dict.get("status") == ContactStatus.RESPONDED and contact.status != ContactStatus.RESPONDED:
            update_dict["responded_at"] = utcnow()

        contact = await self.contact_repo.update(contact_id, **update_dict)
        await self.commit()
        return ContactResponse.model_validate(contact)

    async def update_status(self, contact_id: UUID, status: ContactStatus) -> ContactResponse:
        return await self.update_contact(contact_id, ContactUpdate(status=status))

    async def bulk_update(self, bulk_data: ContactBulkUpdate) -> int:
        """Apply one status (and optional notes) to many messages."""
        updated = await self.contact_repo.bulk_update(
            ids=bulk_data.contact_ids,
            status=bulk_data.status,
            now=utcnow(),
            admin_notes=bulk_data.admin_notes,
        )
        await self.commit()
        logger.info(
            "Contacts bulk updated",
            extra={"updated": updated, "status": bulk_data.status.value},
        )
        return updated

    async def delete_contact(self, contact_id: UUID) -> None:
        deleted = await self.contact_repo.delete(contact_id)
        if not deleted:
            raise NotFoundError("Contact message not found")
        await self.commit()

    async def status_counts(self) -> Dict[str, int]:
        """Message count for every status, zero-filled."""
        counts = await self.contact_repo.count_by_status()
        return {status.value: counts.get(status, 0) for status in ContactStatus}

    async def get_stats(self) -> ContactStatsData:
        """Dashboard summary: status counts, newest messages and monthly volume."""
        status_summary = await self.status_counts()
        recent = await self.contact_repo.list_recent(RECENT_CONTACTS_LIMIT)
        monthly = await self.contact_repo.count_by_month(utcnow() - MONTHLY_STATS_WINDOW)

        return ContactStatsData(
            status_summary=status_summary,
            recent_contacts=[RecentContact.model_validate(contact) for contact in recent],
            monthly_stats=[
                MonthlyCount(month=f"{year:04d}-{month:02d}", count=count)
                for year, month, count in monthly
            ],
            total_contacts=sum(status_summary.values()),
        )

    async def _get_or_404(self, contact_id: UUID) -> ContactMessage:
        contact = await self.contact_repo.get(contact_id)
        if not contact:
            raise NotFoundError("Contact message not found")
        return contact
