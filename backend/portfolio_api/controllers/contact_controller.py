"""
Contact message controller.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.controllers.base_controller import BaseController
from portfolio_api.models.contact import ContactStatus
from portfolio_api.schemas.common import ApiResponse, Pagination
from portfolio_api.schemas.contact import (
    BulkUpdateData,
    ContactBulkUpdate,
    ContactCreate,
    ContactData,
    ContactListData,
    ContactStatsData,
    ContactUpdate,
)
from portfolio_api.services.contact_service import ContactService


class ContactController(BaseController):
    """Controller for contact message operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.contact_service = ContactService(session)

    async def create_contact(self, contact_data: ContactCreate) -> ApiResponse[ContactData]:
        contact = await self.contact_service.create_contact(contact_data)
        return ApiResponse[ContactData](
            message="Message sent successfully",
            data=ContactData(contact=contact),
        )

    async def list_contacts(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[ContactStatus] = None,
        search: Optional[str] = None,
    ) -> ApiResponse[ContactListData]:
        """List contact messages with pagination and per-status counts."""
        contacts, total, stats = await self.contact_service.list_contacts(
            page=page,
            limit=limit,
            status=status,
            search=search,
        )
        return ApiResponse[ContactListData](
            data=ContactListData(
                contacts=contacts,
                pagination=Pagination.build(page, limit, total),
                stats=stats,
            )
        )

    async def get_contact(self, contact_id: UUID) -> ApiResponse[ContactData]:
        contact = await self.contact_service.get_contact(contact_id)
        return ApiResponse[ContactData](data=ContactData(contact=contact))

    async def update_contact(self, contact_id: UUID, contact_data: ContactUpdate) -> ApiResponse[ContactData]:
        contact = await self.contact_service.update_contact(contact_id, contact_data)
        return ApiResponse[ContactData](
            message="Contact message updated successfully",
            data=ContactData(contact=contact),
        )

    async def update_status(self, contact_id: UUID, status: ContactStatus) -> ApiResponse[ContactData]:
        contact = await self.contact_service.update_status(contact_id, status)
        return ApiResponse[ContactData](
            message="Contact status updated successfully",
            data=ContactData(contact=contact),
        )

    async def bulk_update(self, bulk_data: ContactBulkUpdate) -> ApiResponse[BulkUpdateData]:
        updated = await self.contact_service.bulk_update(bulk_data)
        return ApiResponse[BulkUpdateData](
            message=f"{updated} contact messages updated",
            data=BulkUpdateData(updated_count=updated),
        )

    async def delete_contact(self, contact_id: UUID) -> ApiResponse[None]:
        await self.contact_service.delete_contact(contact_id)
        return ApiResponse[None](message="Contact message deleted successfully")

    async def get_stats(self) -> ApiResponse[ContactStatsData]:
        stats = await self.contact_service.get_stats()
        return ApiResponse[ContactStatsData](data=stats)
