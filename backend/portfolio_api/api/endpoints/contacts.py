"""
Contact message API endpoints.
Submitting a message is public; everything else requires an administrator.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.api.middleware import require_admin
from portfolio_api.controllers.contact_controller import ContactController
from portfolio_api.db.session import get_db
from portfolio_api.models.account import Account
from portfolio_api.models.contact import ContactStatus
from portfolio_api.schemas.common import ApiResponse
from portfolio_api.schemas.contact import (
    BulkUpdateData,
    ContactBulkUpdate,
    ContactCreate,
    ContactData,
    ContactListData,
    ContactStatsData,
    ContactStatusUpdate,
    ContactUpdate,
)

router = APIRouter()


@router.post("", response_model=ApiResponse[ContactData], status_code=status.HTTP_201_CREATED)
async def create_contact(
    contact_data: ContactCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ContactData]:
    """Submit a contact message."""
    controller = ContactController(db)
    return await controller.create_contact(contact_data)


@router.get("", response_model=ApiResponse[ContactListData])
async def list_contacts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[ContactStatus] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ContactListData]:
    """List contact messages, pending first."""
    controller = ContactController(db)
    return await controller.list_contacts(page=page, limit=limit, status=status, search=search)


@router.get("/stats/summary", response_model=ApiResponse[ContactStatsData])
async def get_contact_stats(
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ContactStatsData]:
    controller = ContactController(db)
    return await controller.get_stats()


@router.post("/bulk-update", response_model=ApiResponse[BulkUpdateData])
async def bulk_update_contacts(
    bulk_data: ContactBulkUpdate,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[BulkUpdateData]:
    controller = ContactController(db)
    return await controller.bulk_update(bulk_data)


@router.get("/{contact_id}", response_model=ApiResponse[ContactData])
async def get_contact(
    contact_id: UUID,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ContactData]:
    controller = ContactController(db)
    return await controller.get_contact(contact_id)


@router.put("/{contact_id}", response_model=ApiResponse[ContactData])
async def update_contact(
    contact_id: UUID,
    contact_data: ContactUpdate,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ContactData]:
    controller = ContactController(db)
    return await controller.update_contact(contact_id, contact_data)


@router.patch("/{contact_id}/status", response_model=ApiResponse[ContactData])
async def update_contact_status(
    contact_id: UUID,
    status_data: ContactStatusUpdate,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ContactData]:
    controller = ContactController(db)
    return await controller.update_status(contact_id, status_data.status)


@router.delete("/{contact_id}", response_model=ApiResponse[None])
async def delete_contact(
    contact_id: UUID,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    controller = ContactController(db)
    return await controller.delete_contact(contact_id)
