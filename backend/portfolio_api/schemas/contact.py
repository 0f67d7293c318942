"""
Contact message Pydantic schemas for request/response validation.
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from portfolio_api.models.contact import ContactStatus
from portfolio_api.schemas.common import CamelModel, Pagination, RequestModel


class ContactCreate(RequestModel):
    """Schema for a visitor's contact message."""
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    subject: Optional[str] = Field(None, max_length=200)
    message: str = Field(..., min_length=10, max_length=2000)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class ContactUpdate(RequestModel):
    """Schema for updating a contact message (admin)."""
    status: Optional[ContactStatus] = None
    admin_notes: Optional[str] = Field(None, max_length=2000)


class ContactStatusUpdate(RequestModel):
    status: ContactStatus


class ContactBulkUpdate(RequestModel):
    """Batch status/notes update."""
    contact_ids: List[UUID] = Field(..., min_length=1)
    status: ContactStatus
    admin_notes: Optional[str] = Field(None, max_length=2000)


class ContactResponse(CamelModel):
    """Schema for contact message response."""
    id: UUID
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    phone: Optional[str] = None
    status: ContactStatus
    admin_notes: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ContactData(CamelModel):
    contact: ContactResponse


class ContactListData(CamelModel):
    """Schema for contact list response."""
    contacts: List[ContactResponse]
    pagination: Pagination
    stats: Dict[str, int]


class BulkUpdateData(CamelModel):
    updated_count: int


class RecentContact(CamelModel):
    id: UUID
    name: str
    email: str
    subject: Optional[str] = None
    status: ContactStatus
    created_at: Optional[datetime] = None


class MonthlyCount(CamelModel):
    month: str
    count: int


class ContactStatsData(CamelModel):
    status_summary: Dict[str, int]
    recent_contacts: List[RecentContact]
    monthly_stats: List[MonthlyCount]
    total_contacts: int
