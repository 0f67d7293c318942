"""
Contact message model for inbound inquiries from site visitors.
"""

from sqlalchemy import Column, String, Text, Enum as SQLEnum, Uuid
import uuid
import enum

from portfolio_api.db.base import Base, TimestampMixin, UTCDateTime


class ContactStatus(str, enum.Enum):
    """Contact message status enumeration."""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RESPONDED = "RESPONDED"
    ARCHIVED = "ARCHIVED"


class ContactMessage(TimestampMixin, Base):
    """Contact message; not linked to any account."""

    __tablename__ = "contact_messages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    subject = Column(String(200), nullable=True)
    message = Column(Text, nullable=False)
    phone = Column(String(50), nullable=True)
    status = Column(
        SQLEnum(ContactStatus, values_callable=lambda x: [e.value for e in ContactStatus]),
        nullable=False,
        default=ContactStatus.PENDING,
        index=True,
    )
    admin_notes = Column(Text, nullable=True)
    responded_at = Column(UTCDateTime, nullable=True)
