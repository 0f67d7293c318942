"""
Account model for site users and administrators.
"""

from sqlalchemy import Column, String, Boolean, Enum as SQLEnum, Uuid
from sqlalchemy.orm import relationship
import uuid
import enum

from portfolio_api.db.base import Base, TimestampMixin


class AccountRole(str, enum.Enum):
    """Account role enumeration."""
    ADMIN = "ADMIN"
    USER = "USER"


class Account(TimestampMixin, Base):
    """Identity record; deactivated through is_active, never hard-deleted."""

    __tablename__ = "accounts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        SQLEnum(AccountRole, values_callable=lambda x: [e.value for e in AccountRole]),
        nullable=False,
        default=AccountRole.USER,
    )
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    projects = relationship("Project", back_populates="author")
    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN
