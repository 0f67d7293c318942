"""
Project model for portfolio entries.
"""

from sqlalchemy import Column, String, Text, Boolean, Integer, JSON, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import uuid

from portfolio_api.db.base import Base, TimestampMixin


class Project(TimestampMixin, Base):
    """Portfolio entry; deletion only clears is_active."""

    __tablename__ = "projects"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    video_url = Column(String(500), nullable=True)
    video_title = Column(String(100), nullable=True)
    repository_url = Column(String(500), nullable=True)
    technologies = Column(JSON, nullable=False, default=list)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    display_order = Column("order", Integer, nullable=False, default=0)
    author_id = Column(Uuid(as_uuid=True), ForeignKey("accounts.id"), nullable=False, index=True)

    # Relationships
    author = relationship("Account", back_populates="projects")
