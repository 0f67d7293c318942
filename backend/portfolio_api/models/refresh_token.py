"""
Refresh token model: server-side record of every issued refresh token.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from portfolio_api.core.security import utcnow
from portfolio_api.db.base import Base, UTCDateTime


class RefreshToken(Base):
    """Refresh token owned by exactly one account."""

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(512), nullable=False, unique=True, index=True)
    account_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(UTCDateTime, nullable=False, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    # Relationships
    account = relationship("Account", back_populates="refresh_tokens")
