"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from portfolio_api.models.account import Account, AccountRole
from portfolio_api.models.contact import ContactMessage, ContactStatus
from portfolio_api.models.project import Project
from portfolio_api.models.refresh_token import RefreshToken

__all__ = [
    "Account",
    "AccountRole",
    "ContactMessage",
    "ContactStatus",
    "Project",
    "RefreshToken",
]
