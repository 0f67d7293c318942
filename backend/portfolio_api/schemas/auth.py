"""
Account and authentication schemas.
"""

import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from portfolio_api.models.account import AccountRole
from portfolio_api.schemas.common import CamelModel, RequestModel

_PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


class AccountResponse(CamelModel):
    """Public account fields."""
    id: UUID
    name: str
    email: str
    role: AccountRole
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RegisterRequest(RequestModel):
    """Schema for self-registration."""
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def password_complexity(cls, value: str) -> str:
        if not _PASSWORD_RULE.match(value):
            raise ValueError(
                "Password must contain at least one lowercase letter, one uppercase letter and one digit"
            )
        return value


class LoginRequest(RequestModel):
    """Schema for email/password login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class RefreshRequest(RequestModel):
    """Refresh token exchange; a missing token is answered with 401."""
    refresh_token: Optional[str] = None


class LogoutRequest(RequestModel):
    """Logout; without a refresh token every session is revoked."""
    refresh_token: Optional[str] = None


class AuthData(CamelModel):
    """Account plus a freshly issued token pair."""
    account: AccountResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    access_expires_at: datetime
    refresh_expires_at: datetime


class RefreshData(CamelModel):
    """New access token; refresh_token is set only when rotation is enabled."""
    account: AccountResponse
    access_token: str
    access_expires_at: datetime
    refresh_token: Optional[str] = None
    refresh_expires_at: Optional[datetime] = None


class AccountData(CamelModel):
    account: AccountResponse


class LogoutData(CamelModel):
    revoked_tokens: int
