"""
Authentication controller.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.controllers.base_controller import BaseController
from portfolio_api.models.account import Account
from portfolio_api.schemas.auth import (
    AccountData,
    AuthData,
    LoginRequest,
    LogoutData,
    RefreshData,
    RegisterRequest,
)
from portfolio_api.schemas.common import ApiResponse
from portfolio_api.services.auth_service import AuthService


class AuthController(BaseController):
    """Controller for authentication operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.auth_service = AuthService(session)

    async def register(self, data: RegisterRequest) -> ApiResponse[AuthData]:
        auth_data = await self.auth_service.register(data)
        return ApiResponse[AuthData](message="Account registered successfully", data=auth_data)

    async def login(self, data: LoginRequest) -> ApiResponse[AuthData]:
        auth_data = await self.auth_service.login(data)
        return ApiResponse[AuthData](message="Login successful", data=auth_data)

    async def refresh(self, refresh_token: Optional[str]) -> ApiResponse[RefreshData]:
        """Exchange a refresh token for a new access token."""
        refresh_data = await self.auth_service.refresh(refresh_token)
        return ApiResponse[RefreshData](message="Token refreshed successfully", data=refresh_data)

    async def logout(self, account: Account, refresh_token: Optional[str]) -> ApiResponse[LogoutData]:
        revoked = await self.auth_service.logout(account.id, refresh_token)
        return ApiResponse[LogoutData](
            message="Logout successful",
            data=LogoutData(revoked_tokens=revoked),
        )

    def me(self, account: Account) -> ApiResponse[AccountData]:
        return ApiResponse[AccountData](data=AccountData(account=self.auth_service.profile(account)))
