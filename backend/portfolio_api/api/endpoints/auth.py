"""
Authentication API endpoints: registration, login, token refresh and logout.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.api.middleware import require_authentication
from portfolio_api.controllers.auth_controller import AuthController
from portfolio_api.db.session import get_db
from portfolio_api.models.account import Account
from portfolio_api.schemas.auth import (
    AccountData,
    AuthData,
    LoginRequest,
    LogoutData,
    LogoutRequest,
    RefreshData,
    RefreshRequest,
    RegisterRequest,
)
from portfolio_api.schemas.common import ApiResponse

router = APIRouter()


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AuthData]:
    """Create a USER account and sign it in."""
    controller = AuthController(db)
    return await controller.register(data)


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AuthData]:
    controller = AuthController(db)
    return await controller.login(data)


@router.post("/refresh", response_model=ApiResponse[RefreshData])
async def refresh(
    data: Optional[RefreshRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RefreshData]:
    """
    Exchange a live refresh token for a new access token.
    The refresh token is rotated only when ROTATE_REFRESH_TOKENS is enabled.
    """
    controller = AuthController(db)
    return await controller.refresh(data.refresh_token if data else None)


@router.post("/logout", response_model=ApiResponse[LogoutData])
async def logout(
    data: Optional[LogoutRequest] = Body(None),
    current_account: Account = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[LogoutData]:
    """Revoke one refresh token, or all of the caller's tokens when none is given."""
    controller = AuthController(db)
    return await controller.logout(current_account, data.refresh_token if data else None)


@router.get("/me", response_model=ApiResponse[AccountData])
async def me(
    current_account: Account = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AccountData]:
    controller = AuthController(db)
    return controller.me(current_account)
