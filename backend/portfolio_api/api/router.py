"""
API router that aggregates all endpoint routers.
Access control is declared per route: public reads, authenticated account
routes and admin-only management routes.
"""

from fastapi import APIRouter

from portfolio_api.api.endpoints import (
    health,
    auth,
    projects,
    contacts,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
