"""
Health check endpoint.
Returns system status and uptime information.
"""

from fastapi import APIRouter, Request

from portfolio_api.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def get_health(
    request: Request,
) -> HealthResponse:
    """
    Health check endpoint.
    Returns system status, uptime, and health checks.
    """
    container = request.app.state.container
    controller = container.health_controller()
    return await controller.get_health()
