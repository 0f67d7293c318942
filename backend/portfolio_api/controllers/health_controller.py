"""
Health controller.
Turns the service's check results into the health report.
"""

from portfolio_api.controllers.base_controller import BaseController
from portfolio_api.core.config import settings
from portfolio_api.core.logging import get_logger
from portfolio_api.core.security import utcnow
from portfolio_api.schemas.health import HealthResponse
from portfolio_api.services.health_service import HealthService

logger = get_logger(__name__)


class HealthController(BaseController):
    """Controller for health check operations."""

    def __init__(self, health_service: HealthService):
        super().__init__()
        self.health_service = health_service

    async def get_health(self) -> HealthResponse:
        """
        Report OK when every check passes, DEGRADED otherwise.
        The HTTP status stays 200 either way; callers read ``status``.
        """
        checks = await self.health_service.run_checks()
        failing = sorted(name for name, check in checks.items() if check["status"] != "ok")

        if failing:
            logger.warning("Health check degraded", extra={"failing_checks": failing})
            status, message = "DEGRADED", f"Unavailable: {', '.join(failing)}"
        else:
            status, message = "OK", "Portfolio API is running"

        return HealthResponse(
            status=status,
            message=message,
            timestamp=utcnow(),
            environment=settings.ENVIRONMENT,
            uptime=self.health_service.uptime(),
            checks=checks,
        )
