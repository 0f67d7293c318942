"""
Health service.
Measures uptime and runs the dependency checks behind /api/health.
"""

import time
from typing import Any, Dict

from portfolio_api.db.session import Database
from portfolio_api.services.base_service import BaseService


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self, database: Database):
        super().__init__()
        self.database = database
        self.start_time = time.time()

    def uptime(self) -> str:
        """Process uptime as an ISO 8601 duration."""
        return f"PT{int(time.time() - self.start_time)}S"

    async def run_checks(self) -> Dict[str, Dict[str, Any]]:
        """
        Run every dependency check.

        Returns:
            Mapping of check name to ``{"status": "ok" | "error", ...}``
        """
        response_time = await self.database.ping()
        if response_time is None:
            return {"database": {"status": "error"}}
        return {"database": {"status": "ok", "responseTimeMs": round(response_time, 2)}}
