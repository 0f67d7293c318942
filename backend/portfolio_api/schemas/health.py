"""
Health check response schemas.
"""

from datetime import datetime
from pydantic import BaseModel
from typing import Dict, Any


class HealthResponse(BaseModel):
    """Health check response schema."""
    status: str
    message: str
    timestamp: datetime
    environment: str
    uptime: str
    checks: Dict[str, Any] = {}
