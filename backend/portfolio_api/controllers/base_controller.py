"""
Base controller class.
Controllers coordinate services and wrap their results in the
ApiResponse envelope.
"""

from abc import ABC
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession


class BaseController(ABC):
    """Base controller class for all controllers."""

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session
