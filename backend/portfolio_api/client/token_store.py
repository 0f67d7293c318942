"""
Token storage for the API client.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class TokenStore:
    """In-memory access/refresh token pair."""

    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self.access_token = access_token
        self.refresh_token = refresh_token

    def save(self, access_token: Optional[str], refresh_token: Optional[str] = None) -> None:
        """Store a new access token; the refresh token is kept unless a new one is given."""
        self.access_token = access_token
        if refresh_token is not None:
            self.refresh_token = refresh_token

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None


class FileTokenStore(TokenStore):
    """
    Token pair persisted as JSON ({"accessToken": ..., "refreshToken": ...})
    so a CLI session survives restarts.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__()
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning(f"Ignoring unreadable token file {self.path}")
            return
        self.access_token = data.get("accessToken")
        self.refresh_token = data.get("refreshToken")

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({"accessToken": self.access_token, "refreshToken": self.refresh_token}),
            encoding="utf-8",
        )

    def save(self, access_token: Optional[str], refresh_token: Optional[str] = None) -> None:
        super().save(access_token, refresh_token)
        self._write()

    def clear(self) -> None:
        super().clear()
        if self.path.exists():
            self.path.unlink()
