"""
Async client for the portfolio API using aiohttp.

Attaches the stored access token to every call. When a call is rejected
with 401 and a refresh token is stored, the client renews the access token
once and retries the call once; if renewal fails the tokens are cleared and
the original 401 result is returned.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional
from uuid import UUID

import aiohttp
import logging

from portfolio_api.client.token_store import TokenStore

logger = logging.getLogger(__name__)

REFRESH_ENDPOINT = "/auth/refresh"


@dataclass
class ApiResult:
    """HTTP status plus the decoded JSON envelope."""
    status: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300 and bool(self.body.get("success", True))

    @property
    def data(self) -> Optional[Dict[str, Any]]:
        return self.body.get("data")

    @property
    def error(self) -> Optional[str]:
        return self.body.get("error")


class ApiClient:
    """
    Async HTTP client for the portfolio API.

    Usage:
        async with ApiClient("http://localhost:8000/api") as client:
            await client.login("admin@portfolio.dev", "Admin123")
            result = await client.get_projects(featured=True)
    """

    def __init__(
        self,
        base_url: str,
        token_store: Optional[TokenStore] = None,
        timeout: int = 30,
    ):
        """
        Initialize API client.

        Args:
            base_url: API root, including the /api prefix
            token_store: Where the token pair lives; in-memory by default
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.token_store = token_store or TokenStore()
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token_store.access_token:
            headers["Authorization"] = f"Bearer {self.token_store.access_token}"
        return headers

    async def _send(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResult:
        session = await self._get_session()
        async with session.request(
            method,
            self._build_url(endpoint),
            json=json,
            params=_clean_params(params),
            headers=self._headers(),
        ) as response:
            try:
                body = await response.json(content_type=None)
            except ValueError:
                body = {"success": False, "error": await response.text()}
            if not isinstance(body, dict):
                body = {"success": response.status < 400, "data": body}
            return ApiResult(status=response.status, body=body)

    async def request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        renew: bool = True,
    ) -> ApiResult:
        """
        Make an API call, renewing the access token at most once on 401.

        Args:
            method: HTTP method
            endpoint: Path below the base URL
            json: Optional JSON body
            params: Optional query parameters; None values are dropped
            renew: Allow one token renewal and retry

        Returns:
            ApiResult of the original call, or of the single retry
        """
        result = await self._send(method, endpoint, json=json, params=params)
        if result.status != 401 or not renew or not self.token_store.refresh_token:
            return result

        logger.debug(f"{method} {endpoint} rejected with 401, renewing access token")
        if not await self.renew_token():
            return result
        return await self._send(method, endpoint, json=json, params=params)

    async def renew_token(self) -> bool:
        """
        Exchange the stored refresh token for a new access token.

        Returns:
            True on success; on any failure the stored tokens are cleared
        """
        refresh_token = self.token_store.refresh_token
        if not refresh_token:
            return False

        try:
            result = await self._send("POST", REFRESH_ENDPOINT, json={"refreshToken": refresh_token})
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning(f"Token renewal failed: {e}")
            self.token_store.clear()
            return False

        access_token = (result.data or {}).get("accessToken")
        if not result.ok or not access_token:
            logger.info("Token renewal rejected, clearing stored tokens")
            self.token_store.clear()
            return False

        self.token_store.save(access_token, (result.data or {}).get("refreshToken"))
        return True

    def _store_auth_result(self, result: ApiResult) -> ApiResult:
        data = result.data or {}
        if result.ok and data.get("accessToken"):
            self.token_store.save(data["accessToken"], data.get("refreshToken"))
        return result

    # Auth

    async def login(self, email: str, password: str) -> ApiResult:
        result = await self.request(
            "POST", "/auth/login", json={"email": email, "password": password}, renew=False
        )
        return self._store_auth_result(result)

    async def register(self, name: str, email: str, password: str) -> ApiResult:
        result = await self.request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password},
            renew=False,
        )
        return self._store_auth_result(result)

    async def logout(self) -> Optional[ApiResult]:
        """Revoke the stored refresh token server-side; local tokens are always cleared."""
        result = None
        try:
            if self.token_store.access_token:
                result = await self.request(
                    "POST",
                    "/auth/logout",
                    json={"refreshToken": self.token_store.refresh_token},
                    renew=False,
                )
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning(f"Logout request failed: {e}")
        finally:
            self.token_store.clear()
        return result

    async def get_profile(self) -> ApiResult:
        return await self.request("GET", "/auth/me")

    # Projects

    async def get_projects(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
    ) -> ApiResult:
        params = {"page": page, "limit": limit, "search": search, "featured": featured}
        return await self.request("GET", "/projects", params=params)

    async def get_featured_projects(self) -> ApiResult:
        return await self.request("GET", "/projects/featured")

    async def get_project(self, project_id: UUID) -> ApiResult:
        return await self.request("GET", f"/projects/{project_id}")

    async def create_project(self, project: Dict[str, Any]) -> ApiResult:
        return await self.request("POST", "/projects", json=project)

    async def update_project(self, project_id: UUID, changes: Dict[str, Any]) -> ApiResult:
        return await self.request("PUT", f"/projects/{project_id}", json=changes)

    async def delete_project(self, project_id: UUID) -> ApiResult:
        return await self.request("DELETE", f"/projects/{project_id}")

    async def toggle_project_featured(self, project_id: UUID) -> ApiResult:
        return await self.request("PATCH", f"/projects/{project_id}/toggle-featured")

    async def get_all_projects(self, page: int = 1, limit: int = 10, search: Optional[str] = None) -> ApiResult:
        params = {"page": page, "limit": limit, "search": search}
        return await self.request("GET", "/projects/admin/all", params=params)

    # Contacts

    async def send_contact(self, message: Dict[str, Any]) -> ApiResult:
        return await self.request("POST", "/contacts", json=message)

    async def get_contacts(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> ApiResult:
        params = {"page": page, "limit": limit, "status": status, "search": search}
        return await self.request("GET", "/contacts", params=params)

    async def get_contact(self, contact_id: UUID) -> ApiResult:
        return await self.request("GET", f"/contacts/{contact_id}")

    async def update_contact(self, contact_id: UUID, changes: Dict[str, Any]) -> ApiResult:
        return await self.request("PUT", f"/contacts/{contact_id}", json=changes)

    async def delete_contact(self, contact_id: UUID) -> ApiResult:
        return await self.request("DELETE", f"/contacts/{contact_id}")

    async def update_contact_status(self, contact_id: UUID, status: str) -> ApiResult:
        return await self.request("PATCH", f"/contacts/{contact_id}/status", json={"status": status})

    async def bulk_update_contacts(
        self,
        contact_ids: Iterable[UUID],
        status: str,
        admin_notes: Optional[str] = None,
    ) -> ApiResult:
        payload: Dict[str, Any] = {
            "contactIds": [str(contact_id) for contact_id in contact_ids],
            "status": status,
        }
        if admin_notes:
            payload["adminNotes"] = admin_notes
        return await self.request("POST", "/contacts/bulk-update", json=payload)

    async def get_contact_stats(self) -> ApiResult:
        return await self.request("GET", "/contacts/stats/summary")

    # Health

    async def get_health(self) -> ApiResult:
        return await self.request("GET", "/health", renew=False)


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
    """Drop None values and render booleans the way the API parses them."""
    if not params:
        return None
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = str(value)
    return cleaned
