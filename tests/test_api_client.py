"""
API client tests against a fake backend served by aiohttp's TestServer.
"""

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from portfolio_api.client.api_client import ApiClient
from portfolio_api.client.token_store import FileTokenStore, TokenStore


class FakeBackend:
    """Minimal stand-in for the portfolio API's auth flow."""

    def __init__(self):
        self.valid_access = {"good-access"}
        self.valid_refresh = {"good-refresh": "renewed-access"}
        self.rotate = False
        self.calls = []

    def _authorized(self, request: web.Request) -> bool:
        header = request.headers.get("Authorization", "")
        return header.startswith("Bearer ") and header[len("Bearer "):] in self.valid_access

    async def me(self, request: web.Request) -> web.Response:
        self.calls.append(("me", request.headers.get("Authorization")))
        if not self._authorized(request):
            return web.json_response({"success": False, "error": "Invalid token"}, status=401)
        return web.json_response({"success": True, "data": {"account": {"name": "Ada"}}})

    async def refresh(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.calls.append(("refresh", body.get("refreshToken")))
        access = self.valid_refresh.get(body.get("refreshToken"))
        if access is None:
            return web.json_response({"success": False, "error": "Refresh token invalid"}, status=401)
        self.valid_access.add(access)
        data = {"accessToken": access}
        if self.rotate:
            data["refreshToken"] = "rotated-refresh"
        return web.json_response({"success": True, "data": data})

    async def login(self, request: web.Request) -> web.Response:
        body = await request.json()
        if body.get("password") != "Secret123":
            return web.json_response({"success": False, "error": "Invalid credentials"}, status=401)
        return web.json_response(
            {"success": True, "data": {"accessToken": "good-access", "refreshToken": "good-refresh"}}
        )

    async def logout(self, request: web.Request) -> web.Response:
        self.calls.append(("logout", request.headers.get("Authorization")))
        return web.json_response({"success": False, "error": "Internal server error"}, status=500)

    async def projects(self, request: web.Request) -> web.Response:
        return web.json_response({"success": True, "data": {"query": dict(request.query)}})

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/auth/me", self.me)
        app.router.add_post("/api/auth/refresh", self.refresh)
        app.router.add_post("/api/auth/login", self.login)
        app.router.add_post("/api/auth/logout", self.logout)
        app.router.add_get("/api/projects", self.projects)
        return app


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
async def base_url(backend):
    server = TestServer(backend.app())
    await server.start_server()
    yield str(server.make_url("/api"))
    await server.close()


def names(calls):
    return [name for name, _ in calls]


@pytest.mark.asyncio
async def test_attaches_bearer_token(backend, base_url):
    async with ApiClient(base_url, TokenStore("good-access", "good-refresh")) as client:
        result = await client.get_profile()

    assert result.status == 200
    assert result.data["account"]["name"] == "Ada"
    assert backend.calls == [("me", "Bearer good-access")]


@pytest.mark.asyncio
async def test_renews_once_and_retries(backend, base_url):
    store = TokenStore("stale-access", "good-refresh")
    async with ApiClient(base_url, store) as client:
        result = await client.get_profile()

    assert result.status == 200
    assert names(backend.calls) == ["me", "refresh", "me"]
    assert backend.calls[-1] == ("me", "Bearer renewed-access")
    assert store.access_token == "renewed-access"
    assert store.refresh_token == "good-refresh"


@pytest.mark.asyncio
async def test_failed_renewal_clears_tokens_and_returns_original_401(backend, base_url):
    store = TokenStore("stale-access", "revoked-refresh")
    async with ApiClient(base_url, store) as client:
        result = await client.get_profile()

    assert result.status == 401
    assert result.error == "Invalid token"
    assert names(backend.calls) == ["me", "refresh"]
    assert store.access_token is None
    assert store.refresh_token is None


@pytest.mark.asyncio
async def test_retry_happens_at_most_once(backend, base_url):
    # Renewal succeeds but the backend keeps rejecting the new token
    backend.valid_refresh["good-refresh"] = "still-rejected"
    backend.valid_access.discard("still-rejected")

    async def reject_everything(request):
        backend.calls.append(("me", request.headers.get("Authorization")))
        return web.json_response({"success": False, "error": "Invalid token"}, status=401)

    backend.me = reject_everything
    server = TestServer(backend.app())
    await server.start_server()
    try:
        async with ApiClient(str(server.make_url("/api")), TokenStore("stale", "good-refresh")) as client:
            result = await client.get_profile()
    finally:
        await server.close()

    assert result.status == 401
    assert names(backend.calls) == ["me", "refresh", "me"]


@pytest.mark.asyncio
async def test_no_renewal_without_refresh_token_or_when_disabled(backend, base_url):
    async with ApiClient(base_url, TokenStore("stale-access")) as client:
        first = await client.get_profile()
    async with ApiClient(base_url, TokenStore("stale-access", "good-refresh")) as client:
        second = await client.request("GET", "/auth/me", renew=False)

    assert first.status == second.status == 401
    assert names(backend.calls) == ["me", "me"]


@pytest.mark.asyncio
async def test_rotated_refresh_token_is_stored(backend, base_url):
    backend.rotate = True
    store = TokenStore("stale-access", "good-refresh")
    async with ApiClient(base_url, store) as client:
        assert await client.renew_token() is True

    assert store.access_token == "renewed-access"
    assert store.refresh_token == "rotated-refresh"


@pytest.mark.asyncio
async def test_renewal_network_error_clears_tokens():
    store = TokenStore("stale-access", "good-refresh")
    async with ApiClient("http://127.0.0.1:1/api", store, timeout=5) as client:
        assert await client.renew_token() is False

    assert store.access_token is None
    assert store.refresh_token is None


@pytest.mark.asyncio
async def test_login_stores_tokens_and_logout_always_clears(backend, base_url):
    store = TokenStore()
    async with ApiClient(base_url, store) as client:
        rejected = await client.login("ada@example.com", "wrong")
        assert rejected.status == 401
        assert store.access_token is None

        result = await client.login("ada@example.com", "Secret123")
        assert result.ok
        assert (store.access_token, store.refresh_token) == ("good-access", "good-refresh")

        logout = await client.logout()

    assert logout.status == 500
    assert store.access_token is None
    assert store.refresh_token is None


@pytest.mark.asyncio
async def test_query_parameters_are_rendered(backend, base_url):
    async with ApiClient(base_url) as client:
        result = await client.get_projects(page=2, featured=True)

    assert result.data["query"] == {"page": "2", "limit": "10", "featured": "true"}


def test_file_token_store_persists(tmp_path):
    path = tmp_path / "tokens.json"
    store = FileTokenStore(path)
    assert store.access_token is None

    store.save("access-1", "refresh-1")
    reloaded = FileTokenStore(path)
    assert (reloaded.access_token, reloaded.refresh_token) == ("access-1", "refresh-1")

    reloaded.save("access-2")
    assert FileTokenStore(path).refresh_token == "refresh-1"

    reloaded.clear()
    assert not path.exists()
    assert FileTokenStore(path).access_token is None
