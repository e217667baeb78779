"""
Session guard, login flow and navigation guard tests.
"""

from __future__ import annotations

import json

import httpx
import pytest

from adapters.token_store import FileTokenStore, MemoryTokenStore
from core.domain.errors import (
    AuthenticationFailedError,
    InputValidationError,
    NotAuthenticatedError,
    UnauthorizedError,
    UnknownRouteError,
)
from core.domain.models import PageRequest, UserRecord
from core.services.navigation import HOME_PATH, LOGIN_PATH, Navigator
from core.services.resource_list import ResourceListController
from core.services.screens import USERS, make_fetcher
from core.services.session import SessionGuard, SessionState, authenticate


class TestSessionGuard:
    def test_token_is_read_from_store_each_time(self):
        store = MemoryTokenStore("t1")
        guard = SessionGuard(store)
        assert guard.state is SessionState.AUTHENTICATED

        store.clear()
        assert guard.token is None
        assert guard.state is SessionState.ANONYMOUS

    def test_require(self):
        guard = SessionGuard(MemoryTokenStore())
        with pytest.raises(NotAuthenticatedError):
            guard.require()
        guard.login("abc")
        assert guard.require() == "abc"

    def test_login_rejects_blank_token(self):
        with pytest.raises(InputValidationError):
            SessionGuard(MemoryTokenStore()).login("  ")

    def test_logout_notifies_only_on_transition(self):
        guard = SessionGuard(MemoryTokenStore("t1"))
        reasons: list[str] = []
        guard.add_anonymous_listener(reasons.append)

        guard.logout()
        guard.logout()

        assert reasons == ["logout"]


class TestFileTokenStore:
    def test_roundtrip_and_clear(self, tmp_path):
        store = FileTokenStore(tmp_path / "nested" / "session.json")
        assert store.read() is None

        store.write("tok")
        assert store.read() == "tok"

        store.clear()
        assert store.read() is None
        store.clear()

    def test_corrupt_file_reads_as_anonymous(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        assert FileTokenStore(path).read() is None

    def test_non_utf8_file_reads_as_anonymous(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_bytes(b'{"token": "\xff\xfe"}')
        assert FileTokenStore(path).read() is None


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_success_stores_token(self, make_api):
        guard = SessionGuard(MemoryTokenStore())
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True, "token": "new-token"})

        async with make_api(handler) as api:
            await authenticate(api, guard, username=" admin ", password="secret")

        assert bodies == [{"username": "admin", "password": "secret"}]
        assert guard.token == "new-token"

    @pytest.mark.asyncio
    async def test_rejected_credentials(self, make_api):
        guard = SessionGuard(MemoryTokenStore())

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "Invalid credentials"})

        async with make_api(handler) as api:
            with pytest.raises(AuthenticationFailedError, match="Invalid credentials"):
                await authenticate(api, guard, username="admin", password="bad")
        assert not guard.is_authenticated

    @pytest.mark.asyncio
    async def test_response_without_token(self, make_api):
        guard = SessionGuard(MemoryTokenStore())

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": False, "message": "Account locked"})

        async with make_api(handler) as api:
            with pytest.raises(AuthenticationFailedError, match="Account locked"):
                await authenticate(api, guard, username="admin", password="pw")

    @pytest.mark.asyncio
    async def test_blank_inputs_do_not_call_backend(self, make_api):
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        async with make_api(handler) as api:
            with pytest.raises(InputValidationError):
                await authenticate(api, SessionGuard(MemoryTokenStore()), username="", password="x")
        assert calls == []


class TestNavigator:
    def test_protected_routes_resolve_to_login_when_anonymous(self):
        navigator = Navigator(SessionGuard(MemoryTokenStore()))
        assert navigator.current == LOGIN_PATH
        assert navigator.resolve("/users").path == LOGIN_PATH
        assert navigator.resolve(LOGIN_PATH).path == LOGIN_PATH

    def test_root_redirects_to_dashboard(self):
        navigator = Navigator(SessionGuard(MemoryTokenStore("t")))
        assert navigator.current == HOME_PATH
        assert navigator.go("/").path == HOME_PATH

    def test_unknown_route(self):
        navigator = Navigator(SessionGuard(MemoryTokenStore("t")))
        with pytest.raises(UnknownRouteError):
            navigator.resolve("/nope")

    def test_menu_lists_protected_sections(self):
        navigator = Navigator(SessionGuard(MemoryTokenStore("t")))
        paths = [route.path for route in navigator.menu()]
        assert LOGIN_PATH not in paths
        assert "/horoscopes" in paths
        assert "/scheduler" in paths

    def test_logout_moves_to_login(self):
        guard = SessionGuard(MemoryTokenStore("t"))
        navigator = Navigator(guard)
        navigator.go("/astros")

        guard.logout()

        assert navigator.current == LOGIN_PATH


@pytest.mark.asyncio
async def test_any_401_forces_anonymous_and_redirects(make_api, guard):
    navigator = Navigator(guard)
    navigator.go("/users")

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer tok-123"
        return httpx.Response(401, json={"message": "jwt expired"})

    async with make_api(handler) as api:
        controller = ResourceListController(make_fetcher(api, USERS), PageRequest())
        state = await controller.refresh()

    assert isinstance(state.error, UnauthorizedError)
    assert state.error.message == "jwt expired"
    assert guard.state is SessionState.ANONYMOUS
    assert navigator.current == LOGIN_PATH
    assert navigator.resolve("/users").path == LOGIN_PATH


@pytest.mark.asyncio
async def test_anonymous_requests_carry_no_authorization(make_api, guard):
    guard.logout()
    seen: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={"data": [{"userId": "u1"}], "pagination": {"total": 1}})

    async with make_api(handler) as api:
        page = await api.list_page("users", PageRequest(), UserRecord)

    assert seen == [None]
    assert page.items[0].user_id == "u1"
