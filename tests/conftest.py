"""
Shared fixtures for the astro-admin test suite.

HTTP is faked with `httpx.MockTransport`; handlers receive the outgoing
`httpx.Request` and return an `httpx.Response`.
"""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from adapters.admin_api import AdminApiClient
from adapters.http_client import build_async_client
from adapters.token_store import MemoryTokenStore
from core.config import AppSettings
from core.services.session import SessionGuard

BASE_URL = "https://admin.test"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_base_url=BASE_URL,
        session_file=tmp_path / "session.json",
    )


@pytest.fixture
def guard() -> SessionGuard:
    return SessionGuard(MemoryTokenStore("tok-123"))


@pytest.fixture
def make_api(settings: AppSettings, guard: SessionGuard) -> Callable[[Handler], AdminApiClient]:
    """Factory: `make_api(handler)` -> `AdminApiClient` wired to the session guard."""

    def factory(handler: Handler) -> AdminApiClient:
        client = build_async_client(
            settings,
            token_provider=lambda: guard.token,
            on_unauthorized=guard.handle_unauthorized,
            transport=httpx.MockTransport(handler),
        )
        return AdminApiClient(client)

    return factory


def page_payload(items: list[dict], *, total: int, page: int = 1, limit: int = 10) -> dict:
    """Response body of a paginated list endpoint."""

    return {
        "data": items,
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": -(-total // limit),
        },
    }
