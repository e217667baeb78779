"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeouts y headers para todas las llamadas al backend.
- Adjunta el bearer token leído en el momento de cada request.
- Registra el callback de "no autorizado" en la construcción: cualquier 401
  cierra la sesión, sea cual sea el listado o la acción que lo provocó.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from core.config import AppSettings

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], "str | None"]
UnauthorizedCallback = Callable[[], None]


def build_async_client(
    settings: AppSettings | None = None,
    *,
    token_provider: TokenProvider | None = None,
    on_unauthorized: UnauthorizedCallback | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando al backend de administración."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)

    async def attach_token(request: httpx.Request) -> None:
        token = token_provider() if token_provider else None
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def check_unauthorized(response: httpx.Response) -> None:
        if response.status_code == 401:
            logger.info(
                "Unauthorized response, closing session",
                extra={"path": response.request.url.path},
            )
            if on_unauthorized:
                on_unauthorized()

    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
        event_hooks={"request": [attach_token], "response": [check_unauthorized]},
    )


def extract_error_message(response: httpx.Response, fallback: str) -> str:
    """Mensaje legible del cuerpo de error (`message`, luego `error`) o el fallback."""

    try:
        body: Any = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return fallback
