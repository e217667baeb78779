"""Session guard.

Holds the bearer token (through a `TokenStore`), exposes the two-state
session machine and notifies listeners whenever the session drops back to
anonymous, either by explicit logout or because the backend answered 401.

The token is never cached here: every access reads the store, so a logout
performed by another process is honoured by the next request.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable

from core.domain.errors import (
    AuthenticationFailedError,
    DomainRejectedError,
    InputValidationError,
    NotAuthenticatedError,
)
from core.interfaces.token_store import TokenStore

if TYPE_CHECKING:
    from adapters.admin_api import AdminApiClient

logger = logging.getLogger(__name__)

AnonymousListener = Callable[[str], None]


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionGuard:
    """Single process-wide session."""

    def __init__(self, store: TokenStore) -> None:
        self._store = store
        self._listeners: list[AnonymousListener] = []

    @property
    def token(self) -> str | None:
        return self._store.read()

    @property
    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self.token else SessionState.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def add_anonymous_listener(self, listener: AnonymousListener) -> None:
        """Register a callback fired on every `AUTHENTICATED -> ANONYMOUS` transition."""

        self._listeners.append(listener)

    def login(self, token: str) -> None:
        if not token or not token.strip():
            raise InputValidationError("Login response did not contain a token")
        self._store.write(token.strip())
        logger.info("Session authenticated")

    def logout(self, reason: str = "logout") -> None:
        was_authenticated = self.is_authenticated
        self._store.clear()
        if not was_authenticated:
            return
        logger.info("Session closed", extra={"reason": reason})
        for listener in list(self._listeners):
            listener(reason)

    def handle_unauthorized(self) -> None:
        """Callback for the HTTP client: any 401 tears the session down."""

        self.logout(reason="unauthorized")

    def require(self) -> str:
        """Return the token or raise `NotAuthenticatedError`."""

        token = self.token
        if not token:
            raise NotAuthenticatedError()
        return token


async def authenticate(
    api: AdminApiClient,
    guard: SessionGuard,
    *,
    username: str,
    password: str,
) -> None:
    """Log in against `/admin/login` and store the returned token."""

    username = username.strip()
    if not username or not password:
        raise InputValidationError("Username and password are required")

    try:
        response = await api.login(username, password)
    except DomainRejectedError as exc:
        raise AuthenticationFailedError(exc.message) from exc

    if not (response.success and response.token):
        raise AuthenticationFailedError(response.message or "Login failed")
    guard.login(response.token)
