"""Contrato de persistencia del token de sesión."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenStore(Protocol):
    """Guarda el bearer token opaco.

    El token se lee en cada uso (no se cachea), así un logout hecho desde otro
    proceso se respeta en la siguiente petición.
    """

    def read(self) -> str | None:
        ...

    def write(self, token: str) -> None:
        ...

    def clear(self) -> None:
        ...
