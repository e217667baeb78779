"""Contrato de las funciones de listado paginado.

Por qué Protocol:
- El controller de listados no sabe de HTTP: recibe cualquier callable
  asíncrono que convierta un `PageRequest` en un `PageResult`.
- En tests basta con una corrutina local.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

from core.domain.models import PageRequest, PageResult

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class PageFetcher(Protocol[T_co]):
    """Obtiene una página de un recurso.

    Reglas de diseño:
    - Es asíncrono porque típicamente hará I/O (HTTP).
    - Los fallos se propagan como `AdminConsoleError`.
    """

    async def __call__(self, request: PageRequest) -> PageResult[T_co]:
        ...
