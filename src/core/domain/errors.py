"""Taxonomía de errores de la consola.

Por qué una jerarquía propia:
- Los adaptadores traducen excepciones de httpx una sola vez, en el borde REST.
- Controller, dispatcher y CLI solo conocen estos tipos y su `message`
  legible para el operador.
"""

from __future__ import annotations


class AdminConsoleError(Exception):
    """Base de todos los errores visibles para el operador."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(AdminConsoleError):
    """La petición no llegó a completarse (red, timeout, DNS...)."""


class DomainRejectedError(AdminConsoleError):
    """El backend respondió con un error estructurado (status >= 400)."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(DomainRejectedError):
    """Respuesta 401. La sesión ya fue cerrada por el hook del cliente HTTP."""

    def __init__(self, message: str = "Session expired. Please log in again.") -> None:
        super().__init__(message, status_code=401)


class ComplaintDetailNotFoundError(DomainRejectedError):
    """El detalle de una queja no existe para el tipo de servicio pedido."""


class InputValidationError(AdminConsoleError):
    """Validación en cliente (fast-fail) antes de tocar la red."""


class ActionInProgressError(AdminConsoleError):
    """Ya hay una mutación en vuelo con la misma clave."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Action '{key}' is already in progress")
        self.key = key


class NotAuthenticatedError(AdminConsoleError):
    """Se intentó usar una pantalla protegida sin sesión."""

    def __init__(self, message: str = "Not logged in. Run `astro-admin login` first.") -> None:
        super().__init__(message)


class UnknownRouteError(AdminConsoleError):
    """Ruta de navegación inexistente."""


class AuthenticationFailedError(AdminConsoleError):
    """El backend rechazó las credenciales o no devolvió token."""
