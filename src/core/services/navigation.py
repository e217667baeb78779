"""Route table and navigation guard.

Every console section is a route. Protected routes never resolve while the
session is anonymous: they resolve to the login entry point instead, and a
session teardown moves the navigator there immediately.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from core.domain.errors import UnknownRouteError
from core.services.session import SessionGuard

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


@dataclass(frozen=True)
class Route:
    path: str
    label: str
    protected: bool = True


ROUTES: tuple[Route, ...] = (
    Route(LOGIN_PATH, "Login", protected=False),
    Route(HOME_PATH, "Dashboard"),
    Route("/users", "Users"),
    Route("/astros", "Astrologers"),
    Route("/user-service-complaints", "User Service Complaints"),
    Route("/user-general-complaints", "User General Complaints"),
    Route("/astro-general-complaints", "Astro General Complaints"),
    Route("/horoscopes", "Horoscopes"),
    Route("/feedbacks", "Bulk Upload Feedbacks"),
    Route("/scheduler", "Scheduler"),
)

_ALIASES: dict[str, str] = {"/": HOME_PATH}


@dataclass
class Navigator:
    guard: SessionGuard
    routes: Iterable[Route] = ROUTES
    current: str = LOGIN_PATH
    history: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._table = {route.path: route for route in self.routes}
        self.guard.add_anonymous_listener(self._on_anonymous)
        self.current = HOME_PATH if self.guard.is_authenticated else LOGIN_PATH

    def resolve(self, path: str) -> Route:
        """Return the route that would render for `path` right now."""

        target = _ALIASES.get(path, path)
        route = self._table.get(target)
        if route is None:
            raise UnknownRouteError(f"Unknown route: {path}")
        if route.protected and not self.guard.is_authenticated:
            return self._table[LOGIN_PATH]
        return route

    def go(self, path: str) -> Route:
        route = self.resolve(path)
        self.current = route.path
        self.history.append(route.path)
        return route

    def menu(self) -> list[Route]:
        """Sidebar entries (protected routes only)."""

        return [route for route in self._table.values() if route.protected]

    def _on_anonymous(self, reason: str) -> None:
        self.go(LOGIN_PATH)
