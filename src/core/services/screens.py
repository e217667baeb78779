"""List screens.

Each console list screen is just data: which resource it lists, how items
are typed and what the default request looks like. `open_screen` wires one
`ResourceListController` to the REST adapter for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel

from adapters.admin_api import AdminApiClient
from core.domain.models import (
    Astrologer,
    ComplaintOwner,
    GeneralComplaint,
    Horoscope,
    PageRequest,
    PageResult,
    ServiceComplaint,
    UserRecord,
)
from core.interfaces.fetcher import PageFetcher
from core.services.resource_list import ResourceListController


@dataclass(frozen=True)
class ScreenDefinition:
    name: str
    route: str
    resource: str
    title: str
    item_model: type[BaseModel]
    default_filters: dict[str, str | None] = field(default_factory=dict)
    default_sort: str | None = None
    empty_message: str = "No records found"

    def initial_request(self, limit: int = 10) -> PageRequest:
        return PageRequest(
            page=1,
            limit=limit,
            filters=dict(self.default_filters),
            sort=self.default_sort,
        )


USERS = ScreenDefinition(
    name="users",
    route="/users",
    resource="users",
    title="Users",
    item_model=UserRecord,
    empty_message="No users found",
)
ASTROS = ScreenDefinition(
    name="astros",
    route="/astros",
    resource="astros",
    title="Astrologers Management",
    item_model=Astrologer,
    default_filters={"name": None},
    default_sort="asc",
    empty_message="No astrologers found",
)
SERVICE_COMPLAINTS = ScreenDefinition(
    name="service-complaints",
    route="/user-service-complaints",
    resource="user-service-complaints",
    title="User Service Complaints",
    item_model=ServiceComplaint,
    default_filters={"serviceType": None, "status": None},
    empty_message="No complaints found",
)
USER_GENERAL_COMPLAINTS = ScreenDefinition(
    name="user-general-complaints",
    route="/user-general-complaints",
    resource=ComplaintOwner.USER.resource,
    title="User General Complaints",
    item_model=GeneralComplaint,
    empty_message="No complaints found",
)
ASTRO_GENERAL_COMPLAINTS = ScreenDefinition(
    name="astro-general-complaints",
    route="/astro-general-complaints",
    resource=ComplaintOwner.ASTRO.resource,
    title="Astro General Complaints",
    item_model=GeneralComplaint,
    empty_message="No complaints found",
)
HOROSCOPES = ScreenDefinition(
    name="horoscopes",
    route="/horoscopes",
    resource="horoscopes",
    title="Horoscopes Management",
    item_model=Horoscope,
    empty_message="No horoscopes found",
)

SCREENS: dict[str, ScreenDefinition] = {
    screen.name: screen
    for screen in (
        USERS,
        ASTROS,
        SERVICE_COMPLAINTS,
        USER_GENERAL_COMPLAINTS,
        ASTRO_GENERAL_COMPLAINTS,
        HOROSCOPES,
    )
}


def general_complaints_screen(owner: ComplaintOwner) -> ScreenDefinition:
    return USER_GENERAL_COMPLAINTS if owner is ComplaintOwner.USER else ASTRO_GENERAL_COMPLAINTS


def make_fetcher(api: AdminApiClient, screen: ScreenDefinition) -> PageFetcher:
    async def fetch(request: PageRequest) -> PageResult:
        return await api.list_page(screen.resource, request, screen.item_model)

    return fetch


def open_screen(
    api: AdminApiClient,
    screen: ScreenDefinition,
    *,
    limit: int = 10,
    request: PageRequest | None = None,
) -> ResourceListController:
    return ResourceListController(
        make_fetcher(api, screen),
        request or screen.initial_request(limit),
        name=screen.name,
    )
