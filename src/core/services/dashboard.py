"""Dashboard overview: daily service metrics plus global counters.

The six backend calls are independent and run concurrently.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from adapters.admin_api import AdminApiClient
from core.domain.models import DashboardMetrics, PageRequest
from core.services.screens import (
    ASTRO_GENERAL_COMPLAINTS,
    ASTROS,
    SERVICE_COMPLAINTS,
    USER_GENERAL_COMPLAINTS,
    USERS,
    ScreenDefinition,
)


@dataclass
class DashboardOverview:
    metrics: DashboardMetrics
    users: int
    astros: int
    service_complaints: int
    user_general_complaints: int
    astro_general_complaints: int


async def _count(api: AdminApiClient, screen: ScreenDefinition) -> int:
    page = await api.list_page(screen.resource, PageRequest(page=1, limit=1), screen.item_model)
    return page.total


async def load_overview(api: AdminApiClient) -> DashboardOverview:
    metrics, users, astros, service, user_general, astro_general = await asyncio.gather(
        api.dashboard_metrics(),
        _count(api, USERS),
        _count(api, ASTROS),
        _count(api, SERVICE_COMPLAINTS),
        _count(api, USER_GENERAL_COMPLAINTS),
        _count(api, ASTRO_GENERAL_COMPLAINTS),
    )
    return DashboardOverview(
        metrics=metrics,
        users=users,
        astros=astros,
        service_complaints=service,
        user_general_complaints=user_general,
        astro_general_complaints=astro_general,
    )
