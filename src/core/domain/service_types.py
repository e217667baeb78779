"""Service types for consultation orders.

The complaint list endpoint reports `chat`, `call` and `video`, while the
complaint detail endpoint expects `chat`, `ivrCall` and `videoCall`. The
mapping is kept as an explicit lookup table instead of being inferred.
"""

from __future__ import annotations

from enum import Enum


class ServiceType(str, Enum):
    """Service type identifiers as reported by the complaint list endpoint."""

    CHAT = "chat"
    CALL = "call"
    VIDEO = "video"

    def label(self) -> str:
        """Human readable label for tables."""

        return {"chat": "Chat", "call": "Voice call", "video": "Video call"}[self.value]


DETAIL_SERVICE_TYPES: dict[str, str] = {
    "chat": "chat",
    "call": "ivrCall",
    "video": "videoCall",
}

# Claves que usa el endpoint de métricas del dashboard.
METRIC_SERVICE_TYPES: tuple[str, ...] = ("chat", "ivrCall", "videoCall")


def to_detail_service_type(service_type: str | None) -> str:
    """Translate a list-endpoint service type into the detail-endpoint name.

    Missing values default to `chat`; unknown values pass through lower-cased.
    """

    if not service_type:
        return DETAIL_SERVICE_TYPES["chat"]
    normalized = service_type.strip().lower()
    return DETAIL_SERVICE_TYPES.get(normalized, normalized)
