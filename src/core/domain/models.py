"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- El backend habla camelCase; los alias mantienen el código en snake_case.

Nota:
- Estos modelos describen *qué* devuelve el backend, no *cómo* se obtiene.
- Los registros ignoran campos desconocidos: el backend evoluciona sin avisar.
"""

from __future__ import annotations

import datetime as dt
import json
import math
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.domain.errors import InputValidationError

T = TypeVar("T")

_RECORD_CONFIG = ConfigDict(extra="ignore", populate_by_name=True)


class PageRequest(BaseModel):
    """Parámetros de una petición paginada.

    Invariantes:
    - `page` y `limit` siempre positivos.
    - Cambiar filtros o `limit` vuelve a la página 1.
    """

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, gt=0)
    filters: dict[str, str | None] = Field(default_factory=dict)
    sort: str | None = None

    def with_page(self, page: int) -> PageRequest:
        if page < 1:
            raise InputValidationError(f"Page must be >= 1 (got {page})")
        return self.model_copy(update={"page": page})

    def with_limit(self, limit: int) -> PageRequest:
        if limit < 1:
            raise InputValidationError(f"Limit must be > 0 (got {limit})")
        return self.model_copy(update={"limit": limit, "page": 1})

    def with_filters(self, patch: dict[str, str | None]) -> PageRequest:
        merged = {**self.filters, **patch}
        return self.model_copy(update={"filters": merged, "page": 1})

    def with_sort(self, sort: str | None) -> PageRequest:
        return self.model_copy(update={"sort": sort, "page": 1})

    def to_query(self) -> dict[str, str | int]:
        """Query string para `GET /admin/{resource}` (omite filtros vacíos)."""

        query: dict[str, str | int] = {"page": self.page, "limit": self.limit}
        for key, value in self.filters.items():
            if value is None or value == "":
                continue
            query[key] = value
        if self.sort:
            query["sort"] = self.sort
        return query


class PageResult(BaseModel, Generic[T]):
    """Una página de resultados tal como la produce el backend.

    Invariante: `total_pages = ceil(total / limit)` y `len(items) <= limit`.
    Una página vacía (fuera de rango) es un resultado válido, no un error.
    """

    items: list[T] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, gt=0)
    total_pages: int = Field(default=0, ge=0)

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        *,
        request: PageRequest,
        item_model: type[BaseModel],
    ) -> PageResult:
        """Construye la página a partir de `{data: [...], pagination: {...}}`.

        Si falta `pagination` se deriva de la petición y de los items.
        """

        raw_items = payload.get("data") or []
        items = [item_model.model_validate(item) for item in raw_items if isinstance(item, dict)]

        pagination = payload.get("pagination")
        if not isinstance(pagination, dict):
            pagination = {}

        limit = int(pagination.get("limit") or request.limit)
        page = int(pagination.get("page") or request.page)
        total = int(pagination.get("total", len(items)) or 0)
        total_pages = pagination.get("totalPages")
        if total_pages is None:
            total_pages = math.ceil(total / limit)

        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=int(total_pages),
        )

    @property
    def is_empty(self) -> bool:
        return not self.items

    def has_next(self) -> bool:
        return self.page < self.total_pages

    def has_prev(self) -> bool:
        return self.page > 1

    def first_index(self) -> int:
        """Índice 1-based del primer item mostrado (0 si la página está vacía)."""

        if self.is_empty:
            return 0
        return (self.page - 1) * self.limit + 1

    def last_index(self) -> int:
        return min(self.page * self.limit, self.total) if not self.is_empty else 0


class RecordStatus(str, Enum):
    """Estado de cuenta de usuarios y astrólogos."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Visibility(str, Enum):
    """Visibilidad del perfil de un astrólogo en la app."""

    VISIBLE = "visible"
    HIDDEN = "hidden"


class UserRecord(BaseModel):
    model_config = _RECORD_CONFIG

    user_id: str = Field(..., alias="userId", min_length=1)
    name: str | None = None
    email: str | None = None
    mobile: str | None = None
    status: str = Field(default=RecordStatus.ACTIVE.value)
    created_on: str | None = Field(default=None, alias="createdOn")

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE.value


class Astrologer(BaseModel):
    """Proveedor del servicio. Estado y visibilidad son dimensiones independientes."""

    model_config = _RECORD_CONFIG

    astro_id: str = Field(..., alias="astroId", min_length=1)
    name: str | None = None
    status: str = Field(default=RecordStatus.ACTIVE.value)
    visible: str = Field(default=Visibility.VISIBLE.value)

    @field_validator("astro_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE.value

    @property
    def is_visible(self) -> bool:
        return self.visible == Visibility.VISIBLE.value


class ServiceComplaint(BaseModel):
    """Queja ligada a un pedido concreto (chat / llamada / videollamada)."""

    model_config = _RECORD_CONFIG

    order_id: str = Field(..., alias="orderId", min_length=1)
    service_type: str | None = Field(default=None, alias="serviceType")
    user_id: str | None = Field(default=None, alias="userId")
    user_name: str | None = Field(default=None, alias="userName")
    astro_id: str | None = Field(default=None, alias="astroId")
    astro_name: str | None = Field(default=None, alias="astroName")
    status: str = "open"
    created_on: str | None = Field(default=None, alias="createdOn")

    @field_validator("order_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @property
    def is_open(self) -> bool:
        return self.status == "open"


class ConversationMessage(BaseModel):
    model_config = _RECORD_CONFIG

    # El backend escribe "isAstrolger".
    from_astrologer: bool = Field(default=False, alias="isAstrolger")
    timestamp: str | None = None
    message: dict[str, Any] | str | None = None

    @property
    def sender(self) -> str:
        return "Astrologer" if self.from_astrologer else "User"

    @property
    def text(self) -> str:
        if self.message is None:
            return ""
        if isinstance(self.message, str):
            return self.message
        text = self.message.get("text")
        if isinstance(text, str):
            return text
        return json.dumps(self.message, ensure_ascii=False)


class StatusEntry(BaseModel):
    model_config = _RECORD_CONFIG

    type: str
    created_on: str | None = Field(default=None, alias="createdOn")


class ComplaintDetail(BaseModel):
    """Registro completo de una queja de servicio (conversación + historial)."""

    model_config = _RECORD_CONFIG

    order_id: str | None = Field(default=None, alias="orderId")
    service_type: str | None = Field(default=None, alias="serviceType")
    last_status: str | None = Field(default=None, alias="lastStatus")
    rate_per_minute: float | None = Field(default=None, alias="ratePerMintue")
    payment_received: float | None = Field(default=None, alias="paymentReceived")
    url: str | None = None
    created_on: str | None = Field(default=None, alias="createdOn")
    updated_on: str | None = Field(default=None, alias="updatedOn")
    conversation: list[ConversationMessage] = Field(default_factory=list)
    status_history: list[StatusEntry] = Field(default_factory=list, alias="status")
    raw: dict[str, Any] = Field(
        default_factory=dict,
        description="Carga útil cruda para auditoría/depuración.",
    )

    @field_validator("status_history", "conversation", mode="before")
    @classmethod
    def _only_lists(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ComplaintDetail:
        body = payload.get("data") if isinstance(payload.get("data"), dict) else payload
        detail = cls.model_validate(body)
        detail.raw = body
        return detail

    @property
    def current_status(self) -> str:
        if self.last_status:
            return self.last_status
        if self.status_history:
            return self.status_history[-1].type
        return "N/A"


class ComplaintDecision(BaseModel):
    """Cuerpo de `PATCH /admin/user-service-complaints/{orderId}`."""

    model_config = ConfigDict(populate_by_name=True)

    action: Literal["accept", "reject"]
    reason: str = Field(..., min_length=1)
    user_refund_money: int = Field(default=0, ge=0, alias="userRefundMoney")
    astro_refund_money: int = Field(default=0, ge=0, alias="astroRefundMoney")


class ComplaintOwner(str, Enum):
    """Quién presenta una queja general."""

    USER = "user"
    ASTRO = "astro"

    @property
    def resource(self) -> str:
        return f"{self.value}-general-complaints"


class GeneralComplaint(BaseModel):
    """Queja general (sin pedido) de un usuario o de un astrólogo."""

    model_config = _RECORD_CONFIG

    problem_id: str = Field(..., alias="problemId", min_length=1)
    user_id: str | None = Field(default=None, alias="userId")
    user_name: str | None = Field(default=None, alias="userName")
    astro_id: str | None = Field(default=None, alias="astroId")
    astro_name: str | None = Field(default=None, alias="astroName")
    problem_type: str | None = Field(default=None, alias="problemType")
    description: str | None = None
    status: str = "open"
    created_on: str | None = Field(default=None, alias="createdOn")

    @field_validator("problem_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @property
    def is_open(self) -> bool:
        return self.status == "open"

    @property
    def owner_id(self) -> str | None:
        return self.user_id or self.astro_id

    @property
    def owner_name(self) -> str | None:
        return self.user_name or self.astro_name


class Horoscope(BaseModel):
    model_config = _RECORD_CONFIG

    horoscope_id: str = Field(..., alias="horoscopeId", min_length=1)
    sign_name: str = Field(..., alias="signName")
    description: str = ""
    date: str | None = None
    # El backend escribe "isAsctive".
    is_active: int = Field(default=1, alias="isAsctive")

    @field_validator("horoscope_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class HoroscopeInput(BaseModel):
    """Horóscopo a crear/editar (formulario o fichero bulk)."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    sign_name: str = Field(..., alias="signName", min_length=1)
    description: str = Field(..., min_length=1)
    date: dt.date
    is_active: int = Field(default=1, alias="isAsctive", ge=0, le=1)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Feedback(BaseModel):
    """Feedback de un cliente sobre un astrólogo (subida bulk)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    feedback_id: str = Field(..., alias="feedbackId", min_length=1)
    astro_id: str = Field(..., alias="astroId", min_length=1)
    name: str = Field(..., min_length=1)
    comment: str = ""
    rating: int = Field(..., ge=1, le=5)
    profile_pic: str = Field(default="", alias="profilePic")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ReportFile(BaseModel):
    model_config = _RECORD_CONFIG

    collection: str
    file_name: str = Field(..., alias="fileName", min_length=1)


class ReportGeneration(BaseModel):
    model_config = _RECORD_CONFIG

    message: str = "Reports generated successfully"
    files: list[ReportFile] = Field(default_factory=list)


class ServiceCounters(BaseModel):
    model_config = _RECORD_CONFIG

    failed: int = 0
    request: int = 0
    complete: int = 0
    issue: int = 0
    reject: int = 0
    total: int = 0


class DashboardMetrics(BaseModel):
    """Métricas diarias por tipo de servicio."""

    model_config = _RECORD_CONFIG

    date: str = ""
    chat: ServiceCounters = Field(default_factory=ServiceCounters)
    ivr_call: ServiceCounters = Field(default_factory=ServiceCounters, alias="ivrCall")
    video_call: ServiceCounters = Field(default_factory=ServiceCounters, alias="videoCall")

    @field_validator("chat", "ivr_call", "video_call", mode="before")
    @classmethod
    def _null_counters(cls, value: Any) -> Any:
        # Servicio sin actividad en el día => contadores a cero.
        return {} if value is None else value


class LoginResponse(BaseModel):
    model_config = _RECORD_CONFIG

    success: bool = False
    token: str | None = None
    message: str | None = None
