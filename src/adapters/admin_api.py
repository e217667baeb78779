"""Adaptador del backend REST de administración.

Responsabilidad:
- Traducir cada operación del backend a una llamada httpx.
- Normalizar respuestas como modelos del dominio (`PageResult`, registros...).
- Traducir fallos de transporte y respuestas de error a la taxonomía de
  `core.domain.errors`. Es el único sitio donde se capturan excepciones httpx.

No valida reglas de negocio: eso vive detrás del API (el servidor es la
autoridad) y las validaciones rápidas en `core.services.moderation`.
"""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Any, Callable, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from core.domain.errors import (
    ComplaintDetailNotFoundError,
    DomainRejectedError,
    TransportError,
    UnauthorizedError,
)
from core.domain.models import (
    ComplaintDecision,
    ComplaintDetail,
    ComplaintOwner,
    DashboardMetrics,
    LoginResponse,
    PageRequest,
    PageResult,
    ReportGeneration,
)
from core.domain.service_types import to_detail_service_type
from adapters.http_client import extract_error_message

logger = logging.getLogger(__name__)

_SERVICE_TYPE_MISMATCH = "serviceType mismatch"

T = TypeVar("T")


def _segment(value: object) -> str:
    return quote(str(value), safe="")


class AdminApiClient:
    """Cliente tipado del API `/admin/*`.

    Se construye sobre un `httpx.AsyncClient` ya configurado (ver
    `adapters.http_client.build_async_client`), que aporta base URL, token y
    el hook de 401.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def __aenter__(self) -> AdminApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------ core

    def _error_for(self, response: httpx.Response, fallback: str) -> DomainRejectedError:
        if response.status_code == 401:
            message = extract_error_message(response, "")
            return UnauthorizedError(message) if message else UnauthorizedError()
        message = extract_error_message(response, fallback)
        return DomainRejectedError(message, status_code=response.status_code)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fallback: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Request failed", extra={"method": method, "path": path, "error": type(exc).__name__})
            raise TransportError(f"{fallback} ({str(exc) or type(exc).__name__})") from exc

        logger.debug("Request done", extra={"method": method, "path": path, "status": response.status_code})
        if response.status_code >= 400:
            raise self._error_for(response, fallback)
        return response

    async def _json(self, method: str, path: str, *, fallback: str, **kwargs: Any) -> Any:
        response = await self._request(method, path, fallback=fallback, **kwargs)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise DomainRejectedError(
                f"{fallback} (invalid JSON response)", status_code=response.status_code
            ) from exc

    @staticmethod
    def _parse(parse: Callable[[], T], what: str) -> T:
        try:
            return parse()
        except ValidationError as exc:
            raise DomainRejectedError(
                f"Unexpected {what} response ({exc.error_count()} invalid fields)",
                status_code=200,
            ) from exc

    # ------------------------------------------------------------------ auth

    async def login(self, username: str, password: str) -> LoginResponse:
        data = await self._json(
            "POST",
            "/admin/login",
            json={"username": username, "password": password},
            fallback="Login failed. Please try again.",
        )
        return self._parse(
            lambda: LoginResponse.model_validate(data if isinstance(data, dict) else {}),
            "login",
        )

    # --------------------------------------------------------------- listing

    async def list_page(
        self,
        resource: str,
        request: PageRequest,
        item_model: type[BaseModel],
    ) -> PageResult:
        data = await self._json(
            "GET",
            f"/admin/{resource}",
            params=request.to_query(),
            fallback=f"Failed to fetch {resource}",
        )
        return self._parse(
            lambda: PageResult.from_payload(
                data if isinstance(data, dict) else {},
                request=request,
                item_model=item_model,
            ),
            resource,
        )

    # ------------------------------------------------------------- mutations

    async def patch_record(
        self,
        resource: str,
        record_id: str,
        field: str,
        payload: dict[str, Any],
        *,
        fallback: str,
    ) -> Any:
        """`PATCH /admin/{resource}/{id}/{field}`; devuelve el registro actualizado."""

        return await self._json(
            "PATCH",
            f"/admin/{resource}/{_segment(record_id)}/{field}",
            json=payload,
            fallback=fallback,
        )

    async def update_user_status(self, user_id: str, status: str) -> Any:
        return await self.patch_record(
            "users", user_id, "deactivate", {"status": status},
            fallback="Failed to update user status",
        )

    async def update_astro_status(self, astro_id: str, status: str) -> Any:
        return await self.patch_record(
            "astros", astro_id, "status", {"status": status},
            fallback="Failed to update astrologer status",
        )

    async def set_astro_visibility(self, astro_id: str, visible: bool) -> Any:
        return await self.patch_record(
            "astros", astro_id, "visibility", {"visible": visible},
            fallback="Failed to update visibility",
        )

    async def decide_service_complaint(self, order_id: str, decision: ComplaintDecision) -> Any:
        return await self._json(
            "PATCH",
            f"/admin/user-service-complaints/{_segment(order_id)}",
            json=decision.model_dump(by_alias=True),
            fallback=f"Failed to {decision.action} complaint",
        )

    async def close_general_complaint(self, owner: ComplaintOwner, problem_id: str, reason: str) -> Any:
        return await self.patch_record(
            owner.resource, problem_id, "close", {"reason": reason},
            fallback="Failed to close complaint",
        )

    async def update_horoscope(self, horoscope_id: str, payload: dict[str, Any]) -> Any:
        return await self._json(
            "PATCH",
            f"/admin/horoscopes/{_segment(horoscope_id)}",
            json=payload,
            fallback="Failed to save horoscope",
        )

    async def delete_horoscope(self, horoscope_id: str) -> Any:
        return await self._json(
            "DELETE",
            f"/admin/horoscopes/{_segment(horoscope_id)}",
            fallback="Failed to delete horoscope",
        )

    async def bulk_create(self, resource: str, records: list[dict[str, Any]]) -> str:
        """`POST /admin/{resource}/bulk`; devuelve el mensaje del backend."""

        data = await self._json(
            "POST",
            f"/admin/{resource}/bulk",
            json=records,
            fallback=f"Failed to upload {resource}",
        )
        message = data.get("message") if isinstance(data, dict) else None
        return message or f"Uploaded {len(records)} {resource}"

    # --------------------------------------------------------------- details

    async def complaint_detail(self, service_type: str | None, order_id: str) -> ComplaintDetail:
        api_service_type = to_detail_service_type(service_type)
        try:
            data = await self._json(
                "GET",
                f"/admin/user-service-complaints/{_segment(api_service_type)}/{_segment(order_id)}",
                fallback="Failed to fetch complaint details",
            )
        except DomainRejectedError as exc:
            if _SERVICE_TYPE_MISMATCH in exc.message:
                raise ComplaintDetailNotFoundError(
                    "no url found for this orderId", status_code=exc.status_code
                ) from exc
            raise
        return self._parse(
            lambda: ComplaintDetail.from_payload(data if isinstance(data, dict) else {}),
            "complaint detail",
        )

    async def dashboard_metrics(self) -> DashboardMetrics:
        data = await self._json("GET", "/admin/dashboard/metrics", fallback="Failed to fetch dashboard metrics")
        if isinstance(data, dict) and data.get("success") and isinstance(data.get("data"), dict):
            return self._parse(lambda: DashboardMetrics.model_validate(data["data"]), "dashboard metrics")
        return DashboardMetrics()

    # --------------------------------------------------------------- reports

    async def generate_reports(self, start_date: dt.date, end_date: dt.date) -> ReportGeneration:
        data = await self._json(
            "POST",
            "/admin/scheduler/generate",
            json={"startDate": start_date.isoformat(), "endDate": end_date.isoformat()},
            fallback="Failed to generate reports. Please try again.",
        )
        return self._parse(
            lambda: ReportGeneration.model_validate(data if isinstance(data, dict) else {}),
            "report generation",
        )

    async def trigger_scheduler(self) -> str:
        data = await self._json("POST", "/admin/scheduler/trigger", fallback="Failed to trigger scheduler")
        message = data.get("message") if isinstance(data, dict) else None
        return message or "Scheduler triggered"

    async def download_report(self, file_name: str, destination: Path) -> Path:
        """Descarga un CSV en streaming hasta `destination`.

        Se escribe en `<destination>.part` y solo se renombra al terminar: una
        descarga cortada no deja un CSV truncado con el nombre final.
        """

        fallback = "Failed to download file. Please try again."
        path = f"/admin/scheduler/download/{_segment(file_name)}"
        partial = destination.with_name(destination.name + ".part")
        try:
            async with self._client.stream("GET", path) as response:
                if response.status_code >= 400:
                    await response.aread()
                    raise self._error_for(response, fallback)
                destination.parent.mkdir(parents=True, exist_ok=True)
                with partial.open("wb") as fh:
                    async for chunk in response.aiter_bytes():
                        fh.write(chunk)
            partial.replace(destination)
        except httpx.HTTPError as exc:
            raise TransportError(f"{fallback} ({str(exc) or type(exc).__name__})") from exc
        finally:
            partial.unlink(missing_ok=True)
        logger.info("Report downloaded", extra={"file": file_name})
        return destination
