"""Moderation actions.

Each action validates its input client-side (fast-fail, before the
dispatcher is touched) and then runs the backend mutation through the
`ActionDispatcher` under a per-record key. The server stays authoritative
for every business rule; these checks only avoid pointless round trips.
"""

from __future__ import annotations

import logging
from typing import Any

from adapters.admin_api import AdminApiClient
from core.domain.errors import InputValidationError
from core.domain.models import (
    Astrologer,
    ComplaintDecision,
    ComplaintOwner,
    Feedback,
    GeneralComplaint,
    HoroscopeInput,
    RecordStatus,
    ServiceComplaint,
    UserRecord,
)
from core.services.actions import ActionDispatcher, SuccessCallback, action_key

logger = logging.getLogger(__name__)


def validate_reason(reason: str | None) -> str:
    cleaned = (reason or "").strip()
    if not cleaned:
        raise InputValidationError("Reason is required")
    return cleaned


def validate_refund(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputValidationError(f"{label} must be a whole number")
    if value < 0:
        raise InputValidationError("Refund amounts cannot be negative")
    return value


def ensure_open(complaint: ServiceComplaint | GeneralComplaint) -> str:
    """Return the complaint id, or fail when it is no longer open.

    Decisions (accept, reject, close) only apply to open complaints.
    """

    complaint_id = complaint.order_id if isinstance(complaint, ServiceComplaint) else complaint.problem_id
    if not complaint.is_open:
        raise InputValidationError(f"Complaint {complaint_id} is already {complaint.status}")
    return complaint_id


def _order_id(complaint: ServiceComplaint | str) -> str:
    return ensure_open(complaint) if isinstance(complaint, ServiceComplaint) else complaint


class ModerationService:
    def __init__(self, api: AdminApiClient, dispatcher: ActionDispatcher | None = None) -> None:
        self._api = api
        self.dispatcher = dispatcher or ActionDispatcher()

    # ---------------------------------------------------------- accounts

    async def set_user_status(
        self,
        user_id: str,
        status: RecordStatus,
        *,
        on_success: SuccessCallback | None = None,
    ) -> RecordStatus:
        await self.dispatcher.run(
            action_key("status", user_id),
            lambda: self._api.update_user_status(user_id, status.value),
            on_success=on_success,
        )
        return status

    async def set_astro_status(
        self,
        astro_id: str,
        status: RecordStatus,
        *,
        on_success: SuccessCallback | None = None,
    ) -> RecordStatus:
        await self.dispatcher.run(
            action_key("status", astro_id),
            lambda: self._api.update_astro_status(astro_id, status.value),
            on_success=on_success,
        )
        return status

    async def set_astro_visibility(
        self,
        astro_id: str,
        visible: bool,
        *,
        on_success: SuccessCallback | None = None,
    ) -> bool:
        await self.dispatcher.run(
            action_key("visibility", astro_id),
            lambda: self._api.set_astro_visibility(astro_id, visible),
            on_success=on_success,
        )
        return visible

    async def toggle_user_status(
        self,
        user: UserRecord,
        *,
        on_success: SuccessCallback | None = None,
    ) -> RecordStatus:
        new_status = RecordStatus.INACTIVE if user.is_active else RecordStatus.ACTIVE
        return await self.set_user_status(user.user_id, new_status, on_success=on_success)

    async def toggle_astro_status(
        self,
        astro: Astrologer,
        *,
        on_success: SuccessCallback | None = None,
    ) -> RecordStatus:
        new_status = RecordStatus.INACTIVE if astro.is_active else RecordStatus.ACTIVE
        return await self.set_astro_status(astro.astro_id, new_status, on_success=on_success)

    async def toggle_astro_visibility(
        self,
        astro: Astrologer,
        *,
        on_success: SuccessCallback | None = None,
    ) -> bool:
        return await self.set_astro_visibility(astro.astro_id, not astro.is_visible, on_success=on_success)

    # -------------------------------------------------------- complaints

    async def accept_complaint(
        self,
        complaint: ServiceComplaint | str,
        *,
        reason: str | None,
        user_refund_money: Any = 0,
        astro_refund_money: Any = 0,
        on_success: SuccessCallback | None = None,
    ) -> Any:
        order_id = _order_id(complaint)
        decision = ComplaintDecision(
            action="accept",
            user_refund_money=validate_refund(user_refund_money, "User refund"),
            astro_refund_money=validate_refund(astro_refund_money, "Astrologer refund"),
            reason=validate_reason(reason),
        )
        return await self._decide(order_id, decision, on_success)

    async def reject_complaint(
        self,
        complaint: ServiceComplaint | str,
        *,
        reason: str | None,
        on_success: SuccessCallback | None = None,
    ) -> Any:
        order_id = _order_id(complaint)
        decision = ComplaintDecision(action="reject", reason=validate_reason(reason))
        return await self._decide(order_id, decision, on_success)

    async def _decide(
        self,
        order_id: str,
        decision: ComplaintDecision,
        on_success: SuccessCallback | None,
    ) -> Any:
        return await self.dispatcher.run(
            action_key("complaint", order_id),
            lambda: self._api.decide_service_complaint(order_id, decision),
            on_success=on_success,
        )

    async def close_general_complaint(
        self,
        owner: ComplaintOwner,
        complaint: GeneralComplaint | str,
        *,
        reason: str | None,
        on_success: SuccessCallback | None = None,
    ) -> Any:
        """Close an open general complaint (one-way, there is no reopen)."""

        problem_id = ensure_open(complaint) if isinstance(complaint, GeneralComplaint) else complaint
        cleaned = validate_reason(reason)
        return await self.dispatcher.run(
            action_key("close", problem_id),
            lambda: self._api.close_general_complaint(owner, problem_id, cleaned),
            on_success=on_success,
        )

    # ------------------------------------------------------------ content

    async def update_horoscope(
        self,
        horoscope_id: str,
        data: HoroscopeInput,
        *,
        on_success: SuccessCallback | None = None,
    ) -> Any:
        return await self.dispatcher.run(
            action_key("horoscope", horoscope_id),
            lambda: self._api.update_horoscope(horoscope_id, data.to_payload()),
            on_success=on_success,
        )

    async def delete_horoscope(
        self,
        horoscope_id: str,
        *,
        on_success: SuccessCallback | None = None,
    ) -> Any:
        return await self.dispatcher.run(
            action_key("horoscope", horoscope_id),
            lambda: self._api.delete_horoscope(horoscope_id),
            on_success=on_success,
        )

    async def create_horoscopes(
        self,
        horoscopes: list[HoroscopeInput],
        *,
        on_success: SuccessCallback | None = None,
    ) -> str:
        if not horoscopes:
            raise InputValidationError("No horoscopes to upload")
        return await self.dispatcher.run(
            "bulk-horoscopes",
            lambda: self._api.bulk_create("horoscopes", [h.to_payload() for h in horoscopes]),
            on_success=on_success,
        )

    async def upload_feedbacks(self, feedbacks: list[Feedback]) -> str:
        if not feedbacks:
            raise InputValidationError("Please provide feedback data.")
        logger.info("Uploading feedbacks", extra={"count": len(feedbacks)})
        return await self.dispatcher.run(
            "bulk-feedbacks",
            lambda: self._api.bulk_create("feedbacks", [f.to_payload() for f in feedbacks]),
        )
