"""
Domain model tests: paging arithmetic, wire aliases and payload shapes.
"""

from __future__ import annotations

import datetime as dt

import pytest
from pydantic import ValidationError

from core.domain.errors import InputValidationError
from core.domain.models import (
    Astrologer,
    ComplaintDecision,
    ComplaintDetail,
    ComplaintOwner,
    DashboardMetrics,
    GeneralComplaint,
    Horoscope,
    HoroscopeInput,
    PageRequest,
    PageResult,
    UserRecord,
)
from core.domain.service_types import ServiceType, to_detail_service_type


class TestPageRequest:
    def test_filters_reset_page(self):
        request = PageRequest(page=3, limit=10)
        updated = request.with_filters({"status": "open"})
        assert updated.page == 1
        assert updated.filters == {"status": "open"}
        assert request.page == 3

    def test_limit_resets_page(self):
        assert PageRequest(page=5, limit=10).with_limit(25).page == 1

    def test_sort_resets_page(self):
        assert PageRequest(page=2).with_sort("desc").page == 1

    def test_with_page_keeps_filters(self):
        request = PageRequest(filters={"name": "ana"}).with_page(4)
        assert request.page == 4
        assert request.filters == {"name": "ana"}

    @pytest.mark.parametrize("page", [0, -1])
    def test_with_page_rejects_non_positive(self, page):
        with pytest.raises(InputValidationError):
            PageRequest().with_page(page)

    def test_with_limit_rejects_zero(self):
        with pytest.raises(InputValidationError):
            PageRequest().with_limit(0)

    def test_query_omits_empty_filters(self):
        request = PageRequest(
            page=2,
            limit=25,
            filters={"serviceType": "chat", "status": None, "name": ""},
            sort="asc",
        )
        assert request.to_query() == {"page": 2, "limit": 25, "serviceType": "chat", "sort": "asc"}

    def test_filters_merge(self):
        request = PageRequest().with_filters({"a": "1"}).with_filters({"b": "2", "a": None})
        assert request.filters == {"a": None, "b": "2"}


class TestPageResult:
    def test_total_pages_rounds_up(self):
        payload = {"data": [{"userId": str(i)} for i in range(10)], "pagination": {"total": 25}}
        page = PageResult.from_payload(payload, request=PageRequest(limit=10), item_model=UserRecord)
        assert page.total_pages == 3
        assert page.has_next()
        assert not page.has_prev()
        assert (page.first_index(), page.last_index()) == (1, 10)

    def test_page_beyond_range_is_empty_not_error(self):
        payload = {"data": [], "pagination": {"total": 25, "page": 4, "limit": 10}}
        page = PageResult.from_payload(payload, request=PageRequest(page=4), item_model=UserRecord)
        assert page.is_empty
        assert page.total == 25
        assert page.total_pages == 3
        assert not page.has_next()
        assert page.first_index() == 0

    def test_missing_pagination_is_derived(self):
        payload = {"data": [{"userId": "u1"}, {"userId": "u2"}]}
        page = PageResult.from_payload(payload, request=PageRequest(page=1, limit=10), item_model=UserRecord)
        assert page.total == 2
        assert page.limit == 10
        assert page.total_pages == 1

    def test_last_page_indices(self):
        payload = {"data": [{"userId": "u"}] * 5, "pagination": {"total": 25, "page": 3, "limit": 10}}
        page = PageResult.from_payload(payload, request=PageRequest(page=3), item_model=UserRecord)
        assert (page.first_index(), page.last_index()) == (21, 25)
        assert page.has_prev()


class TestRecords:
    def test_numeric_ids_are_strings(self):
        assert UserRecord.model_validate({"userId": 42}).user_id == "42"

    def test_unknown_fields_ignored(self):
        astro = Astrologer.model_validate({"astroId": "a1", "status": "inactive", "visible": "hidden", "x": 1})
        assert not astro.is_active
        assert not astro.is_visible

    def test_horoscope_wire_name(self):
        horoscope = Horoscope.model_validate(
            {"horoscopeId": "h1", "signName": "Leo", "description": "d", "isAsctive": 0}
        )
        assert horoscope.is_active == 0

    def test_general_complaint_owner(self):
        complaint = GeneralComplaint.model_validate(
            {"problemId": 7, "astroId": "a9", "astroName": "Vega", "status": "closed"}
        )
        assert complaint.problem_id == "7"
        assert complaint.owner_id == "a9"
        assert complaint.owner_name == "Vega"
        assert not complaint.is_open

    def test_owner_resources(self):
        assert ComplaintOwner.USER.resource == "user-general-complaints"
        assert ComplaintOwner.ASTRO.resource == "astro-general-complaints"


class TestComplaintDetail:
    def test_unwraps_data_and_reads_history(self):
        detail = ComplaintDetail.from_payload(
            {
                "data": {
                    "orderId": "o1",
                    "ratePerMintue": 12.5,
                    "conversation": [
                        {"isAstrolger": True, "message": {"text": "hello"}},
                        {"isAstrolger": False, "message": "hi"},
                    ],
                    "status": [{"type": "request"}, {"type": "complete"}],
                }
            }
        )
        assert detail.order_id == "o1"
        assert detail.rate_per_minute == 12.5
        assert [m.sender for m in detail.conversation] == ["Astrologer", "User"]
        assert [m.text for m in detail.conversation] == ["hello", "hi"]
        assert detail.current_status == "complete"
        assert detail.raw["orderId"] == "o1"

    def test_non_list_status_is_ignored(self):
        detail = ComplaintDetail.from_payload({"orderId": "o1", "status": "open", "lastStatus": "issue"})
        assert detail.status_history == []
        assert detail.current_status == "issue"


class TestPayloads:
    def test_decision_uses_wire_names(self):
        decision = ComplaintDecision(action="accept", reason="ok", user_refund_money=5)
        assert decision.model_dump(by_alias=True) == {
            "action": "accept",
            "reason": "ok",
            "userRefundMoney": 5,
            "astroRefundMoney": 0,
        }

    def test_horoscope_input_payload(self):
        data = HoroscopeInput(sign_name="Aries", description="Good day", date=dt.date(2024, 3, 1))
        assert data.to_payload() == {
            "signName": "Aries",
            "description": "Good day",
            "date": "2024-03-01",
            "isAsctive": 1,
        }

    def test_horoscope_input_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            HoroscopeInput.model_validate(
                {"signName": "Aries", "description": "d", "date": "2024-03-01", "mood": "great"}
            )

    def test_dashboard_metrics_defaults(self):
        metrics = DashboardMetrics.model_validate({"date": "2024-03-01", "ivrCall": {"total": 3}})
        assert metrics.ivr_call.total == 3
        assert metrics.video_call.total == 0


class TestServiceTypes:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("chat", "chat"),
            ("call", "ivrCall"),
            ("video", "videoCall"),
            ("VIDEO", "videoCall"),
            (None, "chat"),
            ("", "chat"),
            ("Whatsapp", "whatsapp"),
        ],
    )
    def test_detail_mapping(self, value, expected):
        assert to_detail_service_type(value) == expected

    def test_labels(self):
        assert ServiceType.CALL.label() == "Voice call"
