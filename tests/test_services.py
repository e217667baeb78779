"""
Bulk file parsing, report helpers, dashboard overview and configuration.
"""

from __future__ import annotations

import datetime as dt
import json

import httpx
import pytest

from conftest import page_payload
from core.config import AppSettings, get_user_config_dir, read_user_env_vars, write_user_env_vars
from core.domain.errors import InputValidationError
from core.domain.models import Feedback, HoroscopeInput, ReportFile
from core.services.bulk import load_records, parse_records
from core.services.dashboard import load_overview
from core.services.reports import destination_for, download_reports, generate_reports, validate_range


class TestBulk:
    def test_array_of_records(self):
        raw = json.dumps(
            [
                {"feedbackId": "f1", "astroId": "a1", "name": "Ana", "rating": 5},
                {"feedbackId": "f2", "astroId": "a2", "name": "Luis", "rating": 3, "comment": "ok"},
            ]
        )
        records = parse_records(raw, Feedback)
        assert [r.feedback_id for r in records] == ["f1", "f2"]

    def test_single_object(self):
        raw = json.dumps({"signName": "Leo", "description": "d", "date": "2024-02-02"})
        records = parse_records(raw, HoroscopeInput)
        assert records[0].date == dt.date(2024, 2, 2)

    def test_invalid_record_names_position(self):
        raw = json.dumps(
            [
                {"feedbackId": "f1", "astroId": "a1", "name": "Ana", "rating": 5},
                {"feedbackId": "f2", "astroId": "a1", "name": "Bo", "rating": 9},
            ]
        )
        with pytest.raises(InputValidationError, match=r"Record 2: rating"):
            parse_records(raw, Feedback)

    def test_invalid_json(self):
        with pytest.raises(InputValidationError, match="Invalid JSON"):
            parse_records("[{", Feedback)

    def test_non_object_entry(self):
        with pytest.raises(InputValidationError, match="Record 1: expected an object"):
            parse_records("[1]", Feedback)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputValidationError, match="File not found"):
            load_records(tmp_path / "nope.json", Feedback)


class TestReports:
    def test_both_dates_required(self):
        with pytest.raises(InputValidationError, match="both start and end"):
            validate_range(dt.date(2024, 1, 1), None)

    def test_start_after_end(self):
        with pytest.raises(InputValidationError, match="before or equal"):
            validate_range(dt.date(2024, 2, 1), dt.date(2024, 1, 1))

    def test_same_day_is_valid(self):
        day = dt.date(2024, 1, 1)
        assert validate_range(day, day) == (day, day)

    def test_destination_strips_directories(self, tmp_path):
        assert destination_for("../../etc/orders.csv", tmp_path) == tmp_path / "orders.csv"

    @pytest.mark.parametrize("name", ["", ".", ".."])
    def test_destination_rejects_bad_names(self, name, tmp_path):
        with pytest.raises(InputValidationError):
            destination_for(name, tmp_path)

    @pytest.mark.asyncio
    async def test_invalid_range_makes_no_request(self, make_api):
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        async with make_api(handler) as api:
            with pytest.raises(InputValidationError):
                await generate_reports(api, None, dt.date(2024, 1, 1))

        assert calls == []

    @pytest.mark.asyncio
    async def test_download_all(self, make_api, tmp_path):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=request.url.path.rsplit("/", 1)[-1].encode())

        files = [
            ReportFile(collection="orders", fileName="orders.csv"),
            ReportFile(collection="users", fileName="users.csv"),
        ]
        async with make_api(handler) as api:
            paths = await download_reports(api, files, tmp_path)

        assert [p.read_text() for p in paths] == ["orders.csv", "users.csv"]


@pytest.mark.asyncio
async def test_dashboard_overview_collects_counts(make_api):
    totals = {
        "/admin/users": 120,
        "/admin/astros": 14,
        "/admin/user-service-complaints": 7,
        "/admin/user-general-complaints": 3,
        "/admin/astro-general-complaints": 1,
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/admin/dashboard/metrics":
            return httpx.Response(200, json={"success": True, "data": {"date": "2024-05-01"}})
        assert request.url.params["limit"] == "1"
        return httpx.Response(200, json=page_payload([], total=totals[request.url.path], limit=1))

    async with make_api(handler) as api:
        overview = await load_overview(api)

    assert overview.metrics.date == "2024-05-01"
    assert (overview.users, overview.astros) == (120, 14)
    assert overview.service_complaints == 7
    assert overview.user_general_complaints == 3
    assert overview.astro_general_complaints == 1


class TestConfig:
    def test_env_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ASTRO_ADMIN_API_BASE_URL", "https://staging.example.com")
        monkeypatch.setenv("ASTRO_ADMIN_DEFAULT_PAGE_LIMIT", "25")
        settings = AppSettings(_env_file=None)
        assert settings.api_base_url == "https://staging.example.com"
        assert settings.default_page_limit == 25

    def test_session_file_default(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.delenv("ASTRO_ADMIN_SESSION_FILE", raising=False)
        settings = AppSettings(_env_file=None, session_file=None)
        assert settings.resolved_session_file() == get_user_config_dir() / "session.json"

    def test_write_user_env_vars_merges(self, tmp_path):
        env_path = tmp_path / "cfg" / ".env"
        write_user_env_vars({"ASTRO_ADMIN_API_BASE_URL": "https://a"}, env_path=env_path)
        write_user_env_vars({"ASTRO_ADMIN_LOG_LEVEL": "INFO"}, env_path=env_path)

        lines = env_path.read_text(encoding="utf-8").splitlines()
        assert "ASTRO_ADMIN_API_BASE_URL=https://a" in lines
        assert read_user_env_vars(env_path) == {
            "ASTRO_ADMIN_API_BASE_URL": "https://a",
            "ASTRO_ADMIN_LOG_LEVEL": "INFO",
        }

    def test_missing_env_file_reads_empty(self, tmp_path):
        assert read_user_env_vars(tmp_path / "absent.env") == {}
