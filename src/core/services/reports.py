"""CSV report generation and download.

Reports are produced server-side for a date range; the console only asks for
them and streams the resulting files to disk.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path

from adapters.admin_api import AdminApiClient
from core.domain.errors import InputValidationError
from core.domain.models import ReportFile, ReportGeneration


def validate_range(start: dt.date | None, end: dt.date | None) -> tuple[dt.date, dt.date]:
    if start is None or end is None:
        raise InputValidationError("Please select both start and end dates")
    if start > end:
        raise InputValidationError("Start date must be before or equal to end date")
    return start, end


def destination_for(file_name: str, directory: Path) -> Path:
    # Solo el nombre: el backend no decide rutas locales.
    name = Path(file_name).name
    if not name or name in (".", ".."):
        raise InputValidationError(f"Invalid report file name: {file_name!r}")
    return directory / name


async def generate_reports(
    api: AdminApiClient,
    start: dt.date | None,
    end: dt.date | None,
) -> ReportGeneration:
    start, end = validate_range(start, end)
    return await api.generate_reports(start, end)


async def download_reports(
    api: AdminApiClient,
    files: list[ReportFile],
    directory: Path,
) -> list[Path]:
    paths: list[Path] = []
    for report in files:
        paths.append(await api.download_report(report.file_name, destination_for(report.file_name, directory)))
    return paths
