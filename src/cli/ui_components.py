"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en listados, navegación interactiva y dashboard.
"""

from __future__ import annotations

from typing import Any, Callable

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ComplaintDetail, ReportFile
from core.domain.service_types import METRIC_SERVICE_TYPES, ServiceType
from core.services.dashboard import DashboardOverview
from core.services.resource_list import ListState
from core.services.screens import ScreenDefinition

Column = tuple[str, str, Callable[[Any], object]]


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Se omite en modo `--json` para no ensuciar la salida.
    """

    title = Text("ASTRO ADMIN", style="bold magenta")
    subtitle = Text("Users • Astrologers • Complaints • Horoscopes • Reports", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="magenta", padding=(1, 4)))


def _status_text(value: str | None, positive: str = "active") -> Text:
    if not value:
        return Text("N/A", style="dim")
    return Text(value, style="green" if value == positive else "red")


def _or_na(value: object) -> str:
    return "N/A" if value is None or value == "" else str(value)


def _service_label(value: str | None) -> str:
    try:
        return ServiceType(value).label()
    except ValueError:
        return _or_na(value)


_COLUMNS: dict[str, list[Column]] = {
    "users": [
        ("User ID", "cyan", lambda u: u.user_id),
        ("Name", "white", lambda u: _or_na(u.name)),
        ("Email", "white", lambda u: _or_na(u.email)),
        ("Mobile", "white", lambda u: _or_na(u.mobile)),
        ("Status", "", lambda u: _status_text(u.status)),
    ],
    "astros": [
        ("Astro ID", "cyan", lambda a: a.astro_id),
        ("Name", "white", lambda a: _or_na(a.name)),
        ("Status", "", lambda a: _status_text(a.status)),
        ("Visibility", "", lambda a: _status_text(a.visible, positive="visible")),
    ],
    "service-complaints": [
        ("Order ID", "cyan", lambda c: c.order_id),
        ("Service", "white", lambda c: _service_label(c.service_type)),
        ("User", "white", lambda c: f"{_or_na(c.user_name)} ({_or_na(c.user_id)})"),
        ("Astrologer", "white", lambda c: f"{_or_na(c.astro_name)} ({_or_na(c.astro_id)})"),
        ("Status", "", lambda c: _status_text(c.status, positive="open")),
        ("Created", "dim", lambda c: _or_na(c.created_on)),
    ],
    "general-complaints": [
        ("Problem ID", "cyan", lambda c: c.problem_id),
        ("Owner ID", "white", lambda c: _or_na(c.owner_id)),
        ("Name", "white", lambda c: _or_na(c.owner_name)),
        ("Type", "white", lambda c: _or_na(c.problem_type)),
        ("Description", "white", lambda c: _or_na(c.description)),
        ("Status", "", lambda c: _status_text(c.status, positive="open")),
    ],
    "horoscopes": [
        ("Horoscope ID", "cyan", lambda h: h.horoscope_id),
        ("Sign", "white", lambda h: h.sign_name),
        ("Description", "white", lambda h: h.description),
        ("Date", "white", lambda h: _or_na(h.date)),
        ("Active", "", lambda h: Text("Active", style="green") if h.is_active == 1 else Text("Inactive", style="red")),
    ],
}


def _columns_for(screen: ScreenDefinition) -> list[Column]:
    if screen.name.endswith("general-complaints"):
        return _COLUMNS["general-complaints"]
    return _COLUMNS[screen.name]


def pagination_footer(state: ListState) -> Text:
    page = state.data
    if page is None:
        return Text("")
    text = Text(
        f"Showing {page.first_index()} to {page.last_index()} of {page.total} results"
        f"  •  page {page.page}/{max(page.total_pages, 1)}  •  {page.limit} per page",
        style="dim",
    )
    filters = {k: v for k, v in state.request.filters.items() if v}
    if filters or state.request.sort:
        parts = [f"{k}={v}" for k, v in filters.items()]
        if state.request.sort:
            parts.append(f"sort={state.request.sort}")
        text.append("  •  " + " ".join(parts), style="dim italic")
    return text


def build_page_view(screen: ScreenDefinition, state: ListState) -> Group | Panel:
    """Tabla + pie de paginación para el estado actual de un listado."""

    if state.error is not None and state.data is None:
        return Panel(Text(state.error.message, style="red"), title=screen.title, border_style="red")

    table = Table(title=screen.title)
    columns = _columns_for(screen)
    for header, style, _ in columns:
        table.add_column(header, style=style or None, overflow="fold")
    for item in state.items:
        table.add_row(*(getter(item) for _, _, getter in columns))

    parts: list[Any] = [table]
    if state.is_empty:
        parts.append(Text(screen.empty_message, style="yellow"))
    parts.append(pagination_footer(state))
    if state.error is not None:
        # Datos previos + aviso del fallo más reciente.
        parts.append(Text(f"Last refresh failed: {state.error.message}", style="red"))
    return Group(*parts)


def build_complaint_detail_panel(detail: ComplaintDetail) -> Panel:
    info = Table.grid(padding=(0, 2))
    info.add_column(style="bold")
    info.add_column()
    info.add_row("Order ID", _or_na(detail.order_id))
    info.add_row("Service type", _or_na(detail.service_type))
    info.add_row("Status", detail.current_status)
    if detail.rate_per_minute is not None:
        info.add_row("Rate per minute", str(detail.rate_per_minute))
    if detail.payment_received is not None:
        info.add_row("Payment received", str(detail.payment_received))
    info.add_row("Created", _or_na(detail.created_on))
    info.add_row("Updated", _or_na(detail.updated_on))
    if detail.url:
        info.add_row("URL", detail.url)

    parts: list[Any] = [info]
    if detail.conversation:
        conversation = Table(title="Conversation", show_header=True)
        conversation.add_column("From", style="cyan", no_wrap=True)
        conversation.add_column("When", style="dim", no_wrap=True)
        conversation.add_column("Message")
        for msg in detail.conversation:
            conversation.add_row(msg.sender, _or_na(msg.timestamp), msg.text)
        parts.append(conversation)

    if detail.status_history:
        history = Table(title="Status History", show_header=True)
        history.add_column("Status", style="bold")
        history.add_column("When", style="dim")
        for entry in detail.status_history:
            history.add_row(entry.type, _or_na(entry.created_on))
        parts.append(history)

    return Panel(Group(*parts), title="Complaint Details", border_style="cyan")


def build_dashboard(overview: DashboardOverview) -> Group:
    totals = Table(title="Overview")
    totals.add_column("Section", style="cyan")
    totals.add_column("Total", justify="right")
    totals.add_row("Users", str(overview.users))
    totals.add_row("Astrologers", str(overview.astros))
    totals.add_row("User Service Complaints", str(overview.service_complaints))
    totals.add_row("User General Complaints", str(overview.user_general_complaints))
    totals.add_row("Astro General Complaints", str(overview.astro_general_complaints))

    metrics = overview.metrics
    daily = Table(title=f"Service Metrics {metrics.date}".strip())
    daily.add_column("Service", style="cyan")
    for header in ("Request", "Complete", "Failed", "Issue", "Reject", "Total"):
        daily.add_column(header, justify="right")
    counters = {"chat": metrics.chat, "ivrCall": metrics.ivr_call, "videoCall": metrics.video_call}
    for key in METRIC_SERVICE_TYPES:
        c = counters[key]
        daily.add_row(key, *(str(v) for v in (c.request, c.complete, c.failed, c.issue, c.reject, c.total)))

    return Group(totals, daily)


def build_reports_table(files: list[ReportFile]) -> Table:
    table = Table(title="Generated Reports")
    table.add_column("Collection", style="cyan")
    table.add_column("File", style="magenta")
    for report in files:
        table.add_row(report.collection, report.file_name)
    return table
