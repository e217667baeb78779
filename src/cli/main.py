"""CLI entrypoint (Typer).

Por qué Typer:
- Subcomandos por sección de la consola (users, astros, complaints...) con
  ayuda y validación de opciones gratis.
- Se integra con Rich para tablas y paneles.

Cada comando protegido pasa por el `Navigator` (sin sesión -> login) y abre
un `AdminApiClient` cuyo cliente httpx lee el token del `SessionGuard` en
cada request. Los errores de la consola (`AdminConsoleError`) se muestran en
rojo y terminan con código 1.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import json
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from adapters.admin_api import AdminApiClient
from adapters.http_client import build_async_client
from adapters.token_store import FileTokenStore
from cli import doctor
from cli.screens import RowActions, browse, parse_filters, state_as_json
from cli.ui_components import (
    build_complaint_detail_panel,
    build_dashboard,
    build_page_view,
    build_reports_table,
    print_banner,
)
from core.config import ALLOWED_PAGE_SIZES, AppSettings
from core.domain.errors import (
    AdminConsoleError,
    InputValidationError,
    NotAuthenticatedError,
    UnauthorizedError,
)
from core.domain.models import (
    Astrologer,
    ComplaintOwner,
    Feedback,
    GeneralComplaint,
    Horoscope,
    HoroscopeInput,
    RecordStatus,
    ReportFile,
    ServiceComplaint,
    UserRecord,
    Visibility,
)
from core.logging_setup import setup_logging
from core.services.bulk import load_records
from core.services.dashboard import load_overview
from core.services.moderation import ModerationService, ensure_open
from core.services.navigation import HOME_PATH, LOGIN_PATH, Navigator
from core.services.reasons import ReasonForm
from core.services.reports import download_reports, generate_reports
from core.services.resource_list import ListState, ResourceListController
from core.services.screens import (
    ASTROS,
    HOROSCOPES,
    SERVICE_COMPLAINTS,
    USERS,
    ScreenDefinition,
    general_complaints_screen,
    open_screen,
)
from core.services.session import SessionGuard, authenticate

R = TypeVar("R")

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Astro admin console.")
users_app = typer.Typer(no_args_is_help=True, help="Customer accounts.")
astros_app = typer.Typer(no_args_is_help=True, help="Astrologer accounts and visibility.")
complaints_app = typer.Typer(no_args_is_help=True, help="Service and general complaints.")
service_app = typer.Typer(no_args_is_help=True, help="Complaints tied to an order.")
general_app = typer.Typer(no_args_is_help=True, help="General complaints from users or astrologers.")
horoscopes_app = typer.Typer(no_args_is_help=True, help="Daily horoscope content.")
feedbacks_app = typer.Typer(no_args_is_help=True, help="Customer feedback uploads.")
reports_app = typer.Typer(no_args_is_help=True, help="CSV reports and the scheduler.")

app.add_typer(users_app, name="users")
app.add_typer(astros_app, name="astros")
app.add_typer(complaints_app, name="complaints")
complaints_app.add_typer(service_app, name="service")
complaints_app.add_typer(general_app, name="general")
app.add_typer(horoscopes_app, name="horoscopes")
app.add_typer(feedbacks_app, name="feedbacks")
app.add_typer(reports_app, name="reports")
app.add_typer(doctor.app, name="doctor")

console = Console()


@dataclass
class Runtime:
    settings: AppSettings
    guard: SessionGuard
    navigator: Navigator
    transport: httpx.AsyncBaseTransport | None = None


@asynccontextmanager
async def _open_api(rt: Runtime) -> AsyncIterator[AdminApiClient]:
    client = build_async_client(
        rt.settings,
        token_provider=lambda: rt.guard.token,
        on_unauthorized=rt.guard.handle_unauthorized,
        transport=rt.transport,
    )
    async with AdminApiClient(client) as api:
        yield api


def _enter(rt: Runtime, path: str) -> None:
    """Navega a `path`; sin sesión el guard redirige a login y se aborta."""

    route = rt.navigator.go(path)
    if route.path == LOGIN_PATH and path != LOGIN_PATH:
        raise NotAuthenticatedError()


def _run(coro: Awaitable[R]) -> R:
    try:
        return asyncio.run(coro)
    except NotAuthenticatedError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1) from exc
    except UnauthorizedError as exc:
        console.print(f"[red]{exc.message}[/red]")
        console.print("Run [bold]astro-admin login[/bold] to start a new session.")
        raise typer.Exit(code=1) from exc
    except AdminConsoleError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1) from exc


def _rt(ctx: typer.Context) -> Runtime:
    return ctx.obj


def _parse_date(value: str | None, label: str) -> dt.date | None:
    if value is None:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise InputValidationError(f"{label} must be a date in YYYY-MM-DD format") from None


def _check_limit(limit: int) -> int:
    if limit not in ALLOWED_PAGE_SIZES:
        raise InputValidationError(f"Page size must be one of {', '.join(map(str, ALLOWED_PAGE_SIZES))}")
    return limit


def _ask_reason(reason: str | None) -> str:
    if reason is not None:
        return reason
    return Prompt.ask("Reason", console=console, default="", show_default=False)


async def _with_reason(title: str, target: str, reason: str, action: Callable[[str, str], Awaitable[R]]) -> R:
    form = ReasonForm(title=title)
    form.open(target)
    form.set_reason(reason)
    return await form.submit(action)


def _horoscope_input(sign: str, description: str, date: str, active: bool) -> HoroscopeInput:
    try:
        return HoroscopeInput(sign_name=sign, description=description, date=date, is_active=1 if active else 0)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise InputValidationError(f"{location} {first.get('msg', 'is invalid')}") from exc


# --------------------------------------------------------------------- lists


def _list_command(
    ctx: typer.Context,
    screen: ScreenDefinition,
    *,
    page: int,
    limit: int | None,
    filters: dict[str, str | None] | None = None,
    raw_filters: list[str] | None = None,
    sort: str | None = None,
    as_json: bool = False,
) -> None:
    rt = _rt(ctx)

    async def _go() -> ListState:
        _enter(rt, screen.route)
        request = screen.initial_request(_check_limit(limit or rt.settings.default_page_limit))
        patch = {**(filters or {}), **parse_filters(raw_filters)}
        if patch:
            request = request.with_filters(patch)
        if sort is not None:
            request = request.with_sort(sort)
        request = request.with_page(page)
        async with _open_api(rt) as api:
            state = await open_screen(api, screen, request=request).refresh()
        if state.error is not None:
            raise state.error
        return state

    state = _run(_go())
    if as_json:
        typer.echo(state_as_json(state))
    else:
        console.print(build_page_view(screen, state))


def _browse_command(
    ctx: typer.Context,
    screen: ScreenDefinition,
    make_actions: Callable[[ModerationService, AdminApiClient], RowActions],
    *,
    limit: int | None,
) -> None:
    rt = _rt(ctx)

    async def _go() -> None:
        _enter(rt, screen.route)
        async with _open_api(rt) as api:
            controller = open_screen(
                api, screen, limit=_check_limit(limit or rt.settings.default_page_limit)
            )
            await browse(controller, screen, console, actions=make_actions(ModerationService(api), api))

    print_banner(console)
    _run(_go())


PAGE_OPTION = typer.Option(1, "--page", "-p", min=1, help="Page number (1-based).")
LIMIT_OPTION = typer.Option(None, "--limit", "-l", help="Page size (10, 25, 50 or 100).")
FILTER_OPTION = typer.Option(None, "--filter", "-f", help="Filter as key=value (repeatable).")
JSON_OPTION = typer.Option(False, "--json", help="Print the raw page as JSON.")


# ------------------------------------------------------------------- session


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    # Quien embebe la app puede pasar un transporte httpx como `obj`.
    transport = ctx.obj if isinstance(ctx.obj, httpx.AsyncBaseTransport) else None
    settings = AppSettings()
    setup_logging("DEBUG" if verbose else settings.log_level)
    guard = SessionGuard(FileTokenStore(settings.resolved_session_file()))
    ctx.obj = Runtime(settings=settings, guard=guard, navigator=Navigator(guard), transport=transport)


@app.command()
def login(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
) -> None:
    """Log in and store the session token."""

    rt = _rt(ctx)

    async def _go() -> None:
        _enter(rt, LOGIN_PATH)
        async with _open_api(rt) as api:
            await authenticate(api, rt.guard, username=username, password=password)
        _enter(rt, HOME_PATH)

    _run(_go())
    console.print(f"[green]Logged in as {username.strip()}[/green]")


@app.command()
def logout(ctx: typer.Context) -> None:
    """Forget the stored session token."""

    _rt(ctx).guard.logout()
    console.print("Logged out.")


@app.command()
def whoami(ctx: typer.Context) -> None:
    """Show session state and backend."""

    rt = _rt(ctx)
    table = Table(title="Session")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("State", rt.guard.state.value)
    table.add_row("API", rt.settings.api_base_url)
    table.add_row("Session file", str(rt.settings.resolved_session_file()))
    table.add_row("Sections", ", ".join(route.label for route in rt.navigator.menu()))
    console.print(table)


@app.command()
def dashboard(ctx: typer.Context) -> None:
    """Daily service metrics and global counters."""

    rt = _rt(ctx)

    async def _go():
        _enter(rt, HOME_PATH)
        async with _open_api(rt) as api:
            return await load_overview(api)

    overview = _run(_go())
    print_banner(console)
    console.print(build_dashboard(overview))


# --------------------------------------------------------------------- users


def _user_actions(moderation: ModerationService, api: AdminApiClient) -> RowActions:
    async def toggle(user: UserRecord, controller: ResourceListController) -> str:
        status = await moderation.toggle_user_status(user, on_success=controller.refresh)
        return f"User {user.user_id} is now {status.value}"

    return {"t": ("toggle status", toggle)}


@users_app.command("list")
def users_list(
    ctx: typer.Context,
    page: int = PAGE_OPTION,
    limit: int | None = LIMIT_OPTION,
    filters: list[str] | None = FILTER_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """List customer accounts."""

    _list_command(ctx, USERS, page=page, limit=limit, raw_filters=filters, as_json=as_json)


@users_app.command("browse")
def users_browse(ctx: typer.Context, limit: int | None = LIMIT_OPTION) -> None:
    """Page through users interactively."""

    _browse_command(ctx, USERS, _user_actions, limit=limit)


@users_app.command("toggle")
def users_toggle(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="User id."),
    status: RecordStatus = typer.Argument(..., help="New status."),
) -> None:
    """Activate or deactivate a user."""

    rt = _rt(ctx)

    async def _go() -> RecordStatus:
        _enter(rt, USERS.route)
        async with _open_api(rt) as api:
            return await ModerationService(api).set_user_status(user_id, status)

    new_status = _run(_go())
    console.print(f"[green]User {user_id} is now {new_status.value}[/green]")


# -------------------------------------------------------------------- astros


def _astro_actions(moderation: ModerationService, api: AdminApiClient) -> RowActions:
    async def toggle_status(astro: Astrologer, controller: ResourceListController) -> str:
        status = await moderation.toggle_astro_status(astro, on_success=controller.refresh)
        return f"Astrologer {astro.astro_id} is now {status.value}"

    async def toggle_visibility(astro: Astrologer, controller: ResourceListController) -> str:
        visible = await moderation.toggle_astro_visibility(astro, on_success=controller.refresh)
        return f"Astrologer {astro.astro_id} is now {'visible' if visible else 'hidden'}"

    return {"t": ("toggle status", toggle_status), "v": ("toggle visibility", toggle_visibility)}


@astros_app.command("list")
def astros_list(
    ctx: typer.Context,
    page: int = PAGE_OPTION,
    limit: int | None = LIMIT_OPTION,
    name: str | None = typer.Option(None, "--name", "-n", help="Filter by name."),
    sort: str = typer.Option("asc", "--sort", help="Sort order (asc or desc)."),
    as_json: bool = JSON_OPTION,
) -> None:
    """List astrologers."""

    _list_command(ctx, ASTROS, page=page, limit=limit, filters={"name": name}, sort=sort, as_json=as_json)


@astros_app.command("browse")
def astros_browse(ctx: typer.Context, limit: int | None = LIMIT_OPTION) -> None:
    """Page through astrologers interactively."""

    _browse_command(ctx, ASTROS, _astro_actions, limit=limit)


@astros_app.command("status")
def astros_status(
    ctx: typer.Context,
    astro_id: str = typer.Argument(..., help="Astrologer id."),
    status: RecordStatus = typer.Argument(..., help="New status."),
) -> None:
    """Activate or deactivate an astrologer."""

    rt = _rt(ctx)

    async def _go() -> RecordStatus:
        _enter(rt, ASTROS.route)
        async with _open_api(rt) as api:
            return await ModerationService(api).set_astro_status(astro_id, status)

    new_status = _run(_go())
    console.print(f"[green]Astrologer {astro_id} is now {new_status.value}[/green]")


@astros_app.command("visibility")
def astros_visibility(
    ctx: typer.Context,
    astro_id: str = typer.Argument(..., help="Astrologer id."),
    visibility: Visibility = typer.Argument(..., help="New visibility."),
) -> None:
    """Show or hide an astrologer profile."""

    rt = _rt(ctx)

    async def _go() -> bool:
        _enter(rt, ASTROS.route)
        async with _open_api(rt) as api:
            return await ModerationService(api).set_astro_visibility(astro_id, visibility is Visibility.VISIBLE)

    shown = _run(_go())
    console.print(f"[green]Astrologer {astro_id} is now {'visible' if shown else 'hidden'}[/green]")


# ----------------------------------------------------------- service complaints


def _service_actions(moderation: ModerationService, api: AdminApiClient) -> RowActions:
    async def details(complaint: ServiceComplaint, controller: ResourceListController) -> None:
        detail = await api.complaint_detail(complaint.service_type, complaint.order_id)
        console.print(build_complaint_detail_panel(detail))

    async def accept(complaint: ServiceComplaint, controller: ResourceListController) -> str:
        ensure_open(complaint)
        user_refund = IntPrompt.ask("User refund", console=console, default=0)
        astro_refund = IntPrompt.ask("Astrologer refund", console=console, default=0)
        await _with_reason(
            "Accept complaint",
            complaint.order_id,
            _ask_reason(None),
            lambda _target, reason: moderation.accept_complaint(
                complaint,
                reason=reason,
                user_refund_money=user_refund,
                astro_refund_money=astro_refund,
                on_success=controller.refresh,
            ),
        )
        return f"Complaint {complaint.order_id} accepted"

    async def reject(complaint: ServiceComplaint, controller: ResourceListController) -> str:
        ensure_open(complaint)
        await _with_reason(
            "Reject complaint",
            complaint.order_id,
            _ask_reason(None),
            lambda _target, reason: moderation.reject_complaint(
                complaint, reason=reason, on_success=controller.refresh
            ),
        )
        return f"Complaint {complaint.order_id} rejected"

    return {"d": ("details", details), "a": ("accept", accept), "x": ("reject", reject)}


@service_app.command("list")
def service_list(
    ctx: typer.Context,
    page: int = PAGE_OPTION,
    limit: int | None = LIMIT_OPTION,
    service_type: str | None = typer.Option(None, "--service-type", "-t", help="chat, call or video."),
    status: str | None = typer.Option(None, "--status", "-s", help="Complaint status."),
    as_json: bool = JSON_OPTION,
) -> None:
    """List complaints tied to an order."""

    _list_command(
        ctx,
        SERVICE_COMPLAINTS,
        page=page,
        limit=limit,
        filters={"serviceType": service_type, "status": status},
        as_json=as_json,
    )


@service_app.command("browse")
def service_browse(ctx: typer.Context, limit: int | None = LIMIT_OPTION) -> None:
    """Page through service complaints interactively."""

    _browse_command(ctx, SERVICE_COMPLAINTS, _service_actions, limit=limit)


@service_app.command("show")
def service_show(
    ctx: typer.Context,
    order_id: str = typer.Argument(..., help="Order id."),
    service_type: str | None = typer.Option(None, "--service-type", "-t", help="chat, call or video."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw detail as JSON."),
) -> None:
    """Show conversation and status history of a complaint."""

    rt = _rt(ctx)

    async def _go():
        _enter(rt, SERVICE_COMPLAINTS.route)
        async with _open_api(rt) as api:
            return await api.complaint_detail(service_type, order_id)

    detail = _run(_go())
    if as_json:
        typer.echo(json.dumps(detail.raw, ensure_ascii=False, indent=2))
    else:
        console.print(build_complaint_detail_panel(detail))


@service_app.command("accept")
def service_accept(
    ctx: typer.Context,
    order_id: str = typer.Argument(..., help="Order id."),
    reason: str | None = typer.Option(None, "--reason", "-r", help="Reason (prompted when omitted)."),
    user_refund: int = typer.Option(0, "--user-refund", help="Amount refunded to the user."),
    astro_refund: int = typer.Option(0, "--astro-refund", help="Amount refunded to the astrologer."),
) -> None:
    """Accept a complaint, optionally with refunds."""

    rt = _rt(ctx)
    text = _ask_reason(reason)

    async def _go() -> None:
        _enter(rt, SERVICE_COMPLAINTS.route)
        async with _open_api(rt) as api:
            moderation = ModerationService(api)
            await _with_reason(
                "Accept complaint",
                order_id,
                text,
                lambda target, cleaned: moderation.accept_complaint(
                    target,
                    reason=cleaned,
                    user_refund_money=user_refund,
                    astro_refund_money=astro_refund,
                ),
            )

    _run(_go())
    console.print(f"[green]Complaint {order_id} accepted[/green]")


@service_app.command("reject")
def service_reject(
    ctx: typer.Context,
    order_id: str = typer.Argument(..., help="Order id."),
    reason: str | None = typer.Option(None, "--reason", "-r", help="Reason (prompted when omitted)."),
) -> None:
    """Reject a complaint."""

    rt = _rt(ctx)
    text = _ask_reason(reason)

    async def _go() -> None:
        _enter(rt, SERVICE_COMPLAINTS.route)
        async with _open_api(rt) as api:
            moderation = ModerationService(api)
            await _with_reason(
                "Reject complaint",
                order_id,
                text,
                lambda target, cleaned: moderation.reject_complaint(target, reason=cleaned),
            )

    _run(_go())
    console.print(f"[green]Complaint {order_id} rejected[/green]")


# ----------------------------------------------------------- general complaints

KIND_OPTION = typer.Option(ComplaintOwner.USER, "--kind", "-k", help="Who filed the complaint.")


def _general_actions(owner: ComplaintOwner) -> Callable[[ModerationService, AdminApiClient], RowActions]:
    def make(moderation: ModerationService, api: AdminApiClient) -> RowActions:
        async def close(complaint: GeneralComplaint, controller: ResourceListController) -> str:
            ensure_open(complaint)
            await _with_reason(
                "Close complaint",
                complaint.problem_id,
                _ask_reason(None),
                lambda _target, reason: moderation.close_general_complaint(
                    owner, complaint, reason=reason, on_success=controller.refresh
                ),
            )
            return f"Complaint {complaint.problem_id} closed"

        return {"c": ("close", close)}

    return make


@general_app.command("list")
def general_list(
    ctx: typer.Context,
    kind: ComplaintOwner = KIND_OPTION,
    page: int = PAGE_OPTION,
    limit: int | None = LIMIT_OPTION,
    filters: list[str] | None = FILTER_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """List general complaints."""

    screen = general_complaints_screen(kind)
    _list_command(ctx, screen, page=page, limit=limit, raw_filters=filters, as_json=as_json)


@general_app.command("browse")
def general_browse(
    ctx: typer.Context,
    kind: ComplaintOwner = KIND_OPTION,
    limit: int | None = LIMIT_OPTION,
) -> None:
    """Page through general complaints interactively."""

    _browse_command(ctx, general_complaints_screen(kind), _general_actions(kind), limit=limit)


@general_app.command("close")
def general_close(
    ctx: typer.Context,
    problem_id: str = typer.Argument(..., help="Problem id."),
    kind: ComplaintOwner = KIND_OPTION,
    reason: str | None = typer.Option(None, "--reason", "-r", help="Reason (prompted when omitted)."),
) -> None:
    """Close an open general complaint."""

    rt = _rt(ctx)
    text = _ask_reason(reason)

    async def _go() -> None:
        _enter(rt, general_complaints_screen(kind).route)
        async with _open_api(rt) as api:
            moderation = ModerationService(api)
            await _with_reason(
                "Close complaint",
                problem_id,
                text,
                lambda target, cleaned: moderation.close_general_complaint(kind, target, reason=cleaned),
            )

    _run(_go())
    console.print(f"[green]Complaint {problem_id} closed[/green]")


# ---------------------------------------------------------------- horoscopes


def _horoscope_actions(moderation: ModerationService, api: AdminApiClient) -> RowActions:
    async def delete(horoscope: Horoscope, controller: ResourceListController) -> str | None:
        if not Confirm.ask(f"Delete horoscope {horoscope.horoscope_id}?", console=console, default=False):
            return None
        await moderation.delete_horoscope(horoscope.horoscope_id, on_success=controller.refresh)
        return f"Horoscope {horoscope.horoscope_id} deleted"

    return {"d": ("delete", delete)}


@horoscopes_app.command("list")
def horoscopes_list(
    ctx: typer.Context,
    page: int = PAGE_OPTION,
    limit: int | None = LIMIT_OPTION,
    filters: list[str] | None = FILTER_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """List horoscopes."""

    _list_command(ctx, HOROSCOPES, page=page, limit=limit, raw_filters=filters, as_json=as_json)


@horoscopes_app.command("browse")
def horoscopes_browse(ctx: typer.Context, limit: int | None = LIMIT_OPTION) -> None:
    """Page through horoscopes interactively."""

    _browse_command(ctx, HOROSCOPES, _horoscope_actions, limit=limit)


@horoscopes_app.command("create")
def horoscopes_create(
    ctx: typer.Context,
    sign: str = typer.Option(..., "--sign", help="Zodiac sign name."),
    description: str = typer.Option(..., "--description", "-d"),
    date: str = typer.Option(..., "--date", help="YYYY-MM-DD."),
    active: bool = typer.Option(True, "--active/--inactive"),
) -> None:
    """Create a single horoscope."""

    rt = _rt(ctx)

    async def _go() -> str:
        _enter(rt, HOROSCOPES.route)
        data = _horoscope_input(sign, description, date, active)
        async with _open_api(rt) as api:
            return await ModerationService(api).create_horoscopes([data])

    console.print(f"[green]{_run(_go())}[/green]")


@horoscopes_app.command("update")
def horoscopes_update(
    ctx: typer.Context,
    horoscope_id: str = typer.Argument(..., help="Horoscope id."),
    sign: str = typer.Option(..., "--sign", help="Zodiac sign name."),
    description: str = typer.Option(..., "--description", "-d"),
    date: str = typer.Option(..., "--date", help="YYYY-MM-DD."),
    active: bool = typer.Option(True, "--active/--inactive"),
) -> None:
    """Replace the content of a horoscope."""

    rt = _rt(ctx)

    async def _go() -> None:
        _enter(rt, HOROSCOPES.route)
        data = _horoscope_input(sign, description, date, active)
        async with _open_api(rt) as api:
            await ModerationService(api).update_horoscope(horoscope_id, data)

    _run(_go())
    console.print(f"[green]Horoscope {horoscope_id} saved[/green]")


@horoscopes_app.command("delete")
def horoscopes_delete(
    ctx: typer.Context,
    horoscope_id: str = typer.Argument(..., help="Horoscope id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete a horoscope."""

    if not yes and not typer.confirm(f"Delete horoscope {horoscope_id}?"):
        raise typer.Abort()
    rt = _rt(ctx)

    async def _go() -> None:
        _enter(rt, HOROSCOPES.route)
        async with _open_api(rt) as api:
            await ModerationService(api).delete_horoscope(horoscope_id)

    _run(_go())
    console.print(f"[green]Horoscope {horoscope_id} deleted[/green]")


@horoscopes_app.command("bulk")
def horoscopes_bulk(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON file with one horoscope or an array of them."),
) -> None:
    """Create horoscopes from a JSON file."""

    rt = _rt(ctx)

    async def _go() -> str:
        _enter(rt, HOROSCOPES.route)
        records = load_records(file, HoroscopeInput)
        async with _open_api(rt) as api:
            return await ModerationService(api).create_horoscopes(records)

    console.print(f"[green]{_run(_go())}[/green]")


# ----------------------------------------------------------------- feedbacks


@feedbacks_app.command("upload")
def feedbacks_upload(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON file with one feedback or an array of them."),
) -> None:
    """Bulk upload customer feedbacks."""

    rt = _rt(ctx)

    async def _go() -> str:
        _enter(rt, "/feedbacks")
        records = load_records(file, Feedback)
        async with _open_api(rt) as api:
            return await ModerationService(api).upload_feedbacks(records)

    console.print(f"[green]{_run(_go())}[/green]")


# ------------------------------------------------------------------- reports


@reports_app.command("generate")
def reports_generate(
    ctx: typer.Context,
    start: str | None = typer.Option(None, "--start", help="Start date (YYYY-MM-DD)."),
    end: str | None = typer.Option(None, "--end", help="End date (YYYY-MM-DD)."),
    download: bool = typer.Option(False, "--download", help="Download the generated files."),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o"),
) -> None:
    """Generate CSV reports for a date range."""

    rt = _rt(ctx)

    async def _go() -> tuple[Any, list[Path]]:
        _enter(rt, "/scheduler")
        start_date = _parse_date(start, "Start date")
        end_date = _parse_date(end, "End date")
        async with _open_api(rt) as api:
            result = await generate_reports(api, start_date, end_date)
            paths = await download_reports(api, result.files, output_dir) if download else []
        return result, paths

    result, paths = _run(_go())
    console.print(f"[green]{result.message}[/green]")
    if result.files:
        console.print(build_reports_table(result.files))
    for path in paths:
        console.print(f"Saved {path}")


@reports_app.command("download")
def reports_download(
    ctx: typer.Context,
    file_names: list[str] = typer.Argument(..., help="Report file names."),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o"),
) -> None:
    """Download generated report files."""

    rt = _rt(ctx)
    files = [ReportFile(collection="", fileName=name) for name in file_names]

    async def _go() -> list[Path]:
        _enter(rt, "/scheduler")
        async with _open_api(rt) as api:
            return await download_reports(api, files, output_dir)

    for path in _run(_go()):
        console.print(f"Saved {path}")


@reports_app.command("trigger")
def reports_trigger(ctx: typer.Context) -> None:
    """Run the report scheduler now."""

    rt = _rt(ctx)

    async def _go() -> str:
        _enter(rt, "/scheduler")
        async with _open_api(rt) as api:
            return await api.trigger_scheduler()

    console.print(f"[green]{_run(_go())}[/green]")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
