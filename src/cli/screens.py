"""Interactive list navigation for the terminal console.

A browse session renders the controller's current page and reads one-line
commands (`n`, `p`, `g 3`, `f status=open`, `l 25`, `s desc`, `r`, `q`) plus
per-screen row actions such as `t 2` (toggle row 2). Every command goes
through the `ResourceListController`, so paging, filter resets and stale
response handling behave exactly as in non-interactive listings.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable

from rich.console import Console
from rich.prompt import Prompt

from cli.ui_components import build_page_view
from core.config import ALLOWED_PAGE_SIZES
from core.domain.errors import (
    AdminConsoleError,
    InputValidationError,
    NotAuthenticatedError,
    UnauthorizedError,
)
from core.services.resource_list import ListState, ResourceListController
from core.services.screens import ScreenDefinition

RowHandler = Callable[[Any, ResourceListController], Awaitable["str | None"]]
RowActions = dict[str, tuple[str, RowHandler]]

_NAV_HELP = "n next • p prev • g <page> • f key=value • l <size> • s <sort> • r refresh • q quit"


def parse_filters(values: list[str] | None) -> dict[str, str | None]:
    """`["status=open", "name="]` -> `{"status": "open", "name": None}`."""

    filters: dict[str, str | None] = {}
    for raw in values or []:
        key, sep, value = raw.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InputValidationError(f"Invalid filter {raw!r}, expected key=value")
        filters[key] = value.strip() or None
    return filters


def state_as_json(state: ListState) -> str:
    page = state.data
    payload: dict[str, Any] = {
        "items": [item.model_dump(mode="json", by_alias=True) for item in state.items],
        "total": page.total if page else 0,
        "page": page.page if page else state.request.page,
        "limit": page.limit if page else state.request.limit,
        "totalPages": page.total_pages if page else 0,
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _row(state: ListState, arg: str) -> Any:
    try:
        index = int(arg)
    except ValueError:
        raise InputValidationError("Row number expected, e.g. `t 2`") from None
    items = state.items
    if not 1 <= index <= len(items):
        raise InputValidationError(f"Row {index} is not on this page")
    return items[index - 1]


def _page_arg(arg: str, label: str) -> int:
    try:
        return int(arg)
    except ValueError:
        raise InputValidationError(f"{label} must be a number") from None


async def _apply(
    command: str,
    arg: str,
    controller: ResourceListController,
    state: ListState,
    actions: RowActions,
    console: Console,
) -> ListState:
    page = state.data
    if command == "n":
        if page is None or not page.has_next():
            raise InputValidationError("Already on the last page")
        return await controller.set_page(controller.request.page + 1)
    if command == "p":
        if page is None or not page.has_prev():
            raise InputValidationError("Already on the first page")
        return await controller.set_page(controller.request.page - 1)
    if command == "g":
        return await controller.set_page(_page_arg(arg, "Page"))
    if command == "l":
        limit = _page_arg(arg, "Page size")
        if limit not in ALLOWED_PAGE_SIZES:
            raise InputValidationError(f"Page size must be one of {', '.join(map(str, ALLOWED_PAGE_SIZES))}")
        return await controller.set_limit(limit)
    if command == "f":
        return await controller.set_filters(parse_filters([arg]))
    if command == "s":
        return await controller.set_sort(arg or None)
    if command == "r":
        return await controller.refresh()
    if command in actions:
        _, handler = actions[command]
        message = await handler(_row(state, arg), controller)
        if message:
            console.print(f"[green]{message}[/green]")
        return controller.current()
    raise InputValidationError(f"Unknown command {command!r}")


async def browse(
    controller: ResourceListController,
    screen: ScreenDefinition,
    console: Console,
    *,
    actions: RowActions | None = None,
    ask: Callable[[], str] | None = None,
) -> ListState:
    """Run the interactive loop until `q`. Returns the last state."""

    actions = actions or {}
    ask = ask or (lambda: Prompt.ask("[bold magenta]>[/bold magenta]", console=console, default="q"))
    help_line = _NAV_HELP
    if actions:
        help_line += "\n" + " • ".join(f"{key} <row> {label}" for key, (label, _) in actions.items())

    state = await controller.refresh()
    while True:
        console.print(build_page_view(screen, state))
        console.print(help_line, style="dim")
        command, _, arg = ask().strip().partition(" ")
        command = command.lower()
        if command in ("", "q", "quit"):
            return state
        try:
            state = await _apply(command, arg.strip(), controller, state, actions, console)
        except (UnauthorizedError, NotAuthenticatedError):
            raise
        except AdminConsoleError as exc:
            console.print(f"[red]{exc.message}[/red]")
            state = controller.current()
