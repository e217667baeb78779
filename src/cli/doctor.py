"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.token_store import FileTokenStore
from core.config import AppSettings, get_user_env_file, read_user_env_vars, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings) -> tuple[bool, str]:
    # Cualquier respuesta HTTP (incluido 401/404) prueba que el backend es alcanzable.
    try:
        async with build_async_client(settings) as client:
            response = await client.get("/admin/dashboard/metrics")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Astro Admin Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    env_file = get_user_env_file()
    stored = read_user_env_vars(env_file)
    detail = f"{env_file} ({len(stored)} keys)" if stored else str(env_file)
    table.add_row("User config", "OK" if stored else "OPTIONAL", detail)
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds:g}s")

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings))
    table.add_row("API connectivity", "OK" if ok_http else "FAIL", detail_http)

    # Session
    session_file = settings.resolved_session_file()
    has_token = FileTokenStore(session_file).read() is not None
    table.add_row("Session", "OK" if has_token else "MISSING", str(session_file))

    _console.print(table)

    if not has_token:
        _console.print("\n[yellow]Note:[/yellow] Run `astro-admin login` to start a session.")


@app.command(name="setup-api")
def setup_api() -> None:
    """Interactive backend setup (stores config in the user config .env)."""

    settings = AppSettings()
    base_url = typer.prompt("API base URL", default=settings.api_base_url, show_default=True).strip()
    timeout = typer.prompt(
        "Request timeout (seconds)",
        default=settings.http_timeout_seconds,
        type=float,
        show_default=True,
    )

    if not base_url.startswith(("http://", "https://")):
        raise typer.BadParameter("base URL must start with http:// or https://")
    if timeout <= 0:
        raise typer.BadParameter("timeout must be positive")

    env_path = write_user_env_vars(
        {
            "ASTRO_ADMIN_API_BASE_URL": base_url.rstrip("/"),
            "ASTRO_ADMIN_HTTP_TIMEOUT_SECONDS": f"{timeout:g}",
        }
    )

    _console.print(f"[green]Saved API config to:[/green] {env_path}")
