"""Configuración de la consola.

Fuentes, de mayor a menor prioridad:
- Variables de entorno `ASTRO_ADMIN_*`.
- `.env` del directorio actual (desarrollo).
- `.env` del directorio de usuario (lo escribe `astro-admin doctor setup-api`).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import dotenv_values, set_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "astro-admin"

ALLOWED_PAGE_SIZES: tuple[int, ...] = (10, 25, 50, 100)


def get_user_config_dir() -> Path:
    """Directorio por usuario para el `.env` global y el fichero de sesión."""

    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or Path.home()) / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config") / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def read_user_env_vars(env_path: Path | None = None) -> dict[str, str]:
    env_path = env_path or get_user_env_file()
    if not env_path.exists():
        return {}
    return {key: value for key, value in dotenv_values(env_path).items() if value is not None}


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Actualiza claves del `.env` de usuario conservando el resto del fichero."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)
    for key, value in values.items():
        if value is None:
            continue
        set_key(str(env_path), key, value, quote_mode="never")
    return env_path


class AppSettings(BaseSettings):
    """Ajustes de la consola (backend, timeouts, sesión, logging)."""

    model_config = SettingsConfigDict(
        env_prefix="ASTRO_ADMIN_",
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_base_url: str = Field(
        default="https://api-admin.astrosway.com",
        min_length=8,
        description="Base URL del backend REST de administración.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por petición, en segundos.",
    )
    user_agent: str = Field(default="astro-admin/0.1", min_length=1)
    default_page_limit: int = Field(
        default=10,
        gt=0,
        le=100,
        description="Tamaño de página por defecto de los listados.",
    )
    session_file: Path | None = Field(
        default=None,
        description="Fichero del token de sesión; por defecto en el directorio de usuario.",
    )
    log_level: str = Field(default="WARNING", description="DEBUG, INFO, WARNING o ERROR.")

    def resolved_session_file(self) -> Path:
        return self.session_file or get_user_config_dir() / "session.json"
