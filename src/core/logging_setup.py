"""Configuración de logging.

Un único punto de entrada (`setup_logging`) para la CLI y los tests. La salida
va por Rich para no mezclar formatos con las tablas de la consola.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


class ExtraFieldsFormatter(logging.Formatter):
    """Añade los campos pasados en `extra` al final de la línea."""

    _STANDARD_ATTRS = {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "taskName",
        "extra_fields",
    }

    def format(self, record: logging.LogRecord) -> str:
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS and not key.startswith("_")
        }
        record.extra_fields = ""
        if extras:
            formatted = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
            record.extra_fields = f" | {formatted}"
        return super().format(record)


def setup_logging(level: str = "WARNING", *, console: Console | None = None) -> None:
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(ExtraFieldsFormatter("%(name)s | %(message)s%(extra_fields)s"))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)

    # httpx loguea cada request en INFO; solo lo queremos en DEBUG.
    if logging.getLogger().level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
