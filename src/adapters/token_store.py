"""Persistencia del token de sesión.

- `FileTokenStore`: JSON en el directorio de configuración del usuario. Es el
  equivalente de la sesión del navegador: sobrevive entre comandos de la CLI.
- `MemoryTokenStore`: para tests y usos embebidos.
"""

from __future__ import annotations

import json
import os
from pathlib import Path


class FileTokenStore:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except ValueError:
            # JSON corrupto o bytes no UTF-8 => sin sesión.
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def write(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"token": token}) + "\n", encoding="utf-8")
        if os.name == "posix":
            self._path.chmod(0o600)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class MemoryTokenStore:
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def read(self) -> str | None:
        return self._token

    def write(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None
