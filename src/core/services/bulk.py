"""Carga de ficheros JSON para subidas bulk (horóscopos, feedbacks).

Soporta:
- Un array de objetos: [{...}, {...}]
- Un único objeto: {...} (se trata como lista de uno)

Todo se valida con pydantic antes de enviar nada al backend.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from core.domain.errors import InputValidationError

M = TypeVar("M", bound=BaseModel)


def parse_records(raw: str, model: type[M]) -> list[M]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InputValidationError(f"Invalid JSON: {exc.msg} (line {exc.lineno})") from exc

    items = data if isinstance(data, list) else [data]
    records: list[M] = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise InputValidationError(f"Record {index}: expected an object")
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise InputValidationError(f"Record {index}: {location} {first.get('msg', 'is invalid')}") from exc
    return records


def load_records(path: Path, model: type[M]) -> list[M]:
    if not path.exists():
        raise InputValidationError(f"File not found: {path}")
    return parse_records(path.read_text(encoding="utf-8"), model)
