"""Entry point de desarrollo (sin instalar el paquete).

Uso:
- `python main.py users list`

El código vive en `src/` (layout tipo "src"); sin un `pip install -e .`
Python no encuentra `cli`, `core` ni `adapters`, así que se añade `src/`
al path antes de arrancar la CLI.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    # Terminales Windows en cp1252 no soportan los separadores de Rich.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
