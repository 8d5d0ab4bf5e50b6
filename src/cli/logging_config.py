"""Configuración de logging para la CLI.

Los módulos registran con `logging.getLogger(__name__)`; aquí solo se decide
a dónde va la salida. Se usa `RichHandler` para que los diagnósticos convivan
con los paneles de Rich sin romper el layout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str | int = logging.WARNING, *, debug: bool = False, console: Console | None = None) -> None:
    """Instala un único `RichHandler` en el root logger."""

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if debug:
        level = logging.DEBUG
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=debug,
        rich_tracebacks=debug,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # El SDK y httpx son muy verbosos en DEBUG.
    for noisy in ("httpx", "httpcore", "openai"):
        logging.getLogger(noisy).setLevel(logging.INFO if debug else logging.WARNING)
