"""Modos de interacción.

Centraliza los dos modos de la herramienta (analizar / generar) en la capa
de dominio para que CLI y servicios compartan una única fuente de verdad.
"""

from __future__ import annotations

from enum import Enum


class AppMode(str, Enum):
    """Modo activo de la sesión interactiva."""

    ANALYZE = "analyze"
    GENERATE = "generate"

    @classmethod
    def from_command(cls, command: str) -> "AppMode | None":
        """Traduce los comandos de sesión (`:analizar`, `:generar`) a un modo."""

        name = command.strip().lower().lstrip(":")
        return _COMMANDS.get(name)

    def label(self) -> str:
        """Etiqueta legible para prompts y logging."""

        return "Analizar oración" if self is AppMode.ANALYZE else "Generar oración"


_COMMANDS: dict[str, AppMode] = {
    "analizar": AppMode.ANALYZE,
    "analyze": AppMode.ANALYZE,
    "generar": AppMode.GENERATE,
    "generate": AppMode.GENERATE,
}
