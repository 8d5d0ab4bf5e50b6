"""Contratos hacia el modelo generativo.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El gateway y el controlador se prueban con fakes, sin SDK ni red.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import SentenceAnalysis


@runtime_checkable
class TextModel(Protocol):
    """Cliente mínimo de un modelo generativo.

    Reglas de diseño:
    - `generate` es asíncrono porque hace I/O (HTTP).
    - Devuelve el texto crudo de la respuesta (o None si vino vacía).
    - Los errores de transporte se propagan tal cual; si traen `status_code`
      el gateway lo usa para decidir si reintenta.
    """

    async def generate(self, prompt: str, *, expect_json: bool) -> str | None:
        ...


@runtime_checkable
class SyntaxGateway(Protocol):
    """Lo que el controlador de interacción necesita del gateway."""

    async def analyze_sentence(self, sentence: str) -> SentenceAnalysis | None:
        ...

    async def generate_sentence(self, criteria: str) -> str | None:
        ...
