"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- El árbol sintáctico llega como JSON del modelo; Pydantic lo materializa sin
  referencias compartidas, así que no puede haber ciclos.

Nota:
- Estos modelos describen *qué* es un análisis, no *cómo* se obtiene ni cómo
  se pinta. La regla de render (hoja vs. nodo con hijos) sí vive aquí porque
  la comparten la CLI y los exportadores.
"""

from __future__ import annotations

from typing import Iterator, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


Density = Literal["normal", "compact", "super-compact"]

COMPACT_THRESHOLD = 15
SUPER_COMPACT_THRESHOLD = 30

_PHRASE_PREFIXES = ("Oración", "Prop")


class SyntacticElement(BaseModel):
    """Un constituyente sintáctico (nodo del árbol).

    `label` es texto libre: la guía de etiquetas NGLE del prompt es
    orientativa, no un vocabulario cerrado.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    text: str = Field(
        ...,
        description="Fragmento de la oración que cubre este nodo.",
    )
    label: str = Field(
        ...,
        description="Etiqueta gramatical (p.ej. 'SN Sujeto', 'V (N)').",
    )
    children: list[SyntacticElement] | None = Field(
        default=None,
        description="Subconstituyentes ordenados; ausente o vacío => hoja.",
    )

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def is_leaf(self) -> bool:
        return not self.has_children

    @property
    def display_text(self) -> str | None:
        """Texto a mostrar: solo las hojas muestran su fragmento."""

        return self.text if self.is_leaf else None

    @property
    def is_phrase(self) -> bool:
        """Sintagmas y oraciones llevan línea de alcance al pintarse."""

        return self.label.upper().startswith("S") or self.label.startswith(_PHRASE_PREFIXES)

    def iter_children(self) -> Iterator[SyntacticElement]:
        return iter(self.children or ())

    def walk(self) -> Iterator[SyntacticElement]:
        """Recorrido en preorden del subárbol (incluye este nodo)."""

        yield self
        for child in self.iter_children():
            yield from child.walk()


def count_nodes(elements: list[SyntacticElement]) -> int:
    return sum(1 for element in elements for _ in element.walk())


def density_for(total_nodes: int) -> Density:
    """Árboles grandes se compactan para que quepan en pantalla/PDF."""

    if total_nodes >= SUPER_COMPACT_THRESHOLD:
        return "super-compact"
    if total_nodes >= COMPACT_THRESHOLD:
        return "compact"
    return "normal"


class SentenceAnalysis(BaseModel):
    """Resultado raíz de un análisis.

    Solo se construye a partir de una respuesta del modelo ya validada; se
    reemplaza entero en cada análisis nuevo.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    full_sentence: str = Field(
        ...,
        alias="fullSentence",
        description="Oración analizada o generada.",
    )
    classification: str = Field(
        ...,
        description="Clasificación gramatical en texto libre.",
    )
    structure: list[SyntacticElement] = Field(
        ...,
        description="Constituyentes de primer nivel (p.ej. sujeto y predicado como hermanos).",
    )

    @property
    def total_nodes(self) -> int:
        return count_nodes(self.structure)

    @property
    def density(self) -> Density:
        return density_for(self.total_nodes)
