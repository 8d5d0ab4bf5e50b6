"""Familias de etiquetas gramaticales.

Las etiquetas son texto libre; para colorear el árbol solo se agrupan por
prefijos reconocibles. Cualquier etiqueta desconocida cae en `OTHER`.
"""

from __future__ import annotations

from enum import Enum


class LabelFamily(str, Enum):
    SUBJECT = "subject"
    PREDICATE = "predicate"
    CLAUSE = "clause"
    COMPLEMENT = "complement"
    HEAD = "head"
    LINK = "link"
    PHRASE = "phrase"
    OTHER = "other"


_COMPLEMENT_TAGS = ("CD", "CI", "CC", "CRÉG", "CREG", "CAG", "CN", "CADJ", "CADV", "ATRIB", "CPRED")


def label_family(label: str) -> LabelFamily:
    text = (label or "").strip()
    upper = text.upper()

    if upper.startswith("ORACIÓN") or upper.startswith("ORACION") or upper.startswith("PROP"):
        return LabelFamily.CLAUSE
    if "SUJETO" in upper or upper == "ST":
        return LabelFamily.SUBJECT
    if "PREDICADO" in upper:
        return LabelFamily.PREDICATE
    if upper.endswith("(N)"):
        return LabelFamily.HEAD
    if upper in ("NX", "NEXO") or upper.startswith("NX "):
        return LabelFamily.LINK
    if " - " in text:
        function = upper.split(" - ", 1)[1]
        if function.startswith(_COMPLEMENT_TAGS):
            return LabelFamily.COMPLEMENT
    if upper.startswith("S"):
        return LabelFamily.PHRASE
    return LabelFamily.OTHER
