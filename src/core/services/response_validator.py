"""Shape validation for decoded model responses.

The model is asked for a `SentenceAnalysis` document but nothing guarantees
it complies. This module decides, without raising, whether an arbitrary
decoded JSON value has the expected shape:

- `fullSentence` and `classification` are strings;
- `structure` is a list;
- every node has string `text` and `label`, and `children`, when present,
  is a list whose nodes satisfy the same rule.

A singleton list wrapping the object is accepted (some models wrap the
answer in an array); the first element is used. A mismatch is an expected
outcome, so it is reported as `None` and the payload is logged.

The shape walk keeps its own stack, so depth is not bounded by the
interpreter's recursion limit. Trees too deep for model validation are
rejected the same way as malformed ones.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from core.domain.models import SentenceAnalysis

logger = logging.getLogger(__name__)


def _is_valid_structure(elements: Any) -> bool:
    pending = [elements]
    while pending:
        nodes = pending.pop()
        if not isinstance(nodes, list):
            return False
        for element in nodes:
            if not isinstance(element, dict):
                return False
            if not isinstance(element.get("text"), str) or not isinstance(element.get("label"), str):
                return False
            children = element.get("children")
            if children is not None:
                pending.append(children)
    return True


def unwrap_document(data: Any) -> Any:
    """Devuelve el objeto a validar (primer elemento si viene en una lista)."""

    if isinstance(data, list):
        return data[0] if data else None
    return data


def is_sentence_analysis(data: Any) -> bool:
    candidate = unwrap_document(data)
    return (
        isinstance(candidate, dict)
        and isinstance(candidate.get("fullSentence"), str)
        and isinstance(candidate.get("classification"), str)
        and _is_valid_structure(candidate.get("structure"))
    )


def validate_analysis(data: Any) -> SentenceAnalysis | None:
    """Return a `SentenceAnalysis` for a conforming document, else None."""

    candidate = unwrap_document(data)
    if not is_sentence_analysis(candidate):
        logger.error(
            "Parsed JSON does not match the SentenceAnalysis shape: %s",
            _dump_for_log(candidate),
        )
        return None
    try:
        return SentenceAnalysis.model_validate(candidate)
    except ValidationError as exc:
        first = exc.errors(include_input=False, include_url=False)[0]
        logger.error(
            "SentenceAnalysis rejected by model validation: %d error(s), first: %s (%s)",
            exc.error_count(),
            first["msg"],
            first["type"],
        )
        return None
    except RecursionError:
        logger.error("SentenceAnalysis rejected: tree nesting is too deep to build")
        return None


def _dump_for_log(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, indent=2)
    except (TypeError, ValueError):
        return repr(value)
    except RecursionError:
        return "<payload nested too deeply to print>"
