"""Exportación JSON del análisis.

Por qué JSON:
- Interoperabilidad: el documento exportado tiene la misma forma que la
  respuesta del modelo (`fullSentence`, `classification`, `structure`).
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import SentenceAnalysis


def export_analysis_json(*, analysis: SentenceAnalysis, output_path: Path) -> Path:
    """Exporta `SentenceAnalysis` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = analysis.model_dump(mode="json", by_alias=True, exclude_none=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return output_path
