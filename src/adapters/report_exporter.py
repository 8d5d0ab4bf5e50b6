"""Exportación de análisis (HTML/PDF).

Por qué está en adapters:
- PDF/HTML son detalles de infraestructura (WeasyPrint/Jinja2).
- El Core solo conoce `SentenceAnalysis` y la regla de render de sus nodos.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.domain.labels import label_family
from core.domain.models import SentenceAnalysis


_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_FILENAME_UNSAFE_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["label_family"] = lambda label: label_family(label).value
    return env


def default_export_name(analysis: SentenceAnalysis, *, suffix: str = ".pdf") -> str:
    """`analisis_<30 primeros caracteres saneados>` + sufijo."""

    clean = _FILENAME_UNSAFE_RE.sub("_", analysis.full_sentence[:30]).lower()
    return f"analisis_{clean or 'oracion'}{suffix}"


def render_analysis_html(*, analysis: SentenceAnalysis) -> str:
    """Renderiza un HTML autocontenido con el árbol sintáctico."""

    generated_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
    template = _get_env().get_template("analysis.html")
    return template.render(
        analysis=analysis,
        density=analysis.density,
        total_nodes=analysis.total_nodes,
        generated_at=generated_at,
    )


def export_analysis_html(*, analysis: SentenceAnalysis, output_path: Path) -> Path:
    """Exporta el análisis como HTML.

    Sirve como fallback cuando el render PDF no está soportado por el entorno.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_analysis_html(analysis=analysis), encoding="utf-8")
    return output_path


def export_analysis_pdf(*, analysis: SentenceAnalysis, output_path: Path) -> Path:
    """Exporta el análisis como PDF (A4 apaisado).

    WeasyPrint necesita librerías nativas (Pango); se importa aquí para que
    el export HTML siga disponible aunque falten.
    """

    from weasyprint import HTML

    output_path.parent.mkdir(parents=True, exist_ok=True)
    html = render_analysis_html(analysis=analysis)
    HTML(string=html, base_url=str(_TEMPLATES_DIR)).write_pdf(str(output_path))
    return output_path
