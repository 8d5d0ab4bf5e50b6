"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar árbol/paneles en los comandos y en la sesión interactiva.

Regla de render del árbol: un nodo con hijos muestra solo su etiqueta; una
hoja muestra su fragmento de texto y su etiqueta. Sintagmas y oraciones se
marcan con una línea de alcance (`─`).
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree

from core.domain.labels import LabelFamily, label_family
from core.domain.models import Density, SentenceAnalysis, SyntacticElement


LABEL_STYLES: dict[LabelFamily, str] = {
    LabelFamily.SUBJECT: "bold sky_blue1",
    LabelFamily.PREDICATE: "bold spring_green2",
    LabelFamily.CLAUSE: "bold hot_pink",
    LabelFamily.COMPLEMENT: "bold gold1",
    LabelFamily.HEAD: "bold medium_purple1",
    LabelFamily.LINK: "bold dark_orange",
    LabelFamily.PHRASE: "bold cyan",
    LabelFamily.OTHER: "bold grey70",
}

_GUIDES: dict[Density, str] = {
    "normal": "tree.line",
    "compact": "dim",
    "super-compact": "dim",
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("Analizador Sintáctico (NGLE)", style="bold sky_blue1")
    subtitle = Text("Análisis de oraciones • Generación con IA • Gemini", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="sky_blue1", padding=(1, 4)))


def node_label(element: SyntacticElement, *, density: Density = "normal") -> Text:
    style = LABEL_STYLES[label_family(element.label)]
    label = Text(element.label.upper(), style=style)
    if element.is_phrase:
        label = Text.assemble(Text("─ ", style=style), label)
    text = element.display_text
    if text is None:
        return label
    separator = " " if density == "super-compact" else "  "
    return Text.assemble(Text(text, style="bold white"), separator, label)


def _add_children(branch: Tree, element: SyntacticElement, density: Density) -> None:
    for child in element.iter_children():
        sub = branch.add(node_label(child, density=density))
        _add_children(sub, child, density)


def build_syntax_tree(analysis: SentenceAnalysis) -> Tree:
    """Árbol Rich con la estructura; la raíz es la oración completa."""

    density = analysis.density
    root = Tree(
        Text(analysis.full_sentence, style="bold"),
        guide_style=_GUIDES[density],
    )
    for element in analysis.structure:
        branch = root.add(node_label(element, density=density))
        _add_children(branch, element, density)
    return root


def build_analysis_panel(analysis: SentenceAnalysis) -> Panel:
    """Panel con oración, clasificación y árbol sintáctico."""

    header = Text()
    header.append("Oración analizada: ", style="bold sky_blue1")
    header.append(analysis.full_sentence + "\n")
    header.append("Clasificación: ", style="bold sky_blue1")
    header.append(analysis.classification)

    footer = Text(f"{analysis.total_nodes} nodos · densidad {analysis.density}", style="dim")
    body = Group(header, Text(""), build_syntax_tree(analysis), Text(""), footer)
    return Panel(body, title=Text("Estructura sintáctica", style="bold sky_blue1"), border_style="sky_blue1")


def build_generated_panel(sentence: str) -> Panel:
    return Panel(
        Text(sentence, style="bold white"),
        title=Text("Oración generada", style="bold dark_cyan"),
        border_style="dark_cyan",
    )


def build_error_panel(message: str) -> Panel:
    return Panel(Text(message), title=Text("Error", style="bold red"), border_style="red")
