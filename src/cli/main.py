"""CLI principal (Typer).

Comandos:
- `analyze`: analiza una oración y pinta su árbol sintáctico.
- `generate`: genera una oración a partir de criterios (opcionalmente la analiza).
- `interactive`: sesión con modos analizar/generar sobre un mismo controlador.
- `config`: clave API y diagnóstico.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Awaitable, Optional, TypeVar

import typer
from rich.console import Console

from adapters.json_exporter import export_analysis_json
from adapters.report_exporter import default_export_name, export_analysis_html, export_analysis_pdf
from cli import doctor
from cli.logging_config import setup_logging
from cli.services import build_controller, build_credential_store
from cli.ui_components import build_analysis_panel, build_error_panel, build_generated_panel, print_banner
from core.config import AppSettings
from core.domain.errors import CREDENTIAL_NOT_CONFIGURED_MESSAGE
from core.domain.mode import AppMode
from core.domain.models import SentenceAnalysis
from core.services.credentials import CredentialStore
from core.services.interaction import InteractionController, Status, ViewState

app = typer.Typer(
    no_args_is_help=True,
    help="Analizador sintáctico del español (NGLE) con Gemini.",
)
app.add_typer(doctor.app, name="config")

console = Console()

T = TypeVar("T")


async def _closing(credentials: CredentialStore, flow: Awaitable[T]) -> T:
    """Ejecuta `flow` y cierra el cliente del modelo en el mismo event loop."""

    try:
        return await flow
    finally:
        await credentials.aclose()


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Logging detallado (DEBUG)."),
) -> None:
    settings = AppSettings()
    setup_logging(settings.log_level, debug=debug)


def _resolve_export_path(path: Path, analysis: SentenceAnalysis, suffix: str) -> Path:
    if path.is_dir():
        return path / default_export_name(analysis, suffix=suffix)
    return path


def _export(
    analysis: SentenceAnalysis,
    *,
    pdf: Path | None,
    html: Path | None,
    json_path: Path | None,
) -> None:
    if json_path is not None:
        out = export_analysis_json(analysis=analysis, output_path=_resolve_export_path(json_path, analysis, ".json"))
        console.print(f"[green]JSON guardado en:[/green] {out}")
    if html is not None:
        out = export_analysis_html(analysis=analysis, output_path=_resolve_export_path(html, analysis, ".html"))
        console.print(f"[green]HTML guardado en:[/green] {out}")
    if pdf is not None:
        target = _resolve_export_path(pdf, analysis, ".pdf")
        try:
            out = export_analysis_pdf(analysis=analysis, output_path=target)
            console.print(f"[green]PDF guardado en:[/green] {out}")
        except Exception as exc:
            fallback = export_analysis_html(analysis=analysis, output_path=target.with_suffix(".html"))
            console.print(f"[yellow]No se pudo generar el PDF ({exc}).[/yellow] HTML guardado en: {fallback}")


def _fail_on_error(state: ViewState) -> None:
    if state.status is Status.ERROR:
        console.print(build_error_panel(state.error or "Error desconocido."))
        raise typer.Exit(code=1)


async def _analyze(controller: InteractionController, sentence: str) -> ViewState:
    with console.status("Analizando oración..."):
        return await controller.analyze(sentence)


async def _generate(controller: InteractionController, criteria: str) -> ViewState:
    with console.status("Generando oración..."):
        return await controller.generate(criteria)


@app.command()
def analyze(
    sentence: str = typer.Argument(..., help="Oración en español a analizar."),
    as_json: bool = typer.Option(False, "--json", help="Imprime el análisis como JSON en vez del árbol."),
    export_pdf: Optional[Path] = typer.Option(None, "--export-pdf", help="Fichero (o carpeta) PDF de salida."),
    export_html: Optional[Path] = typer.Option(None, "--export-html", help="Fichero (o carpeta) HTML de salida."),
    export_json: Optional[Path] = typer.Option(None, "--export-json", help="Fichero (o carpeta) JSON de salida."),
) -> None:
    """Analiza sintácticamente una oración según la NGLE."""

    settings = AppSettings()
    credentials = build_credential_store(settings)
    controller = build_controller(settings, mode=AppMode.ANALYZE, credentials=credentials)
    state = asyncio.run(_closing(credentials, _analyze(controller, sentence)))
    _fail_on_error(state)

    assert state.analysis is not None
    if as_json:
        payload = state.analysis.model_dump(mode="json", by_alias=True, exclude_none=True)
        console.print_json(json.dumps(payload, ensure_ascii=False))
    else:
        console.print(build_analysis_panel(state.analysis))
    _export(state.analysis, pdf=export_pdf, html=export_html, json_path=export_json)


@app.command()
def generate(
    criteria: str = typer.Argument(..., help='Criterios, p.ej. "Oración condicional con verbo en subjuntivo".'),
    then_analyze: bool = typer.Option(False, "--analyze", help="Analiza a continuación la oración generada."),
) -> None:
    """Genera una oración que cumpla los criterios dados."""

    settings = AppSettings()
    credentials = build_credential_store(settings)
    controller = build_controller(settings, mode=AppMode.GENERATE, credentials=credentials)

    async def _flow() -> tuple[ViewState, ViewState | None]:
        generated = await _generate(controller, criteria)
        if generated.status is not Status.SUCCESS or not then_analyze:
            return generated, None
        sentence = generated.generated_sentence or ""
        controller.switch_mode(AppMode.ANALYZE)
        return generated, await _analyze(controller, sentence)

    generated, analyzed = asyncio.run(_closing(credentials, _flow()))
    _fail_on_error(generated)
    console.print(build_generated_panel(generated.generated_sentence or ""))

    if analyzed is not None:
        _fail_on_error(analyzed)
        assert analyzed.analysis is not None
        console.print(build_analysis_panel(analyzed.analysis))


_SESSION_HELP = (
    "[dim]Comandos: [bold]:analizar[/bold], [bold]:generar[/bold], [bold]:salir[/bold]. "
    "Cualquier otro texto se envía al modo activo.[/dim]"
)


def _render_state(state: ViewState) -> None:
    if state.status is Status.ERROR:
        console.print(build_error_panel(state.error or "Error desconocido."))
    elif state.mode is AppMode.ANALYZE and state.analysis is not None:
        console.print(build_analysis_panel(state.analysis))
    elif state.mode is AppMode.GENERATE and state.generated_sentence:
        console.print(build_generated_panel(state.generated_sentence))


async def _session(controller: InteractionController) -> None:
    while True:
        mode = controller.state.mode
        prompt = "[bold sky_blue1]oración[/] › " if mode is AppMode.ANALYZE else "[bold dark_cyan]criterios[/] › "
        try:
            line = await asyncio.to_thread(console.input, prompt)
        except (EOFError, KeyboardInterrupt):
            console.print()
            return

        command = line.strip()
        if command.lower() in (":salir", ":quit", ":q"):
            return
        if command.startswith(":"):
            new_mode = AppMode.from_command(command)
            if new_mode is None:
                console.print(_SESSION_HELP)
                continue
            controller.switch_mode(new_mode)
            console.print(f"[dim]Modo: {new_mode.label()}[/dim]")
            continue

        if mode is AppMode.ANALYZE:
            state = await _analyze(controller, line)
        else:
            state = await _generate(controller, line)
        _render_state(state)


@app.command()
def interactive(
    mode: AppMode = typer.Option(AppMode.ANALYZE, "--mode", help="Modo inicial."),
) -> None:
    """Sesión interactiva con modos analizar/generar."""

    settings = AppSettings()
    credentials = build_credential_store(settings)
    controller = build_controller(settings, mode=mode, credentials=credentials)
    print_banner(console)
    if not credentials.is_configured():
        console.print(build_error_panel(CREDENTIAL_NOT_CONFIGURED_MESSAGE))
    console.print(_SESSION_HELP)
    asyncio.run(_closing(credentials, _session(controller)))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
