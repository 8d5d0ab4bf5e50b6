"""Comandos de configuración y diagnóstico (clave API, conectividad)."""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.report_exporter import export_analysis_pdf
from cli.services import build_credential_store
from core.config import AppSettings
from core.domain.errors import EmptyCredentialError
from core.domain.models import SentenceAnalysis

app = typer.Typer(no_args_is_help=True, help="Configuración de la clave API y diagnóstico del entorno.")

_console = Console()


def _mask(key: str | None) -> str:
    if not key:
        return "-"
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}…{key[-4:]}"


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_pdf() -> tuple[bool, str]:
    """Genera un PDF mínimo para detectar problemas de WeasyPrint."""

    try:
        with tempfile.TemporaryDirectory() as tmp:
            analysis = SentenceAnalysis(full_sentence="Llueve", classification="doctor", structure=[])
            export_analysis_pdf(analysis=analysis, output_path=Path(tmp) / "_doctor_test.pdf")
        return True, "OK"
    except Exception as exc:
        return False, str(exc)


@app.command()
def status(
    check_network: bool = typer.Option(True, "--network/--no-network", help="Comprobar conectividad con el proveedor."),
    check_pdf: bool = typer.Option(True, "--pdf/--no-pdf", help="Comprobar el render PDF (WeasyPrint)."),
) -> None:
    """Muestra de dónde sale la clave activa y el estado del entorno."""

    settings = AppSettings()
    store = build_credential_store(settings)

    table = Table(title="Analizador Sintáctico · Estado")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if store.is_configured():
        source = store.source.value if store.source else "?"
        table.add_row("Clave API", "OK", f"{_mask(store.resolve_active())} (origen: {source})")
    else:
        table.add_row("Clave API", "FALTA", "Usa `sintaxis config set-key` o define GEMINI_API_KEY")
    table.add_row("Clave guardada", "OK" if store.persisted_key() else "-", str(settings.credentials_path))
    table.add_row("AI base_url", "OK", settings.ai_base_url)
    table.add_row("AI model", "OK", settings.ai_model)
    table.add_row(
        "Reintentos",
        "OK",
        f"{settings.ai_max_attempts} intentos, backoff {settings.ai_backoff_base_seconds:g}^n s",
    )

    if check_network:
        ok_http, detail_http = asyncio.run(_check_http(settings.ai_base_url, settings))
        table.add_row("Conectividad", "OK" if ok_http else "FAIL", detail_http)

    if check_pdf:
        ok_pdf, detail_pdf = _check_pdf()
        table.add_row("PDF (WeasyPrint)", "OK" if ok_pdf else "FAIL", detail_pdf if not ok_pdf else "OK")

    _console.print(table)


@app.command(name="set-key")
def set_key(
    api_key: str = typer.Option(
        ...,
        "--api-key",
        prompt="Clave API de Gemini",
        hide_input=True,
        help="Clave de Google AI Studio (https://aistudio.google.com/app/apikey).",
    ),
) -> None:
    """Guarda la clave API en la configuración de usuario y la activa."""

    settings = AppSettings()
    store = build_credential_store(settings)
    try:
        store.configure(api_key)
    except EmptyCredentialError as exc:
        raise typer.BadParameter(str(exc)) from exc

    _console.print(f"[green]Clave API guardada en:[/green] {settings.credentials_path}")


@app.command(name="clear-key")
def clear_key() -> None:
    """Borra la clave guardada; se vuelve a la del entorno o al fallback."""

    settings = AppSettings()
    store = build_credential_store(settings)
    store.clear()

    if store.is_configured():
        source = store.source.value if store.source else "?"
        _console.print(f"[yellow]Clave guardada eliminada.[/yellow] Clave activa ahora: origen {source}.")
    else:
        _console.print("[yellow]Clave guardada eliminada.[/yellow] No queda ninguna clave activa.")
