"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (cliente IA, almacenamiento de credenciales) lean
  config de forma consistente.

Las variables se leen una sola vez al arrancar: cambios posteriores en el
entorno no se observan.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_DIR_NAME = "sintaxis-ngle"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def get_default_credentials_file() -> Path:
    return get_user_config_dir() / "credentials.env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="SINTAXIS_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout del cliente HTTP subyacente (segundos).",
    )
    user_agent: str = Field(
        default="sintaxis-ngle/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las peticiones al proveedor IA.",
    )

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SINTAXIS_API_KEY", "GEMINI_API_KEY", "API_KEY", "api_key"),
        description="Credencial por defecto provista por el entorno.",
    )
    fallback_api_key: str = Field(
        default="",
        description="Credencial pública de último recurso (vacía: sin fallback).",
    )
    ai_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        min_length=8,
        description="Base URL compatible OpenAI (Gemini).",
    )
    ai_model: str = Field(
        default="gemini-2.5-flash",
        min_length=1,
        description="Modelo usado para análisis y generación.",
    )
    ai_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout por llamada al proveedor IA (segundos).",
    )
    ai_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="Temperatura de muestreo.",
    )
    ai_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Intentos totales ante fallos transitorios (red, 5xx, respuesta vacía).",
    )
    ai_backoff_base_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Base del backoff exponencial: espera base**intento antes de reintentar.",
    )

    credentials_path: Path = Field(
        default_factory=get_default_credentials_file,
        description="Fichero donde se persiste la clave API configurada por el usuario.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )
