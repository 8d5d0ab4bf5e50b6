"""Ensamblado de servicios para la CLI.

Un único sitio donde se conectan adaptadores concretos (Gemini, `.env` de
usuario) con el Core. Los tests construyen los mismos objetos con fakes.
"""

from __future__ import annotations

from adapters.env_file_store import EnvFileStore
from adapters.gemini_client import gemini_model_factory
from adapters.syntax_analyst import ModelGateway
from core.config import AppSettings
from core.domain.mode import AppMode
from core.services.credentials import CredentialStore
from core.services.interaction import InteractionController


def build_credential_store(settings: AppSettings) -> CredentialStore:
    return CredentialStore(
        storage=EnvFileStore(settings.credentials_path),
        client_factory=gemini_model_factory(settings),
        environment_key=settings.api_key,
        fallback_key=settings.fallback_api_key,
    )


def build_gateway(settings: AppSettings, credentials: CredentialStore | None = None) -> ModelGateway:
    credentials = credentials or build_credential_store(settings)
    return ModelGateway.from_settings(credentials, settings)


def build_controller(
    settings: AppSettings,
    *,
    mode: AppMode = AppMode.ANALYZE,
    credentials: CredentialStore | None = None,
) -> InteractionController:
    return InteractionController(build_gateway(settings, credentials), mode=mode)
