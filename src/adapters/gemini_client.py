"""Cliente Gemini vía el endpoint compatible OpenAI.

Por qué el SDK de OpenAI:
- Gemini expone `/v1beta/openai/` con el mismo contrato de chat completions.
- Los errores llegan tipados (`APIStatusError` con `status_code`,
  `APIConnectionError`, `APITimeoutError`), que es lo que el gateway usa para
  decidir si reintenta.

Los reintentos del SDK van desactivados (`max_retries=0`): la política de
reintentos es del gateway.

El cliente HTTP se abre en la primera llamada: resolver o guardar una clave
(`config status`, `set-key`) no abre conexiones.
"""

from __future__ import annotations

import logging
from typing import Any

from openai import AsyncOpenAI

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.interfaces.model import TextModel
from core.services.credentials import ClientFactory

logger = logging.getLogger(__name__)


def build_gemini_client(*, api_key: str, settings: AppSettings) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=api_key,
        base_url=settings.ai_base_url,
        timeout=settings.ai_timeout_seconds,
        max_retries=0,
        http_client=build_async_client(settings),
    )


class GeminiModel(TextModel):
    """Implementa `TextModel` sobre chat completions."""

    def __init__(self, *, api_key: str, settings: AppSettings) -> None:
        self._api_key = api_key
        self._settings = settings
        self._client: AsyncOpenAI | None = None

    @property
    def model(self) -> str:
        return self._settings.ai_model

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = build_gemini_client(api_key=self._api_key, settings=self._settings)
        return self._client

    async def generate(self, prompt: str, *, expect_json: bool) -> str | None:
        kwargs: dict[str, Any] = {}
        if expect_json:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._get_client().chat.completions.create(
            model=self._settings.ai_model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self._settings.ai_temperature,
            **kwargs,
        )
        if not response.choices:
            logger.warning("Gemini returned no choices")
            return None
        return response.choices[0].message.content

    async def aclose(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.close()


def gemini_model_factory(settings: AppSettings) -> ClientFactory:
    """Factoría que el `CredentialStore` usa para inicializar clientes."""

    def _factory(api_key: str) -> TextModel:
        return GeminiModel(api_key=api_key, settings=settings)

    return _factory
