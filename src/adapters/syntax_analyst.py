"""Gateway hacia el modelo generativo (análisis y generación de oraciones).

Responsabilidad:
- Construir el prompt (análisis NGLE o generación por criterios).
- Llamar al cliente activo del `CredentialStore` con reintentos y backoff.
- Decodificar la respuesta (con o sin fences ```json) y validarla como
  `SentenceAnalysis`.

Política de errores:
- Sin credencial: `CredentialNotConfiguredError`, sin reintentos.
- Clave inválida o 4xx: se corta en el primer intento.
- Red, 5xx, timeouts o respuesta vacía: hasta `max_attempts` intentos con
  espera `backoff_base ** intento` entre ellos.
- JSON malformado o con forma incorrecta: devuelve None (no es una excepción).
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Awaitable, Callable

from adapters.ngle_prompts import build_analysis_prompt, build_generation_prompt
from core.config import AppSettings
from core.domain.errors import (
    CredentialNotConfiguredError,
    EmptyResponseError,
    InvalidCredentialError,
    RequestRejectedError,
    ServiceUnavailableError,
)
from core.domain.models import SentenceAnalysis
from core.services.credentials import CredentialStore
from core.services.response_validator import validate_analysis
from core.services.retry import RetryState

logger = logging.getLogger(__name__)


Sleep = Callable[[float], Awaitable[None]]

_JSON_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL | re.IGNORECASE)

_INVALID_KEY_MARKERS = ("api key not valid", "api_key_invalid", "api key expired")


def strip_code_fence(text: str) -> str:
    """Quita un fence markdown envolvente (```json ... ``` o ``` ... ```)."""

    stripped = text.strip()
    match = _JSON_FENCE_RE.match(stripped)
    if match and match.group(1):
        return match.group(1).strip()
    return stripped


def parse_analysis_response(text: str) -> SentenceAnalysis | None:
    """Decodifica y valida la respuesta JSON del modelo; None si no sirve."""

    json_text = strip_code_fence(text)
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse JSON response: %s", exc)
        logger.error("Problematic JSON string that failed to parse: %s", json_text)
        return None
    except RecursionError:
        logger.error("JSON response nests too deeply to decode (%d chars)", len(json_text))
        return None
    return validate_analysis(data)


def _status_code(exc: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def _mentions_invalid_key(exc: BaseException | None) -> bool:
    if exc is None:
        return False
    msg = str(exc).lower()
    return any(marker in msg for marker in _INVALID_KEY_MARKERS)


def _is_client_error(exc: BaseException) -> bool:
    status = _status_code(exc)
    return status is not None and 400 <= status < 500


class ModelGateway:
    """Convierte una petición en lenguaje natural en un resultado validado."""

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        max_attempts: int = 3,
        backoff_base: float = 2.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._credentials = credentials
        self._max_attempts = max_attempts
        self._backoff_base = backoff_base
        self._sleep = sleep

    @classmethod
    def from_settings(cls, credentials: CredentialStore, settings: AppSettings) -> "ModelGateway":
        return cls(
            credentials,
            max_attempts=settings.ai_max_attempts,
            backoff_base=settings.ai_backoff_base_seconds,
        )

    async def analyze_sentence(self, sentence: str) -> SentenceAnalysis | None:
        result = await self.call(build_analysis_prompt(sentence), expect_json=True)
        return result if isinstance(result, SentenceAnalysis) else None

    async def generate_sentence(self, criteria: str) -> str | None:
        result = await self.call(build_generation_prompt(criteria), expect_json=False)
        if isinstance(result, str):
            return result.strip() or None
        return None

    async def call(self, prompt: str, *, expect_json: bool) -> SentenceAnalysis | str | None:
        client = self._credentials.active_client()
        if client is None:
            raise CredentialNotConfiguredError()

        logger.debug("Gemini prompt length: %d", len(prompt))
        retry = RetryState(max_attempts=self._max_attempts, backoff_base=self._backoff_base)

        while not retry.exhausted:
            try:
                text = await client.generate(prompt, expect_json=expect_json)
            except Exception as exc:
                if _mentions_invalid_key(exc):
                    logger.error("Attempt %d failed: invalid API key (%s)", retry.attempt + 1, exc)
                    raise InvalidCredentialError() from exc
                if _is_client_error(exc):
                    status = _status_code(exc)
                    logger.error("Attempt %d failed with HTTP %s, not retrying: %s", retry.attempt + 1, status, exc)
                    if status in (401, 403):
                        raise InvalidCredentialError() from exc
                    raise RequestRejectedError(status) from exc
                delay = retry.record_failure(exc)
                logger.warning("Attempt %d failed: %s", retry.attempt, exc)
            else:
                if text and text.strip():
                    if expect_json:
                        return parse_analysis_response(text)
                    return text.strip()
                delay = retry.record_failure(EmptyResponseError())
                logger.warning("Gemini response text is empty on attempt %d", retry.attempt)

            if delay is not None:
                logger.info("Retrying in %.1fs...", delay)
                await self._sleep(delay)

        logger.error("All %d Gemini API call attempts failed", retry.max_attempts)
        if _mentions_invalid_key(retry.last_error):
            raise InvalidCredentialError() from retry.last_error
        raise ServiceUnavailableError() from retry.last_error
