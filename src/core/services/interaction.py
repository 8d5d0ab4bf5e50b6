"""Interaction state for the analyze/generate workflow.

The controller owns the transient view state (idle, loading, success, error)
and the two result slots (structured analysis, generated sentence). UI layers
call its coroutines and read `state`; no printing happens here.

Every action takes a request token. A completion only lands if its token is
still the newest one, so a slow response can never overwrite the state of a
request that started after it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from core.domain.mode import AppMode
from core.domain.models import SentenceAnalysis
from core.interfaces.model import SyntaxGateway

logger = logging.getLogger(__name__)


EMPTY_SENTENCE_MESSAGE = "Por favor, ingresa una oración para analizar."
EMPTY_CRITERIA_MESSAGE = "Por favor, introduce los criterios para generar la oración."
MALFORMED_ANALYSIS_MESSAGE = (
    "No se pudo obtener un análisis válido. La respuesta del modelo podría estar vacía o malformada."
)
GENERATION_FAILED_MESSAGE = "No se pudo generar la oración. Inténtalo de nuevo."
ANALYSIS_ERROR_FALLBACK = "Ocurrió un error al analizar la oración."
GENERATION_ERROR_FALLBACK = "Ocurrió un error al generar la oración."


class Status(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ViewState:
    """Snapshot of what the UI should show."""

    mode: AppMode = AppMode.ANALYZE
    status: Status = Status.IDLE
    analysis: SentenceAnalysis | None = None
    generated_sentence: str | None = None
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is Status.LOADING


class InteractionController:
    """Orchestrates user actions against a `SyntaxGateway`."""

    def __init__(self, gateway: SyntaxGateway, *, mode: AppMode = AppMode.ANALYZE) -> None:
        self._gateway = gateway
        self._state = ViewState(mode=mode)
        self._token = 0

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def current_token(self) -> int:
        return self._token

    def switch_mode(self, mode: AppMode) -> ViewState:
        """Change mode; the result slot of the other mode is cleared."""

        self._token += 1
        if mode is AppMode.GENERATE:
            self._state = replace(self._state, mode=mode, analysis=None, error=None)
        else:
            self._state = replace(self._state, mode=mode, generated_sentence=None, error=None)
        kept = self._state.generated_sentence if mode is AppMode.GENERATE else self._state.analysis
        self._state = replace(self._state, status=Status.SUCCESS if kept else Status.IDLE)
        return self._state

    async def analyze(self, text: str) -> ViewState:
        if not (text or "").strip():
            self._token += 1
            self._state = replace(self._state, status=Status.ERROR, error=EMPTY_SENTENCE_MESSAGE, analysis=None)
            return self._state

        token = self._begin(analysis=None)
        try:
            result = await self._gateway.analyze_sentence(text)
        except Exception as exc:
            logger.exception("Analysis error")
            return self._complete(token, status=Status.ERROR, error=str(exc) or ANALYSIS_ERROR_FALLBACK)

        if result is None:
            return self._complete(token, status=Status.ERROR, error=MALFORMED_ANALYSIS_MESSAGE)
        return self._complete(token, status=Status.SUCCESS, analysis=result)

    async def generate(self, criteria: str) -> ViewState:
        if not (criteria or "").strip():
            self._token += 1
            self._state = replace(
                self._state, status=Status.ERROR, error=EMPTY_CRITERIA_MESSAGE, generated_sentence=None
            )
            return self._state

        token = self._begin(generated_sentence=None, analysis=None)
        try:
            text = await self._gateway.generate_sentence(criteria)
        except Exception as exc:
            logger.exception("Generation error")
            return self._complete(token, status=Status.ERROR, error=str(exc) or GENERATION_ERROR_FALLBACK)

        if not text:
            return self._complete(token, status=Status.ERROR, error=GENERATION_FAILED_MESSAGE)
        return self._complete(token, status=Status.SUCCESS, generated_sentence=text, analysis=None)

    def _begin(self, **cleared: object) -> int:
        self._token += 1
        self._state = replace(self._state, status=Status.LOADING, error=None, **cleared)
        return self._token

    def _complete(self, token: int, **changes: object) -> ViewState:
        if token != self._token:
            logger.info("Discarding stale response for request %s (current %s)", token, self._token)
            return self._state
        self._state = replace(self._state, **changes)
        return self._state
