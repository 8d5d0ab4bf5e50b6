"""Shared fakes and fixtures."""

from __future__ import annotations

import json

import pytest

from adapters.env_file_store import MemoryStore
from adapters.ngle_prompts import ONE_SHOT_JSON
from adapters.syntax_analyst import ModelGateway
from core.services.credentials import CredentialStore


class FakeStatusError(Exception):
    """Mimics an SDK error carrying an HTTP status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(message or f"Error code: {status_code}")
        self.status_code = status_code


class FakeModel:
    """Scripted `TextModel`: each call pops the next reply (str, None or exception)."""

    def __init__(self, replies: list[object] | None = None, key: str = "test-key") -> None:
        self.replies = list(replies or [])
        self.key = key
        self.calls: list[tuple[str, bool]] = []

    async def generate(self, prompt: str, *, expect_json: bool) -> str | None:
        self.calls.append((prompt, expect_json))
        reply = self.replies.pop(0) if self.replies else None
        if isinstance(reply, BaseException):
            raise reply
        return reply  # type: ignore[return-value]


class SleepRecorder:
    def __init__(self) -> None:
        self.waits: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


@pytest.fixture
def one_shot_json() -> str:
    return ONE_SHOT_JSON


@pytest.fixture
def one_shot_data() -> dict:
    return json.loads(ONE_SHOT_JSON)


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_gateway(sleep):
    """Build a gateway whose store hands out `model` (or no client at all)."""

    def _make(model: FakeModel | None, *, max_attempts: int = 3) -> ModelGateway:
        store = CredentialStore(
            storage=MemoryStore(),
            client_factory=lambda key: model,
            environment_key="env-key" if model is not None else None,
        )
        return ModelGateway(store, max_attempts=max_attempts, backoff_base=2.0, sleep=sleep)

    return _make
