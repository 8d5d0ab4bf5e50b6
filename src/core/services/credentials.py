"""Credential resolution and persistence.

The store owns the only shared mutable state of the application: the active
API key with its model client, and the persisted key. It is an explicit
object handed to the gateway instead of module-level globals, so tests can
build one with fakes.

Start-up precedence (first source whose client initializes wins):
environment-provided key, then persisted key, then the public fallback.
An explicitly configured key replaces whatever is active.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from core.domain.errors import EmptyCredentialError
from core.interfaces.model import TextModel
from core.interfaces.storage import KeyValueStore

logger = logging.getLogger(__name__)


STORAGE_KEY = "GEMINI_API_KEY"

ClientFactory = Callable[[str], TextModel]


class CredentialSource(str, Enum):
    CONFIGURED = "configured"
    ENVIRONMENT = "environment"
    PERSISTED = "persisted"
    FALLBACK = "fallback"


class CredentialStore:
    """Active credential slot plus its persisted copy.

    `configure` and `clear` swap the whole state at once: the new client is
    built before anything is replaced, so callers never observe a key paired
    with another key's client.
    """

    def __init__(
        self,
        *,
        storage: KeyValueStore,
        client_factory: ClientFactory,
        environment_key: str | None = None,
        fallback_key: str | None = None,
    ) -> None:
        self._storage = storage
        self._client_factory = client_factory
        self._environment_key = (environment_key or "").strip() or None
        self._fallback_key = (fallback_key or "").strip() or None

        self._key: str | None = None
        self._client: TextModel | None = None
        self._source: CredentialSource | None = None

        self._initialize(
            (CredentialSource.ENVIRONMENT, self._environment_key),
            (CredentialSource.PERSISTED, self._read_persisted()),
            (CredentialSource.FALLBACK, self._fallback_key),
        )

    @property
    def source(self) -> CredentialSource | None:
        return self._source

    def resolve_active(self) -> str | None:
        """Currently initialized credential, or None."""

        return self._key

    def active_client(self) -> TextModel | None:
        return self._client

    def is_configured(self) -> bool:
        return self._client is not None

    def persisted_key(self) -> str | None:
        return self._read_persisted()

    def configure(self, key: str) -> None:
        """Install `key` as the active credential and persist it."""

        cleaned = (key or "").strip()
        if not cleaned:
            raise EmptyCredentialError()

        client = self._client_factory(cleaned)
        # A failed write leaves the previous credential active.
        self._storage.set(STORAGE_KEY, cleaned)
        self._activate(cleaned, client, CredentialSource.CONFIGURED)
        logger.info("API key configured and persisted")

    async def aclose(self) -> None:
        """Release the transport of the active client, if it opened one."""

        close = getattr(self._client, "aclose", None)
        if close is not None:
            await close()

    def clear(self) -> None:
        """Forget the persisted key and fall back to environment/public keys."""

        self._storage.delete(STORAGE_KEY)
        self._key = None
        self._client = None
        self._source = None
        self._initialize(
            (CredentialSource.ENVIRONMENT, self._environment_key),
            (CredentialSource.FALLBACK, self._fallback_key),
        )

    def _initialize(self, *candidates: tuple[CredentialSource, str | None]) -> None:
        for source, key in candidates:
            if not key:
                continue
            try:
                client = self._client_factory(key)
            except Exception as exc:
                logger.warning("Could not initialize model client from %s key: %s", source.value, exc)
                continue
            self._activate(key, client, source)
            logger.debug("Model client initialized from %s key", source.value)
            return
        logger.info("No API key available; model client not initialized")

    def _activate(self, key: str, client: TextModel, source: CredentialSource) -> None:
        self._key, self._client, self._source = key, client, source

    def _read_persisted(self) -> str | None:
        value = self._storage.get(STORAGE_KEY)
        return (value or "").strip() or None
