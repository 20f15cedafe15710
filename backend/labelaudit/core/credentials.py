"""Credential sources for the inference provider.

The extractor never reads the environment directly; it asks an injected
``CredentialProvider`` at call time.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from labelaudit.core.config import Settings


class CredentialProvider(Protocol):
    def get_api_key(self) -> str | None:
        """Return the inference API key, or ``None``/empty when unavailable."""


class SettingsCredentials:
    """Reads ``GEMINI_API_KEY`` (or ``API_KEY``) through the settings layer.

    A fresh ``Settings`` is built on every lookup so a key set or rotated after
    start-up is picked up without a restart.
    """

    def __init__(self, settings_factory: Callable[[], Settings] = Settings) -> None:
        self._settings_factory = settings_factory

    def get_api_key(self) -> str | None:
        key = self._settings_factory().gemini_api_key.strip()
        return key or None


class StaticCredentials:
    """Fixed key, mostly for tests and embedding."""

    def __init__(self, api_key: str | None) -> None:
        self._api_key = api_key

    def get_api_key(self) -> str | None:
        return self._api_key
