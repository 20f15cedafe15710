"""Provider factory — returns the provider instance for a resolved name."""

from __future__ import annotations

import logging

from labelaudit.core.config import get_settings

from ..errors import ConfigurationError
from .base import BaseProvider, ProviderResult
from .mock import MockProvider

logger = logging.getLogger(__name__)

__all__ = ["get_provider", "BaseProvider", "ProviderResult", "MockProvider"]


def get_provider(provider_name: str, *, api_key: str) -> BaseProvider:
    """Return a provider instance for *provider_name* authenticated with *api_key*.

    A provider outside the allowlist or an unknown name raises
    ``ConfigurationError``.
    """
    settings = get_settings()
    name = provider_name.lower().strip()

    if name not in settings.ai_allowed_providers:
        logger.warning("Provider %r not in allowlist", name)
        raise ConfigurationError(f"AI provider {name!r} is not allowed")

    if name == "mock":
        return MockProvider()

    if name == "gemini":
        from .gemini import GeminiProvider

        return GeminiProvider(api_key=api_key, base_url=settings.gemini_base_url)

    logger.warning("Unknown provider %r", name)
    raise ConfigurationError(f"Unknown AI provider {name!r}")
