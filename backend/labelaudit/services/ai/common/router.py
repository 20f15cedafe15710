"""AI Router — resolves provider + model with override > ENV > default chain."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from labelaudit.core.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConfig:
    """Final resolved provider + model after the override chain."""

    provider_name: str
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float


def resolve(scope: str, *, override_model: str | None = None) -> ResolvedConfig:
    """Resolve provider + model for a given *scope*.

    Resolution chain (first non-empty wins):
      1. ``override_model`` (runtime request param, only when
         ``enable_ai_overrides=True``).
      2. ENV scope-specific: ``AI_LABEL_EXTRACT_PROVIDER`` /
         ``AI_LABEL_EXTRACT_MODEL``.
      3. Default: ``gemini`` with the settings default model.

    Model validation: if the resolved model is not in the allowlist for
    that provider, we fall back to the first allowed model.
    """
    settings = get_settings()

    provider_name = ""
    if scope == "label_extract":
        provider_name = settings.ai_label_extract_provider
    if not provider_name:
        provider_name = "gemini"

    model = ""
    if settings.enable_ai_overrides and override_model:
        model = override_model.strip()

    if not model and scope == "label_extract":
        model = settings.ai_label_extract_model

    allowed_models = settings.ai_allowed_models.get(provider_name, [])
    if allowed_models and model and model not in allowed_models:
        logger.warning(
            "Model %r not in allowlist for %r — using first allowed: %r",
            model,
            provider_name,
            allowed_models[0],
        )
        model = allowed_models[0]

    if allowed_models and not model:
        model = allowed_models[0]

    timeout = settings.ai_label_extract_timeout_seconds

    return ResolvedConfig(
        provider_name=provider_name,
        model=model,
        temperature=settings.ai_temperature,
        max_tokens=settings.ai_max_tokens,
        timeout_seconds=timeout,
    )
