"""Label extraction service — one multimodal call per photo, strict JSON parsing.

No retries and no value normalisation happen here: whatever the model puts
in ``model``/``gb``/``color`` reaches the caller unchanged, and every failure
is raised as a typed ``LabelExtractError``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from pydantic import ValidationError

from labelaudit.core.credentials import CredentialProvider, SettingsCredentials

from ..common import router as ai_router
from ..common.audit import log_ai_run
from ..common.errors import ConfigurationError, ResponseFormatError, ServiceError
from ..common.providers import BaseProvider, get_provider
from ..common.providers.base import ProviderResult
from .contracts import RESPONSE_SCHEMA, ExtractedData
from .prompts import LABEL_EXTRACT_SYSTEM_INSTRUCTION, LABEL_EXTRACT_USER_PROMPT

logger = logging.getLogger(__name__)

SCOPE = "label_extract"
IMAGE_MIME_TYPE = "image/jpeg"

ProviderFactory = Callable[[str, str], BaseProvider]


def _default_provider_factory(provider_name: str, api_key: str) -> BaseProvider:
    return get_provider(provider_name, api_key=api_key)


@dataclass
class LabelExtractServiceResult:
    """Result from ``LabelExtractor.run`` including provider metadata."""

    data: ExtractedData
    provider_result: ProviderResult
    total_latency_ms: float


class LabelExtractor:
    """Turns a base64 JPEG of a shipping label into ``ExtractedData``.

    *credentials* is asked for the API key on every call; *provider_factory*
    receives ``(provider_name, api_key)`` and is only invoked once a key is
    available. *model*, *temperature*, *max_tokens* and *timeout_seconds*
    replace the values resolved from settings when given; *override_model*
    is the request-level override and only applies with
    ``ENABLE_AI_OVERRIDES=true``.
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        *,
        provider_factory: ProviderFactory | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout_seconds: float | None = None,
        override_model: str | None = None,
    ) -> None:
        self._credentials = credentials
        self._provider_factory = provider_factory or _default_provider_factory
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout_seconds = timeout_seconds
        self._override_model = override_model

    def _resolve_config(self) -> ai_router.ResolvedConfig:
        config = ai_router.resolve(SCOPE, override_model=self._override_model)
        overrides = {
            "model": self._model,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "timeout_seconds": self._timeout_seconds,
        }
        return replace(config, **{k: v for k, v in overrides.items() if v is not None})

    async def extract(self, image_b64: str) -> ExtractedData:
        result = await self.run(image_b64)
        return result.data

    async def run(self, image_b64: str) -> LabelExtractServiceResult:
        if not image_b64 or not image_b64.strip():
            raise ValueError("image_b64 must be a non-empty base64 string")

        api_key = self._credentials.get_api_key()
        if not api_key:
            logger.warning("Label extraction aborted: inference API key is not configured")
            raise ConfigurationError("Inference API key is missing (set GEMINI_API_KEY)")

        config = self._resolve_config()
        provider = self._provider_factory(config.provider_name, api_key)

        t0 = time.monotonic()
        try:
            provider_result = await provider.generate(
                LABEL_EXTRACT_USER_PROMPT,
                system_instruction=LABEL_EXTRACT_SYSTEM_INSTRUCTION,
                response_schema=RESPONSE_SCHEMA,
                image_b64=image_b64,
                image_mime_type=IMAGE_MIME_TYPE,
                model=config.model,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout_seconds=config.timeout_seconds,
            )
        except Exception as exc:
            logger.warning("Label extraction call to %s failed: %s", config.provider_name, exc)
            raise ServiceError(f"{config.provider_name} request failed: {exc}", cause=exc) from exc

        try:
            data = parse_extracted_data(provider_result.raw_text)
        except ResponseFormatError:
            log_ai_run(
                scope=SCOPE,
                provider_result=provider_result,
                prompt_text=LABEL_EXTRACT_USER_PROMPT,
                extra_meta={
                    "parse_error": True,
                    "image_b64_length": len(image_b64),
                },
            )
            raise
        total_ms = (time.monotonic() - t0) * 1000

        log_ai_run(
            scope=SCOPE,
            provider_result=provider_result,
            prompt_text=LABEL_EXTRACT_USER_PROMPT,
            extra_meta={
                "item_count": len(data.items),
                "image_b64_length": len(image_b64),
            },
        )

        return LabelExtractServiceResult(
            data=data,
            provider_result=provider_result,
            total_latency_ms=round(total_ms, 2),
        )


def parse_extracted_data(raw_text: str | None) -> ExtractedData:
    """Parse the model's reply; an empty reply is an empty result, not an error."""
    if not raw_text or not raw_text.strip():
        logger.info("Label extraction returned empty text; no items")
        return ExtractedData.empty()

    try:
        return ExtractedData.model_validate_json(raw_text, strict=True)
    except ValidationError as exc:
        logger.warning("Label extraction reply is not a valid ExtractedData: %s", raw_text[:200])
        raise ResponseFormatError(f"Malformed extraction reply: {exc}", raw_text=raw_text) from exc


async def extract_label_data(
    image_b64: str,
    *,
    credentials: CredentialProvider | None = None,
    override_model: str | None = None,
) -> ExtractedData:
    """Extract label data using settings-backed credentials unless others are given."""
    extractor = LabelExtractor(
        credentials or SettingsCredentials(),
        override_model=override_model,
    )
    return await extractor.extract(image_b64)
