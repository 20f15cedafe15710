"""Google Gemini provider (``generateContent`` REST API)."""

from __future__ import annotations

import logging
import time
from typing import Any

from .base import BaseProvider, ProviderResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider(BaseProvider):
    name = "gemini"

    def __init__(self, api_key: str, *, base_url: str = DEFAULT_BASE_URL, transport=None) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        # Test hook: an ``httpx`` transport (e.g. ``MockTransport``).
        self._transport = transport

    def build_payload(
        self,
        prompt: str,
        *,
        system_instruction: str,
        response_schema: dict[str, Any] | None,
        image_b64: str | None,
        image_mime_type: str,
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        parts: list[dict[str, Any]] = []
        if image_b64:
            parts.append({"inlineData": {"mimeType": image_mime_type, "data": image_b64}})
        parts.append({"text": prompt})

        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        }
        if response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = response_schema

        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": generation_config,
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        return payload

    async def generate(
        self,
        prompt: str,
        *,
        system_instruction: str = "",
        response_schema: dict[str, Any] | None = None,
        image_b64: str | None = None,
        image_mime_type: str = "image/jpeg",
        model: str = "",
        temperature: float = 0.0,
        max_tokens: int = 8192,
        timeout_seconds: float = 30.0,
    ) -> ProviderResult:
        import httpx

        model = model or "gemini-3-flash-preview"
        payload = self.build_payload(
            prompt,
            system_instruction=system_instruction,
            response_schema=response_schema,
            image_b64=image_b64,
            image_mime_type=image_mime_type,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        t0 = time.monotonic()

        async with httpx.AsyncClient(timeout=timeout_seconds, transport=self._transport) as client:
            resp = await client.post(
                f"{self._base_url}/models/{model}:generateContent",
                headers={
                    "x-goog-api-key": self._api_key,
                    "Content-Type": "application/json",
                },
                json=payload,
            )
            resp.raise_for_status()
            data = resp.json()

        elapsed = (time.monotonic() - t0) * 1000
        usage = data.get("usageMetadata", {})

        return ProviderResult(
            raw_text=response_text(data),
            model=data.get("modelVersion") or model,
            provider=self.name,
            prompt_tokens=usage.get("promptTokenCount", 0),
            completion_tokens=usage.get("candidatesTokenCount", 0),
            latency_ms=round(elapsed, 2),
        )


def response_text(data: dict[str, Any]) -> str:
    """Concatenated text of the first candidate; empty when there is none."""
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback")
        if feedback:
            logger.warning("Gemini returned no candidates: %s", feedback)
        return ""
    content = candidates[0].get("content") or {}
    texts = [part.get("text", "") for part in content.get("parts") or [] if not part.get("thought")]
    return "".join(texts)
