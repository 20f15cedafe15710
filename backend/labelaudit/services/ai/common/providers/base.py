"""Abstract base for all multimodal AI providers."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProviderResult:
    """Immutable result returned by every provider."""

    raw_text: str
    model: str
    provider: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0


class BaseProvider(abc.ABC):
    """Contract that every AI provider must implement."""

    name: str = "base"

    @abc.abstractmethod
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
        """Send *prompt* (plus optional inline image) and return a ``ProviderResult``.

        When *response_schema* is given the provider must request JSON output
        constrained to it. Transport and HTTP failures are raised as-is.
        """
