"""Mock provider — deterministic responses for tests and local runs."""

from __future__ import annotations

import json
import time
from typing import Any

from .base import BaseProvider, ProviderResult

DEFAULT_MOCK_REPLY = json.dumps(
    {
        "company": "Secured Logistics Solution",
        "customerCode": "MOCK-001",
        "items": [
            {
                "model": "Samsung Galaxy A36 5G",
                "gb": "8/128GB",
                "pcs": 1,
                "color": "Awesome Black",
                "coo": "Vietnam",
                "spec": "SM-A366BZKPMEA",
                "remarks": "",
            }
        ],
    }
)


class MockProvider(BaseProvider):
    name = "mock"

    def __init__(self, reply: str = DEFAULT_MOCK_REPLY) -> None:
        self._reply = reply
        self.calls = 0

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
        t0 = time.monotonic()
        self.calls += 1
        text = self._reply
        elapsed = (time.monotonic() - t0) * 1000
        return ProviderResult(
            raw_text=text,
            model=model or "mock-v1",
            provider=self.name,
            prompt_tokens=len(prompt.split()) + len(system_instruction.split()),
            completion_tokens=len(text.split()),
            latency_ms=round(elapsed, 2),
        )
