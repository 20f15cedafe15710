import json
from typing import Any

import httpx
import pytest
import pytest_asyncio

from labelaudit.core.config import get_settings
from labelaudit.services.ai.common.providers.base import BaseProvider, ProviderResult

# 1x1 JPEG header bytes are enough: nothing below decodes the image.
SAMPLE_IMAGE_B64 = "/9j/4AAQSkZJRgABAQAAAQABAAD/2wBDAAgGBgcGBQgHBwcJCQgKDBQNDAsLDBkSEw8U"

SAMPLE_REPLY = {
    "company": "Secured Logistics Solution",
    "customerCode": "C-1042",
    "items": [
        {
            "model": "Samsung Galaxy A36 5G",
            "gb": "8/128GB",
            "pcs": 20,
            "color": "Awesome Black",
            "coo": "Vietnam",
            "spec": "SM-A366BZKPMEA",
            "remarks": "",
        },
        {
            "model": "",
            "gb": "256GB",
            "pcs": 0,
            "color": "",
            "coo": "",
            "spec": "",
            "remarks": "label torn",
        },
    ],
}


@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch):
    # Tests mutate env vars; never leak a cached Settings instance or a real key.
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("AI_LABEL_EXTRACT_PROVIDER", raising=False)
    monkeypatch.delenv("AI_LABEL_EXTRACT_MODEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class RecordingProvider(BaseProvider):
    """Provider double that records every call and replies with *reply* or raises *error*."""

    name = "recording"

    def __init__(self, reply: str = "", error: BaseException | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate(self, prompt: str, **kwargs: Any) -> ProviderResult:
        self.calls.append({"prompt": prompt, **kwargs})
        if self.error is not None:
            raise self.error
        return ProviderResult(raw_text=self.reply, model=kwargs.get("model") or "test-model", provider=self.name)


@pytest.fixture
def image_b64() -> str:
    return SAMPLE_IMAGE_B64


@pytest.fixture
def sample_reply_text() -> str:
    return json.dumps(SAMPLE_REPLY)


@pytest.fixture
def provider_factory():
    """Build ``(provider, factory, factory_calls)`` for injecting a ``RecordingProvider``."""

    def _build(reply: str = "", error: BaseException | None = None):
        provider = RecordingProvider(reply=reply, error=error)
        factory_calls: list[tuple[str, str]] = []

        def factory(provider_name: str, api_key: str) -> BaseProvider:
            factory_calls.append((provider_name, api_key))
            return provider

        return provider, factory, factory_calls

    return _build


@pytest_asyncio.fixture
async def client():
    from labelaudit.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
