"""Tests for the label extraction HTTP endpoints.

The mock provider is selected through ``AI_LABEL_EXTRACT_PROVIDER=mock`` so no
request ever leaves the process.
"""

import base64

import httpx
import pytest

from labelaudit.api.v1.labels import get_credentials
from labelaudit.core.config import Settings, get_settings
from labelaudit.core.credentials import StaticCredentials
from labelaudit.main import app
from labelaudit.services.ai.common.providers.mock import MockProvider


@pytest.fixture
def mock_provider_env(monkeypatch):
    monkeypatch.setenv("AI_LABEL_EXTRACT_PROVIDER", "mock")
    get_settings.cache_clear()


@pytest.fixture
def with_key():
    app.dependency_overrides[get_credentials] = lambda: StaticCredentials("test-key")
    yield
    app.dependency_overrides.pop(get_credentials, None)


def _use_provider(monkeypatch, provider):
    monkeypatch.setattr(
        "labelaudit.services.ai.label_extract.service._default_provider_factory",
        lambda provider_name, api_key: provider,
    )


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_extract_json_body(client, mock_provider_env, with_key, image_b64):
    resp = await client.post("/api/v1/labels/extract", json={"image_base64": image_b64})

    assert resp.status_code == 200
    body = resp.json()
    assert body["company"] == "Secured Logistics Solution"
    assert body["customerCode"] == "MOCK-001"
    assert body["items"][0]["spec"] == "SM-A366BZKPMEA"
    assert body["provider"] == "mock"


@pytest.mark.asyncio
async def test_extract_upload(client, mock_provider_env, with_key, image_b64):
    content = base64.b64decode(image_b64)
    resp = await client.post(
        "/api/v1/labels/extract-upload",
        files={"file": ("label.jpg", content, "image/jpeg")},
    )

    assert resp.status_code == 200
    assert resp.json()["items"][0]["model"] == "Samsung Galaxy A36 5G"


@pytest.mark.asyncio
async def test_upload_sends_base64_of_file_bytes(client, monkeypatch, with_key, image_b64):
    seen = {}

    class CapturingProvider(MockProvider):
        async def generate(self, prompt, **kwargs):
            seen["image_b64"] = kwargs.get("image_b64")
            return await super().generate(prompt, **kwargs)

    _use_provider(monkeypatch, CapturingProvider())
    content = base64.b64decode(image_b64)
    resp = await client.post(
        "/api/v1/labels/extract-upload",
        files={"file": ("label.jpeg", content, "image/jpeg")},
    )

    assert resp.status_code == 200
    assert seen["image_b64"] == image_b64


@pytest.mark.asyncio
async def test_upload_rejects_non_jpeg(client, with_key):
    resp = await client.post(
        "/api/v1/labels/extract-upload",
        files={"file": ("label.png", b"\x89PNG\r\n", "image/png")},
    )
    assert resp.status_code == 415


@pytest.mark.asyncio
async def test_upload_rejects_empty_file(client, with_key):
    resp = await client.post(
        "/api/v1/labels/extract-upload",
        files={"file": ("label.jpg", b"", "image/jpeg")},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", ["", "   ", "not base64!!"])
async def test_invalid_base64_is_422(client, with_key, payload):
    resp = await client.post("/api/v1/labels/extract", json={"image_base64": payload})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_missing_key_is_503(client, mock_provider_env, image_b64):
    resp = await client.post("/api/v1/labels/extract", json={"image_base64": image_b64})
    assert resp.status_code == 503


@pytest.mark.asyncio
async def test_service_error_is_502(client, monkeypatch, with_key, image_b64):
    class FailingProvider(MockProvider):
        async def generate(self, prompt, **kwargs):
            raise httpx.ReadTimeout("timed out")

    _use_provider(monkeypatch, FailingProvider())
    resp = await client.post("/api/v1/labels/extract", json={"image_base64": image_b64})

    assert resp.status_code == 502
    assert "error" not in resp.json()


@pytest.mark.asyncio
async def test_response_format_error_is_502_and_hides_raw(client, monkeypatch, with_key, image_b64):
    _use_provider(monkeypatch, MockProvider(reply="not json"))
    resp = await client.post("/api/v1/labels/extract", json={"image_base64": image_b64})

    assert resp.status_code == 502
    assert "raw_text" not in resp.json()


@pytest.mark.asyncio
async def test_response_format_error_exposes_raw_when_enabled(client, monkeypatch, with_key, image_b64):
    from labelaudit import main as app_main

    monkeypatch.setattr(app_main, "settings", Settings(expose_error_details=True))
    _use_provider(monkeypatch, MockProvider(reply="not json"))
    resp = await client.post("/api/v1/labels/extract", json={"image_base64": image_b64})

    assert resp.status_code == 502
    assert resp.json()["raw_text"] == "not json"


@pytest.mark.asyncio
async def test_empty_reply_returns_empty_items(client, monkeypatch, with_key, image_b64):
    _use_provider(monkeypatch, MockProvider(reply=""))
    resp = await client.post("/api/v1/labels/extract", json={"image_base64": image_b64})

    assert resp.status_code == 200
    body = resp.json()
    assert body["items"] == []
    assert body["company"] is None
    assert body["customerCode"] is None


@pytest.mark.asyncio
async def test_disabled_feature_is_404(client, monkeypatch, with_key, image_b64):
    monkeypatch.setenv("ENABLE_LABEL_EXTRACT", "false")
    get_settings.cache_clear()
    resp = await client.post("/api/v1/labels/extract", json={"image_base64": image_b64})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_upload_rejects_png_type_with_jpg_name(client, with_key):
    resp = await client.post(
        "/api/v1/labels/extract-upload",
        files={"file": ("label.jpg", b"\x89PNG\r\n", "image/png")},
    )
    assert resp.status_code == 415


@pytest.mark.asyncio
async def test_upload_octet_stream_falls_back_to_extension(client, mock_provider_env, with_key, image_b64):
    content = base64.b64decode(image_b64)
    resp = await client.post(
        "/api/v1/labels/extract-upload",
        files={"file": ("label.jpg", content, "application/octet-stream")},
    )
    assert resp.status_code == 200


@pytest.mark.parametrize(
    "content_type, filename, expected",
    [
        ("image/jpeg", "label.png", True),
        ("image/png", "label.jpg", False),
        ("application/octet-stream", "label.JPEG", True),
        ("application/octet-stream", "label.png", False),
        (None, "label.jpg", True),
        (None, None, False),
    ],
)
def test_is_jpeg(content_type, filename, expected):
    from labelaudit.api.v1.labels import _is_jpeg

    assert _is_jpeg(content_type, filename) is expected
