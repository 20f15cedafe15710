"""Label extraction endpoints — JSON (base64) and multipart upload."""

from __future__ import annotations

import base64
import binascii

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict, Field, field_validator

from labelaudit.core.config import get_settings
from labelaudit.core.credentials import CredentialProvider, SettingsCredentials
from labelaudit.services.ai.label_extract.contracts import InspectionItem
from labelaudit.services.ai.label_extract.service import LabelExtractor, LabelExtractServiceResult

router = APIRouter()

_JPEG_TYPES = {"image/jpeg", "image/jpg", "image/pjpeg"}
_JPEG_EXTENSIONS = {"jpg", "jpeg"}
# Content types that say nothing about the format; the filename decides.
_GENERIC_TYPES = {"application/octet-stream"}


def get_credentials() -> CredentialProvider:
    return SettingsCredentials()


def _ensure_label_extract_enabled() -> None:
    settings = get_settings()
    if not settings.enable_label_extract:
        raise HTTPException(404, "Not found")


def _is_jpeg(content_type: str | None, filename: str | None) -> bool:
    declared = (content_type or "").split(";", 1)[0].strip().lower()
    if declared and declared not in _GENERIC_TYPES:
        return declared in _JPEG_TYPES
    if filename:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        return ext in _JPEG_EXTENSIONS
    return False


class ExtractLabelRequest(BaseModel):
    image_base64: str = Field(..., min_length=1)
    override_model: str | None = None

    @field_validator("image_base64")
    @classmethod
    def valid_base64(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("image_base64 must not be empty")
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("image_base64 is not valid base64") from exc
        return v


class ExtractLabelResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company: str | None = None
    customer_code: str | None = Field(default=None, alias="customerCode")
    items: list[InspectionItem]
    provider: str
    model: str
    latency_ms: float


def _to_response(result: LabelExtractServiceResult) -> ExtractLabelResponse:
    return ExtractLabelResponse(
        company=result.data.company,
        customer_code=result.data.customer_code,
        items=list(result.data.items),
        provider=result.provider_result.provider,
        model=result.provider_result.model,
        latency_ms=result.total_latency_ms,
    )


@router.post(
    "/labels/extract",
    response_model=ExtractLabelResponse,
    response_model_by_alias=True,
    summary="Extract shipment data from a base64 label photo",
)
async def extract_label_endpoint(
    body: ExtractLabelRequest,
    credentials: CredentialProvider = Depends(get_credentials),
):
    _ensure_label_extract_enabled()

    extractor = LabelExtractor(credentials, override_model=body.override_model)
    result = await extractor.run(body.image_base64)
    return _to_response(result)


@router.post(
    "/labels/extract-upload",
    response_model=ExtractLabelResponse,
    response_model_by_alias=True,
    summary="Extract shipment data from an uploaded JPEG label photo",
)
async def extract_label_upload_endpoint(
    file: UploadFile = File(...),
    credentials: CredentialProvider = Depends(get_credentials),
):
    _ensure_label_extract_enabled()

    if not _is_jpeg(file.content_type, file.filename):
        raise HTTPException(415, "Only JPEG images are supported")

    content = await file.read()
    if not content:
        raise HTTPException(422, "Uploaded file is empty")

    image_b64 = base64.b64encode(content).decode("ascii")
    extractor = LabelExtractor(credentials)
    result = await extractor.run(image_b64)
    return _to_response(result)
