from functools import lru_cache
import json
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_LABEL_EXTRACT_MODEL = "gemini-3-flash-preview"


def _parse_list_value(value: str) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        raw = value.strip()
        if raw == "":
            return []
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(item).strip().lower() for item in parsed if str(item).strip()]
        except ValueError:
            pass
        return [item.strip().lower() for item in raw.split(",") if item.strip()]
    if isinstance(value, list):
        return [str(item).strip().lower() for item in value if str(item).strip()]
    return []


def _parse_models_map(value: str) -> dict[str, list[str]]:
    """Parse ``{"gemini": ["model-a", "model-b"]}`` into a provider -> models map."""
    if not value or not value.strip():
        return {}
    try:
        parsed = json.loads(value)
    except ValueError:
        return {}
    if not isinstance(parsed, dict):
        return {}
    result: dict[str, list[str]] = {}
    for provider, models in parsed.items():
        if isinstance(models, str):
            models = [models]
        if not isinstance(models, list):
            continue
        result[str(provider).strip().lower()] = [str(m).strip() for m in models if str(m).strip()]
    return result


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="forbid",
        validate_by_name=True,
        populate_by_name=True,
    )

    environment: str = "development"
    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = False

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        validation_alias=AliasChoices("GEMINI_BASE_URL"),
    )

    enable_label_extract: bool = True
    ai_label_extract_provider: str = "gemini"
    ai_label_extract_model: str = DEFAULT_LABEL_EXTRACT_MODEL
    ai_label_extract_timeout_seconds: float = 30.0

    ai_temperature: float = 0.0
    ai_max_tokens: int = 8192
    ai_debug_store_raw: bool = False
    enable_ai_overrides: bool = False

    ai_allowed_providers_raw: str = Field(
        default="gemini,mock",
        validation_alias=AliasChoices("AI_ALLOWED_PROVIDERS"),
    )
    ai_allowed_models_raw: str = Field(
        default=json.dumps(
            {
                "gemini": [
                    DEFAULT_LABEL_EXTRACT_MODEL,
                    "gemini-2.5-flash",
                    "gemini-2.5-flash-lite",
                ],
            }
        ),
        validation_alias=AliasChoices("AI_ALLOWED_MODELS"),
    )

    cors_allow_origins: str = ""
    cors_allow_methods: str = "GET,POST,OPTIONS"
    cors_allow_headers: str = "Authorization,Content-Type,Accept"

    @field_validator("ai_label_extract_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value):
        if value is None:
            return "gemini"
        return str(value).strip().lower()

    @property
    def ai_allowed_providers(self) -> list[str]:
        return _parse_list_value(self.ai_allowed_providers_raw)

    @property
    def ai_allowed_models(self) -> dict[str, list[str]]:
        return _parse_models_map(self.ai_allowed_models_raw)

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.cors_allow_origins.split(",") if item.strip()]

    @property
    def cors_methods(self) -> list[str]:
        return [item.strip() for item in self.cors_allow_methods.split(",") if item.strip()]

    @property
    def cors_headers(self) -> list[str]:
        return [item.strip() for item in self.cors_allow_headers.split(",") if item.strip()]


@lru_cache

def get_settings() -> Settings:
    return Settings()
