"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

OCR_PROVIDERS = frozenset({"google", "openai"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    ocr_provider: str = "google"
    google_vision_api_key: str | None = None
    google_vision_base_url: str = "https://vision.googleapis.com/v1"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_store: bool = False
    ocr_retry_attempts: int = Field(default=1, ge=0)
    default_strictness: float = Field(default=0.20, gt=0.0, le=1.0)
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_ocr_provider(raw: str | None) -> str:
    """Normalize the configured OCR provider name."""
    cleaned = (raw or "").strip().lower()
    if not cleaned:
        return "google"
    if cleaned not in OCR_PROVIDERS:
        raise ValueError(f"Unknown OCR provider: {raw}")
    return cleaned
