"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from label_scanner.adapters.google_vision_client import HttpxGoogleVisionClient
from label_scanner.adapters.openai_text_client import OpenAITextClient
from label_scanner.config import Settings, parse_ocr_provider
from label_scanner.services.scan import ScanService, TextRecognitionClient


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ocr_client: TextRecognitionClient
    scan_service: ScanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    provider = parse_ocr_provider(resolved_settings.ocr_provider)
    ocr_client: HttpxGoogleVisionClient | OpenAITextClient
    if provider == "openai":
        ocr_client = OpenAITextClient.create(
            api_key=_require(resolved_settings.openai_api_key, "OPENAI_API_KEY"),
            model=resolved_settings.openai_model,
            store=resolved_settings.openai_store,
        )
    else:
        ocr_client = HttpxGoogleVisionClient.create(
            api_key=_require(
                resolved_settings.google_vision_api_key, "GOOGLE_VISION_API_KEY"
            ),
            base_url=resolved_settings.google_vision_base_url,
        )
    scan_service = ScanService(
        client=ocr_client,
        retry_attempts=resolved_settings.ocr_retry_attempts,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        await ocr_client.close()

    return AppContainer(
        settings=resolved_settings,
        ocr_client=ocr_client,
        scan_service=scan_service,
        close_resources=close_resources,
    )


def _require(value: str | None, name: str) -> str:
    if not value:
        raise ValueError(f"{name} must be set for the configured OCR provider")
    return value
