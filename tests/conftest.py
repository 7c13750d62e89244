"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from label_scanner.config import Settings
from label_scanner.containers import AppContainer
from label_scanner.services.scan import ScanService, TextRecognitionClient

SAMPLE_LABEL = """Nutrition Facts
8 servings per container
Serving size   2/3 cup (55g)

Amount per serving
Calories 230
Total Fat 8g 10%
  Saturated Fat 1g 5%
  Trans Fat Og
Cholesterol Omg 0%
Sodium 160mg 7%
Total Carb. 37g 13%
  Dietary Fiber 4g 14%
  Total Sugars 12g
    Includes 10g Added Sugars 20%
Protein 3g

Vitamin D 2mcg 10%
Calcium 260mg 20%
Iron 8mg 45%
Potassium 240mg 6%

INGREDIENTS: Whole grain oats, sugar, whey,
soy lecithin, salt.
CONTAINS: MILK, SOY.
"""


@dataclass
class FakeTextClient(TextRecognitionClient):
    """Fake OCR client returning fixed text and recording calls."""

    text: str = SAMPLE_LABEL
    failures: int = 0
    calls: list[bytes] = field(default_factory=list)

    async def detect_text(self, image_bytes: bytes) -> str:
        self.calls.append(image_bytes)
        if len(self.calls) <= self.failures:
            raise RuntimeError("OCR backend unavailable")
        return self.text

    async def close(self) -> None:
        return None


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ocr_provider="google",
        google_vision_api_key="vision-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def text_client() -> FakeTextClient:
    return FakeTextClient()


@pytest.fixture
def container(settings: Settings, text_client: FakeTextClient) -> AppContainer:
    scan_service = ScanService(
        client=text_client, retry_attempts=1, retry_delay_seconds=0
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        ocr_client=text_client,
        scan_service=scan_service,
        close_resources=close_resources,
    )
