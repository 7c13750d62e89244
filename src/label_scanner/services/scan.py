"""Label scanning: OCR call followed by field extraction."""

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Protocol

from label_scanner.domain.labels import ScanResult
from label_scanner.services.extraction import extract_fields

_logger = logging.getLogger(__name__)


class InvalidImageError(ValueError):
    """Raised when a scan request does not carry decodable image data."""


class TextRecognitionError(RuntimeError):
    """Raised when the OCR backend fails after all retries."""


class TextRecognitionClient(Protocol):
    """Interface for an external text-recognition backend."""

    async def detect_text(self, image_bytes: bytes) -> str:
        """Return the full text recognized in the image."""


@dataclass
class ScanService:
    """Service that turns label photos into extracted nutrition fields."""

    client: TextRecognitionClient
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    debug: bool = False

    async def scan(self, image_base64: str) -> ScanResult:
        """Recognize text in a base64 image and extract its label fields."""
        image_bytes = decode_image(image_base64)
        raw_text = await self._detect_with_retry(image_bytes)
        result = self.extract(raw_text)
        if self.debug:
            _logger.info(
                "Scan complete: bytes=%s chars=%s", len(image_bytes), len(raw_text)
            )
        return result

    def extract(self, raw_text: str | None) -> ScanResult:
        """Extract label fields from already recognized text."""
        text = raw_text or ""
        return ScanResult(raw_text=text, fields=extract_fields(text))

    async def _detect_with_retry(self, image_bytes: bytes) -> str:
        """Call the OCR client with a short retry."""
        attempt = 0
        while True:
            try:
                return await self.client.detect_text(image_bytes) or ""
            except Exception as exc:
                attempt += 1
                if self.debug:
                    _logger.warning(
                        "Text recognition failed (attempt %s/%s, status=%s): %s",
                        attempt,
                        self.retry_attempts + 1,
                        _status_code_from_exception(exc),
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise TextRecognitionError("Text recognition failed") from exc
                await asyncio.sleep(self.retry_delay_seconds)


def decode_image(image_base64: str) -> bytes:
    """Decode base64 image data, accepting an optional data URL prefix."""
    payload = (image_base64 or "").strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    if not payload:
        raise InvalidImageError("Image data is empty")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageError("Image data is not valid base64") from exc


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
