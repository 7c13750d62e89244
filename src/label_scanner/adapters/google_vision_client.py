"""Google Cloud Vision client for label text detection."""

import base64
from dataclasses import dataclass

import httpx

from label_scanner.services.scan import TextRecognitionClient


@dataclass
class HttpxGoogleVisionClient(TextRecognitionClient):
    """HTTPX-backed client for the Vision ``images:annotate`` endpoint."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxGoogleVisionClient":
        """Create a Vision client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def detect_text(self, image_bytes: bytes) -> str:
        """Run TEXT_DETECTION and return the full annotation text."""
        url = f"{self.base_url}/images:annotate"
        payload = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                    "features": [{"type": "TEXT_DETECTION"}],
                }
            ]
        }
        response = await self.http_client.post(
            url,
            params={"key": self.api_key},
            json=payload,
            timeout=30,
        )
        response.raise_for_status()
        responses = response.json().get("responses") or [{}]
        first = responses[0]
        error = first.get("error")
        if error:
            raise RuntimeError(f"Vision text detection failed: {error.get('message')}")
        annotation = first.get("fullTextAnnotation") or {}
        return annotation.get("text", "")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
