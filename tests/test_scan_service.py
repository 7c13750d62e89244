"""Tests for the scan service."""

import asyncio
import base64

import pytest

from label_scanner.services.scan import (
    InvalidImageError,
    ScanService,
    TextRecognitionError,
    decode_image,
    to_data_url,
)
from tests.conftest import FakeTextClient

_IMAGE = base64.b64encode(b"\xff\xd8\xffimage-bytes").decode("ascii")


def test_scan_returns_raw_text_and_fields() -> None:
    client = FakeTextClient(text="Calories 110\nSodium 400mg")
    service = ScanService(client=client, retry_delay_seconds=0)

    result = asyncio.run(service.scan(_IMAGE))

    assert result.raw_text == "Calories 110\nSodium 400mg"
    assert result.fields.calories == "110"
    assert result.fields.sodium == "400"
    assert client.calls == [b"\xff\xd8\xffimage-bytes"]


def test_scan_retries_once_then_succeeds() -> None:
    client = FakeTextClient(text="Protein 3g", failures=1)
    service = ScanService(client=client, retry_attempts=1, retry_delay_seconds=0)

    result = asyncio.run(service.scan(_IMAGE))

    assert result.fields.protein == "3"
    assert len(client.calls) == 2


def test_scan_raises_after_retries_exhausted() -> None:
    client = FakeTextClient(failures=5)
    service = ScanService(client=client, retry_attempts=1, retry_delay_seconds=0)

    with pytest.raises(TextRecognitionError):
        asyncio.run(service.scan(_IMAGE))
    assert len(client.calls) == 2


def test_scan_with_empty_recognition_returns_empty_fields() -> None:
    service = ScanService(client=FakeTextClient(text=""), retry_delay_seconds=0)

    result = asyncio.run(service.scan(_IMAGE))

    assert result.raw_text == ""
    assert set(result.fields.as_dict().values()) == {""}


def test_decode_image_accepts_data_url() -> None:
    data_url = f"data:image/jpeg;base64,{_IMAGE}"

    assert decode_image(data_url) == b"\xff\xd8\xffimage-bytes"


@pytest.mark.parametrize("payload", ["", "   ", "not base64!!", "data:image/png;base64,"])
def test_decode_image_rejects_invalid_payloads(payload: str) -> None:
    with pytest.raises(InvalidImageError):
        decode_image(payload)


def test_to_data_url_uses_png_header() -> None:
    data = b"\x89PNG\r\n\x1a\n" + b"rest"

    assert to_data_url(data).startswith("data:image/png;base64,")


def test_to_data_url_defaults_to_jpeg() -> None:
    assert to_data_url(b"unknown").startswith("data:image/jpeg;base64,")
