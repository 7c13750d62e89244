"""Tests for the scan, extract and compare endpoints."""

import base64

from fastapi.testclient import TestClient

from label_scanner.api.app import create_app
from label_scanner.domain.labels import FIELD_KEYS

_IMAGE = base64.b64encode(b"\xff\xd8\xffphoto").decode("ascii")


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_scan_endpoint_returns_raw_text_and_fields(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/scan", json={"imageBase64": _IMAGE})

    assert response.status_code == 200
    data = response.json()
    assert data["rawText"].startswith("Nutrition Facts")
    assert list(data["fields"]) == list(FIELD_KEYS)
    assert data["fields"]["calories"] == "230"
    assert data["fields"]["warning"] == "MILK, SOY"


def test_scan_endpoint_rejects_invalid_base64(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/scan", json={"imageBase64": "not base64!!"})

    assert response.status_code == 400


def test_scan_endpoint_maps_ocr_failure_to_bad_gateway(container, text_client) -> None:
    text_client.failures = 10
    client = TestClient(create_app(container))

    response = client.post("/scan", json={"imageBase64": _IMAGE})

    assert response.status_code == 502


def test_extract_endpoint_handles_empty_text(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/extract", json={"text": ""})

    assert response.status_code == 200
    data = response.json()
    assert data["rawText"] == ""
    assert set(data["fields"].values()) == {""}


def test_compare_endpoint_flags_allergen_and_dietary(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/compare",
        json={
            "product": {
                "food_name": "Cheddar Crackers",
                "ingredients": "enriched flour, cheddar cheese, salt",
                "warning": "",
                "sodium": 820,
            },
            "profile": {"allergens": ["Milk"], "dietary": ["High Sodium"]},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["harmful"] is True
    allergen, dietary = data["reasons"]
    assert allergen == {
        "kind": "allergen",
        "term": "milk",
        "matchedBy": "alias",
        "snippet": "cheese",
    }
    assert dietary["kind"] == "dietary"
    assert dietary["dailyValue"] == 2300
    assert dietary["threshold"] == 0.2
    assert round(dietary["percentOfDV"], 3) == 0.357
    assert data["summary"]["allergens"] == ['Allergen: milk (via alias: "cheese")']


def test_compare_endpoint_uses_profile_strictness(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/compare",
        json={
            "product": {"sodium": "820"},
            "profile": {"dietary": ["High Sodium"], "strictness": 0.4},
        },
    )

    assert response.json() == {
        "harmful": False,
        "reasons": [],
        "summary": {"allergens": [], "intolerances": [], "dietary": []},
    }


def test_compare_endpoint_validates_strictness(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/compare",
        json={"product": {}, "profile": {"strictness": 2}},
    )

    assert response.status_code == 422
