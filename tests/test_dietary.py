"""Tests for dietary Daily Value checks."""

import pytest

from label_scanner.domain.products import ProductRecord
from label_scanner.services.dietary import (
    convert_amount,
    dietary_tag,
    evaluate_dietary,
    parse_amount,
)


def test_dietary_tag_canonicalizes_display_text() -> None:
    assert dietary_tag("High Fat") == "high-fat"
    assert dietary_tag("high_sodium") == "high-sodium"
    assert dietary_tag("High Carbs") == "high-carbohydrates"
    assert dietary_tag("High Saturated Fat") == "high-saturated"


def test_convert_amount_between_mass_units() -> None:
    assert convert_amount(1.0, "g", "mg") == pytest.approx(1000)
    assert convert_amount(250, "mg", "g") == pytest.approx(0.25)
    assert convert_amount(2, "mg", "mcg") == pytest.approx(2000)
    assert convert_amount(110, "kcal", "kcal") == 110
    assert convert_amount(10, "iu", "mcg") is None


def test_parse_amount_uses_embedded_unit() -> None:
    assert parse_amount("820", "mg") == (820.0, "mg")
    assert parse_amount("0.8 g", "mg") == (0.8, "g")
    assert parse_amount("5µg", "mg") == (5.0, "mcg")
    assert parse_amount("", "mg") is None
    assert parse_amount("n/a", "mg") is None


def test_sodium_reason_at_default_threshold() -> None:
    product = ProductRecord(sodium="820")

    reasons = evaluate_dietary(["high-sodium"], product, threshold=0.20)

    assert len(reasons) == 1
    reason = reasons[0]
    assert reason.field == "sodium"
    assert reason.value == 820
    assert reason.unit == "mg"
    assert reason.daily_value == 2300
    assert reason.percent_of_dv == pytest.approx(0.3565, abs=1e-3)
    assert reason.threshold == 0.20


def test_sodium_below_strict_threshold() -> None:
    product = ProductRecord(sodium="820")

    assert evaluate_dietary(["high-sodium"], product, threshold=0.40) == []


def test_value_in_grams_is_converted_to_reference_unit() -> None:
    product = ProductRecord(sodium="0.8 g")

    reasons = evaluate_dietary(["high-sodium"], product, threshold=0.20)

    assert reasons[0].value == pytest.approx(800)
    assert reasons[0].unit == "mg"


def test_sugar_prefers_added_sugars_then_total() -> None:
    with_added = ProductRecord(added_sugars="12", sugar="30")
    total_only = ProductRecord(sugar="30")

    first = evaluate_dietary(["high-sugar"], with_added, threshold=0.20)
    second = evaluate_dietary(["high-sugar"], total_only, threshold=0.20)

    assert first[0].field == "added_sugars"
    assert second[0].field == "sugar"


def test_missing_values_and_unknown_tags_are_skipped() -> None:
    product = ProductRecord(fat="", vitamin_d="400 IU")

    reasons = evaluate_dietary(
        ["high-fat", "low-joy", "high-vitamin-d"], product, threshold=0.01
    )

    assert reasons == []


def test_threshold_is_inclusive() -> None:
    product = ProductRecord(fat="39")

    reasons = evaluate_dietary(["high-fat"], product, threshold=0.5)

    assert reasons[0].percent_of_dv == pytest.approx(0.5)


def test_spelled_out_units_are_converted() -> None:
    assert parse_amount("820 milligrams", "mg") == (820.0, "mg")
    assert parse_amount("5 grams", "mg") == (5.0, "g")

    reasons = evaluate_dietary(
        ["high-sodium"], ProductRecord(sodium="0.8 grams"), threshold=0.20
    )

    assert reasons[0].value == pytest.approx(800)


def test_vitamin_d_is_not_a_dietary_tag() -> None:
    product = ProductRecord(vitamin_d="400")

    tags = [dietary_tag("High Vitamin D")]

    assert evaluate_dietary(tags, product, threshold=0.2) == []
