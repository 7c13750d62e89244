"""Tests for text normalization and value coercion."""

import pytest

from label_scanner.services.text import coerce_value, normalize_text


def test_normalize_replaces_letter_o_before_units_and_percent() -> None:
    text = "Trans Fat Og\nCholesterol Omg O%\nVitamin D Omcg\nIron 1O%"

    assert normalize_text(text) == (
        "Trans Fat 0g\nCholesterol 0mg 0%\nVitamin D 0mcg\nIron 10%"
    )


def test_normalize_leaves_words_with_o_alone() -> None:
    text = "Omega oils, organic oats"

    assert normalize_text(text) == text


@pytest.mark.parametrize(
    "raw",
    ["Total Carb. 37g", "TOTAL CARB 37g", "Total Carbs 37g", "Total Carbohydrates 37g"],
)
def test_normalize_rewrites_total_carbohydrate_abbreviations(raw: str) -> None:
    assert normalize_text(raw).lower() == "total carbohydrate 37g"


def test_normalize_collapses_spaces_but_keeps_newlines() -> None:
    text = "  Calories \t 110  \r\nTotal   Fat 1g\n\n  Sodium 5mg  "

    assert normalize_text(text) == "Calories 110 \nTotal Fat 1g\n\n Sodium 5mg"


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "Total Carb. 37g\nTrans Fat Og",
        "  Serving size\t1 cup \r\n\r\nIron 1O%  ",
        "TOTAL  CARB.\nTotal Carbohydrate",
        "Vitamin D Omcg O IU",
    ],
)
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize_text(raw)

    assert normalize_text(once) == once


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("0.5g", "0.5"),
        ("110", "110"),
        ("400mg", "400"),
        ("820 mg", "820"),
        ("2mcg", "2"),
        ("10 IU", "10"),
        ("<1", "0.5"),
        ("< 1", "0.5"),
        ("<1g", "0.5"),
        ("", ""),
        ("g", ""),
    ],
)
def test_coerce_value(token: str, expected: str) -> None:
    assert coerce_value(token) == expected
