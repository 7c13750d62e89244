"""Nutrition label field extraction from normalized OCR text.

Values are associated with labels positionally: the first number after a
label name is taken as its per-serving amount, because printed panels put
the per-serving column before any per-container column. A label whose own
text holds an earlier stray number will pick that number up instead.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from label_scanner.domain.labels import ExtractedFields
from label_scanner.services.text import coerce_value, normalize_text

_logger = logging.getLogger(__name__)

NUTRIENT_LABELS: Mapping[str, tuple[str, tuple[str, ...]]] = MappingProxyType(
    {
        "calories": (r"Calories", ()),
        "fat": (r"Total Fat", ("g",)),
        "saturated_fat": (r"Saturated Fat|\bSat\.? Fat", ("g",)),
        "trans_fat": (r"Trans Fat", ("g",)),
        "monounsaturated_fat": (r"Monounsaturated Fat", ("g",)),
        "polyunsaturated_fat": (r"Polyunsaturated Fat", ("g",)),
        "cholesterol": (r"Cholesterol", ("mg",)),
        "sodium": (r"Sodium", ("mg",)),
        "carbohydrate": (r"Total Carbohydrate", ("g",)),
        "fiber": (r"Dietary Fiber|Fiber", ("g",)),
        "sugar": (r"Total Sugars?|Sugars?", ("g",)),
        "added_sugars": (r"Includes|Added Sugars?", ("g",)),
        "protein": (r"Protein", ("g",)),
        "vitamin_d": (r"Vitamin D", ("mcg", "IU")),
        "calcium": (r"Calcium", ("mg",)),
        "iron": (r"Iron", ("mg",)),
        "potassium": (r"Potassium", ("mg",)),
    }
)

_NUMBER = r"(?:<\s*1(?![\d.])|\d+(?:\.\d+)?)"
_SERVING_SIZE = re.compile(
    r"Serving\s*size[^\S\n]*:?[^\S\n]*([^\n]*)", re.IGNORECASE
)
_SERVINGS_LABELED = re.compile(
    r"Servings?\s+per\s+container[^\S\n]*:?[^\S\n]*([^\n]*)", re.IGNORECASE
)
_SERVINGS_BARE = re.compile(
    r"(\d+(?:\.\d+)?)\s+servings?\s+per\s+container", re.IGNORECASE
)
_NON_NUMERIC = re.compile(r"[^\d.]")
_WARNING_MARKER = r"may\s+contain|contains\b(?!\s*(?:\d|less\b))|allergens?\b"
_INGREDIENTS = re.compile(
    r"\bingredients?\b[^\S\n]*[:\-]?\s*(.*?)"
    rf"(?=\n[^\S\n]*\n|\b(?:{_WARNING_MARKER})|\Z)",
    re.IGNORECASE | re.DOTALL,
)
# A statement starts a line or follows the sentence that closes the ingredients.
_WARNING = re.compile(
    r"(?:^|(?<=[.;])|(?<=[.;] ))[^\S\n]*"
    r"(?:may\s+contain|contains)\b(?!\s*(?:\d|less\b))[^\S\n]*:?([^\n]*)"
    r"|\ballergens?\b[^\S\n]*:?([^\n]*)",
    re.IGNORECASE | re.MULTILINE,
)
_LEADING_MARKER = re.compile(
    r"^(?:may\s+contain|contains)\b[^\S\n]*:?", re.IGNORECASE
)


def extract_label_value(
    text: str, label: str, units: Sequence[str] | None = None
) -> str:
    """Return the first number token after ``label``, with its unit when present.

    ``label`` is a case-insensitive pattern and may be an alternation. An
    absent label or a label with no number after it yields an empty string.
    """
    label_match = re.search(label, text, re.IGNORECASE)
    if not label_match:
        return ""
    pattern = _NUMBER
    if units:
        alternatives = "|".join(re.escape(unit) for unit in units)
        pattern = rf"{_NUMBER}(?: ?(?:{alternatives})\b)?"
    value_match = re.compile(pattern, re.IGNORECASE).search(text, label_match.end())
    if not value_match:
        return ""
    return value_match.group(0)


def extract_serving_size(text: str) -> str:
    """Return the free text after "Serving size" up to the end of its line."""
    match = _SERVING_SIZE.search(text)
    if not match:
        return ""
    return match.group(1).strip()


def extract_servings_per_container(text: str) -> str:
    """Return the servings-per-container count as digits and dots only."""
    labeled = _SERVINGS_LABELED.search(text)
    if labeled:
        amount = _NON_NUMERIC.sub("", labeled.group(1))
        if amount:
            return amount
    bare = _SERVINGS_BARE.search(text)
    if not bare:
        return ""
    return _NON_NUMERIC.sub("", bare.group(1))


def extract_ingredients(text: str) -> str:
    """Return the ingredient list, stopping at a blank line or a warnings marker."""
    match = _INGREDIENTS.search(text)
    if not match:
        return ""
    return " ".join(match.group(1).split())


def extract_warning(text: str) -> str:
    """Return an allergen statement with its leading marker phrase removed."""
    match = _WARNING.search(text)
    if not match:
        return ""
    remainder = match.group(1) if match.group(1) is not None else match.group(2)
    remainder = _LEADING_MARKER.sub("", remainder.strip())
    return remainder.strip().rstrip(".").strip()


def extract_fields(raw_text: str | None) -> ExtractedFields:
    """Extract every known field from raw OCR text.

    Missing text, missing labels and unparseable values all produce empty
    strings; this never raises on the content of ``raw_text``.
    """
    if not raw_text:
        return ExtractedFields()
    text = normalize_text(raw_text)
    values = {
        key: coerce_value(extract_label_value(text, label, units))
        for key, (label, units) in NUTRIENT_LABELS.items()
    }
    fields = ExtractedFields(
        **values,
        serving=extract_serving_size(text),
        serving_amount=extract_servings_per_container(text),
        ingredients=extract_ingredients(text),
        warning=extract_warning(text),
    )
    _logger.debug(
        "Extracted label fields: found=%s",
        sum(1 for value in fields.as_dict().values() if value),
    )
    return fields
