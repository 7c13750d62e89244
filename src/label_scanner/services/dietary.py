"""Percent-of-Daily-Value checks for dietary restriction tags."""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from label_scanner.domain.comparison import DietaryReason
from label_scanner.domain.products import ProductRecord

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyValue:
    """Reference amount for a nutrient."""

    amount: float
    unit: str


# FDA reference amounts for adults and children 4+ (2020 labeling rules).
# Total sugars has no official value; the added sugars amount stands in.
DAILY_VALUES: Mapping[str, DailyValue] = MappingProxyType(
    {
        "calories": DailyValue(2000, "kcal"),
        "fat": DailyValue(78, "g"),
        "saturated_fat": DailyValue(20, "g"),
        "cholesterol": DailyValue(300, "mg"),
        "sodium": DailyValue(2300, "mg"),
        "carbohydrate": DailyValue(275, "g"),
        "fiber": DailyValue(28, "g"),
        "sugar": DailyValue(50, "g"),
        "added_sugars": DailyValue(50, "g"),
        "protein": DailyValue(50, "g"),
        "vitamin_d": DailyValue(20, "mcg"),
        "calcium": DailyValue(1300, "mg"),
        "iron": DailyValue(18, "mg"),
        "potassium": DailyValue(4700, "mg"),
    }
)

SOURCE_UNITS: Mapping[str, str] = MappingProxyType(
    {
        "calories": "kcal",
        "fat": "g",
        "saturated_fat": "g",
        "trans_fat": "g",
        "monounsaturated_fat": "g",
        "polyunsaturated_fat": "g",
        "cholesterol": "mg",
        "sodium": "mg",
        "carbohydrate": "g",
        "fiber": "g",
        "sugar": "g",
        "added_sugars": "g",
        "protein": "g",
        "vitamin_d": "mcg",
        "calcium": "mg",
        "iron": "mg",
        "potassium": "mg",
    }
)

DIETARY_FIELDS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "high-calorie": ("calories",),
        "high-fat": ("fat",),
        "high-saturated": ("saturated_fat",),
        "high-sugar": ("added_sugars", "sugar"),
        "high-sodium": ("sodium",),
        "high-carbohydrates": ("carbohydrate",),
        "high-protein": ("protein",),
        "high-fiber": ("fiber",),
        "high-potassium": ("potassium",),
        "high-calcium": ("calcium",),
        "high-iron": ("iron",),
        "high-cholesterol": ("cholesterol",),
    }
)

TAG_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "high-calories": "high-calorie",
        "high-saturated-fat": "high-saturated",
        "high-sat-fat": "high-saturated",
        "high-sugars": "high-sugar",
        "high-salt": "high-sodium",
        "high-carbohydrate": "high-carbohydrates",
        "high-carbs": "high-carbohydrates",
        "high-carb": "high-carbohydrates",
        "high-fibre": "high-fiber",
    }
)

# Grams per unit.
_MASS_UNITS: Mapping[str, float] = MappingProxyType(
    {"g": 1.0, "mg": 1e-3, "mcg": 1e-6}
)
_UNIT_SPELLINGS: Mapping[str, str] = MappingProxyType(
    {
        "µg": "mcg",
        "μg": "mcg",
        "ug": "mcg",
        "gram": "g",
        "grams": "g",
        "milligram": "mg",
        "milligrams": "mg",
        "microgram": "mcg",
        "micrograms": "mcg",
        "cal": "kcal",
        "calories": "kcal",
    }
)
_AMOUNT = re.compile(r"(\d+(?:\.\d+)?)\s*([a-zµμ]+)?", re.IGNORECASE)


def dietary_tag(term: str) -> str:
    """Canonicalize a dietary tag: "High Fat" and "high_fat" become "high-fat"."""
    tag = "-".join(re.sub(r"[^a-z0-9]+", " ", term.lower()).split())
    return TAG_ALIASES.get(tag, tag)


def convert_amount(value: float, from_unit: str, to_unit: str) -> float | None:
    """Convert between g, mg and mcg; None when the units are not convertible."""
    if from_unit == to_unit:
        return value
    if from_unit not in _MASS_UNITS or to_unit not in _MASS_UNITS:
        return None
    return value * _MASS_UNITS[from_unit] / _MASS_UNITS[to_unit]


def parse_amount(raw: str, default_unit: str) -> tuple[float, str] | None:
    """Parse "820", "820 mg" or "0.8g" into a number and its unit."""
    match = _AMOUNT.search(raw or "")
    if not match:
        return None
    unit = (match.group(2) or default_unit).lower()
    return float(match.group(1)), _UNIT_SPELLINGS.get(unit, unit)


def evaluate_dietary(
    tags: Iterable[str],
    product: ProductRecord,
    *,
    threshold: float,
    fields_by_tag: Mapping[str, tuple[str, ...]] = DIETARY_FIELDS,
    daily_values: Mapping[str, DailyValue] = DAILY_VALUES,
    source_units: Mapping[str, str] = SOURCE_UNITS,
) -> list[DietaryReason]:
    """Flag tags whose nutrient reaches ``threshold`` as a fraction of its DV.

    Tags without a usable value are skipped; missing data is not a violation.
    """
    reasons: list[DietaryReason] = []
    for tag in tags:
        candidates = fields_by_tag.get(tag)
        if not candidates:
            _logger.debug("Unknown dietary tag=%s", tag)
            continue
        resolved = _first_amount(product, candidates, daily_values, source_units)
        if resolved is None:
            _logger.debug("No usable value for dietary tag=%s", tag)
            continue
        field, value, reference = resolved
        percent = value / reference.amount
        if percent >= threshold:
            reasons.append(
                DietaryReason(
                    term=tag,
                    field=field,
                    value=value,
                    unit=reference.unit,
                    daily_value=reference.amount,
                    percent_of_dv=percent,
                    threshold=threshold,
                )
            )
    return reasons


def _first_amount(
    product: ProductRecord,
    candidates: tuple[str, ...],
    daily_values: Mapping[str, DailyValue],
    source_units: Mapping[str, str],
) -> tuple[str, float, DailyValue] | None:
    """Return the first candidate field with a value convertible to its DV unit."""
    for field in candidates:
        reference = daily_values.get(field)
        if reference is None:
            continue
        parsed = parse_amount(
            getattr(product, field, ""), source_units.get(field, reference.unit)
        )
        if parsed is None:
            continue
        amount, unit = parsed
        converted = convert_amount(amount, unit, reference.unit)
        if converted is None:
            _logger.debug(
                "Cannot convert %s from %s to %s", field, unit, reference.unit
            )
            continue
        return field, converted, reference
    return None
