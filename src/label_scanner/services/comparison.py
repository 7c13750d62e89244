"""Product versus profile comparison."""

import logging
import math
from collections.abc import Iterable

from label_scanner.domain.comparison import (
    AllergenReason,
    ComparisonReason,
    ComparisonResult,
    ComparisonSummary,
    DietaryReason,
    IntoleranceReason,
)
from label_scanner.domain.products import ProductRecord, UserProfile
from label_scanner.services.allergens import (
    canonical_keys,
    resolve_allergens,
    resolve_intolerances,
)
from label_scanner.services.dietary import dietary_tag, evaluate_dietary

_logger = logging.getLogger(__name__)


def compare_product(product: ProductRecord, profile: UserProfile) -> ComparisonResult:
    """Decide whether a product is unsafe for a profile and explain why.

    Allergens are checked first, then intolerances, then dietary limits;
    reasons keep that discovery order.
    """
    reasons: list[ComparisonReason] = []
    reasons.extend(
        resolve_allergens(
            canonical_keys(profile.allergens),
            ingredients=product.ingredients,
            warnings=product.warning_entries(),
        )
    )
    reasons.extend(
        resolve_intolerances(
            canonical_keys(profile.intolerances),
            ingredients=product.ingredients,
        )
    )
    reasons.extend(
        evaluate_dietary(
            _unique(dietary_tag(term) for term in profile.dietary),
            product,
            threshold=profile.strictness,
        )
    )
    result = ComparisonResult(
        harmful=bool(reasons),
        reasons=tuple(reasons),
        summary=build_summary(reasons),
    )
    _logger.debug(
        "Compared product=%s harmful=%s reasons=%s",
        product.food_name or product.barcode,
        result.harmful,
        len(reasons),
    )
    return result


def build_summary(reasons: list[ComparisonReason]) -> ComparisonSummary:
    """Group rendered reasons by category in the order they were found."""
    allergens: list[str] = []
    intolerances: list[str] = []
    dietary: list[str] = []
    for reason in reasons:
        if isinstance(reason, AllergenReason):
            allergens.append(describe_reason(reason))
        elif isinstance(reason, IntoleranceReason):
            intolerances.append(describe_reason(reason))
        else:
            dietary.append(describe_reason(reason))
    return ComparisonSummary(
        allergens=tuple(allergens),
        intolerances=tuple(intolerances),
        dietary=tuple(dietary),
    )


def describe_reason(reason: ComparisonReason) -> str:
    """Render a reason as a single line for display."""
    if isinstance(reason, DietaryReason):
        return (
            f"Dietary: {reason.term} — {reason.field} "
            f"{_format_number(reason.value)}{reason.unit} "
            f"≈ {_percent(reason.percent_of_dv, floor=True)}% DV "
            f"(≥ {_percent(reason.threshold)}%)"
        )
    label = "Allergen" if isinstance(reason, AllergenReason) else "Intolerance"
    return f'{label}: {reason.term} (via {reason.matched_by}: "{reason.snippet}")'


def _unique(items: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for item in items:
        if item and item not in seen:
            seen.append(item)
    return seen


def _format_number(value: float) -> str:
    return f"{round(value, 2):g}"


def _percent(fraction: float, *, floor: bool = False) -> int:
    scaled = round(fraction * 100, 6)
    return math.floor(scaled) if floor else round(scaled)
