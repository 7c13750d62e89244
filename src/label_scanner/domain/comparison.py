"""Comparison result models."""

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class AllergenReason:
    """Allergen detected from a warning declaration or an ingredient alias."""

    term: str
    matched_by: Literal["warning", "alias"]
    snippet: str
    kind: Literal["allergen"] = "allergen"


@dataclass(frozen=True)
class IntoleranceReason:
    """Intolerance trigger inferred from the ingredient text."""

    term: str
    snippet: str
    matched_by: Literal["alias"] = "alias"
    kind: Literal["intolerance"] = "intolerance"


@dataclass(frozen=True)
class DietaryReason:
    """Nutrient whose percent of Daily Value reached the profile threshold."""

    term: str
    field: str
    value: float
    unit: str
    daily_value: float
    percent_of_dv: float
    threshold: float
    kind: Literal["dietary"] = "dietary"


ComparisonReason = AllergenReason | IntoleranceReason | DietaryReason


@dataclass(frozen=True)
class ComparisonSummary:
    """Human-readable reasons grouped by category."""

    allergens: tuple[str, ...] = ()
    intolerances: tuple[str, ...] = ()
    dietary: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComparisonResult:
    """Verdict of comparing a product against a profile."""

    harmful: bool
    reasons: tuple[ComparisonReason, ...] = ()
    summary: ComparisonSummary = field(default_factory=ComparisonSummary)
