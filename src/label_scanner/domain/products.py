"""Domain models for products and dietary profiles."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields

DEFAULT_STRICTNESS = 0.20


@dataclass(frozen=True)
class ProductRecord:
    """Product document fields; nutrient values are decimal strings or empty."""

    food_name: str = ""
    brand_name: str = ""
    barcode: str = ""
    ingredients: str = ""
    warning: str = ""
    serving: str = ""
    serving_amount: str = ""
    calories: str = ""
    fat: str = ""
    saturated_fat: str = ""
    trans_fat: str = ""
    monounsaturated_fat: str = ""
    polyunsaturated_fat: str = ""
    cholesterol: str = ""
    sodium: str = ""
    carbohydrate: str = ""
    fiber: str = ""
    sugar: str = ""
    added_sugars: str = ""
    protein: str = ""
    vitamin_d: str = ""
    calcium: str = ""
    iron: str = ""
    potassium: str = ""

    @classmethod
    def from_document(cls, document: Mapping[str, object]) -> "ProductRecord":
        """Build a record from a stored product document, ignoring extra keys."""
        values: dict[str, str] = {}
        for item in fields(cls):
            raw = document.get(item.name)
            values[item.name] = "" if raw is None else str(raw).strip()
        return cls(**values)

    def warning_entries(self) -> list[str]:
        """Split the comma-delimited warning list into trimmed entries."""
        return [entry.strip() for entry in self.warning.split(",") if entry.strip()]


@dataclass(frozen=True)
class UserProfile:
    """Dietary restrictions chosen by a user, in UI vocabulary."""

    allergens: tuple[str, ...] = ()
    intolerances: tuple[str, ...] = ()
    dietary: tuple[str, ...] = ()
    strictness: float = DEFAULT_STRICTNESS

    def __post_init__(self) -> None:
        if not 0.0 < self.strictness <= 1.0:
            raise ValueError(f"strictness must be in (0, 1], got {self.strictness}")

    @classmethod
    def create(
        cls,
        *,
        allergens: Iterable[str] = (),
        intolerances: Iterable[str] = (),
        dietary: Iterable[str] = (),
        strictness: float = DEFAULT_STRICTNESS,
    ) -> "UserProfile":
        """Create a profile from any iterables of tags."""
        return cls(
            allergens=tuple(allergens),
            intolerances=tuple(intolerances),
            dietary=tuple(dietary),
            strictness=strictness,
        )
