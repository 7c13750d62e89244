"""Domain models for nutrition label extraction."""

from dataclasses import asdict, dataclass, field, fields

NUTRIENT_KEYS: tuple[str, ...] = (
    "calories",
    "fat",
    "saturated_fat",
    "trans_fat",
    "monounsaturated_fat",
    "polyunsaturated_fat",
    "cholesterol",
    "sodium",
    "carbohydrate",
    "fiber",
    "sugar",
    "added_sugars",
    "protein",
    "vitamin_d",
    "calcium",
    "iron",
    "potassium",
)


@dataclass(frozen=True)
class ExtractedFields:
    """Per-serving values read from a label; absent data is an empty string."""

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
    serving: str = ""
    serving_amount: str = ""
    ingredients: str = ""
    warning: str = ""

    def as_dict(self) -> dict[str, str]:
        """Return every field, including empty ones, in declaration order."""
        return asdict(self)


FIELD_KEYS: tuple[str, ...] = tuple(item.name for item in fields(ExtractedFields))


@dataclass(frozen=True)
class ScanResult:
    """OCR text together with the fields extracted from it."""

    raw_text: str
    fields: ExtractedFields = field(default_factory=ExtractedFields)
