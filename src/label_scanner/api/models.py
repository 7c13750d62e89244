"""Pydantic models for the scan and compare API payloads."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from label_scanner.domain.comparison import (
    AllergenReason,
    ComparisonReason,
    ComparisonResult,
    DietaryReason,
)
from label_scanner.domain.labels import ScanResult
from label_scanner.domain.products import ProductRecord, UserProfile


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ScanRequest(_WireModel):
    """Label photo to recognize, as base64 or a base64 data URL."""

    image_base64: str = Field(alias="imageBase64", min_length=1)


class ExtractRequest(_WireModel):
    """Already recognized label text."""

    text: str = ""


class ScanResponse(_WireModel):
    """Recognized text and the fields extracted from it."""

    raw_text: str = Field(alias="rawText")
    fields: dict[str, str]

    @classmethod
    def from_result(cls, result: ScanResult) -> "ScanResponse":
        return cls(raw_text=result.raw_text, fields=result.fields.as_dict())


NutrientValue = str | int | float | None


class ProductPayload(_WireModel):
    """Product document as stored by the catalogue."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    food_name: NutrientValue = None
    brand_name: NutrientValue = None
    barcode: NutrientValue = None
    ingredients: NutrientValue = None
    warning: NutrientValue = None
    serving: NutrientValue = None
    serving_amount: NutrientValue = None
    calories: NutrientValue = None
    fat: NutrientValue = None
    saturated_fat: NutrientValue = None
    trans_fat: NutrientValue = None
    monounsaturated_fat: NutrientValue = None
    polyunsaturated_fat: NutrientValue = None
    cholesterol: NutrientValue = None
    sodium: NutrientValue = None
    carbohydrate: NutrientValue = None
    fiber: NutrientValue = None
    sugar: NutrientValue = None
    added_sugars: NutrientValue = None
    protein: NutrientValue = None
    vitamin_d: NutrientValue = None
    calcium: NutrientValue = None
    iron: NutrientValue = None
    potassium: NutrientValue = None

    def to_record(self) -> ProductRecord:
        return ProductRecord.from_document(self.model_dump())


class ProfilePayload(_WireModel):
    """Restriction profile in UI vocabulary."""

    allergens: list[str] = Field(default_factory=list)
    intolerances: list[str] = Field(default_factory=list)
    dietary: list[str] = Field(default_factory=list)
    strictness: float | None = Field(default=None, gt=0.0, le=1.0)

    def to_profile(self, default_strictness: float) -> UserProfile:
        strictness = (
            self.strictness if self.strictness is not None else default_strictness
        )
        return UserProfile.create(
            allergens=self.allergens,
            intolerances=self.intolerances,
            dietary=self.dietary,
            strictness=strictness,
        )


class CompareRequest(_WireModel):
    """Product and profile to compare."""

    product: ProductPayload
    profile: ProfilePayload


class AllergenReasonPayload(_WireModel):
    kind: Literal["allergen"] = "allergen"
    term: str
    matched_by: Literal["warning", "alias"] = Field(alias="matchedBy")
    snippet: str


class IntoleranceReasonPayload(_WireModel):
    kind: Literal["intolerance"] = "intolerance"
    term: str
    matched_by: Literal["alias"] = Field(default="alias", alias="matchedBy")
    snippet: str


class DietaryReasonPayload(_WireModel):
    kind: Literal["dietary"] = "dietary"
    term: str
    field: str
    value: float
    unit: str
    daily_value: float = Field(alias="dailyValue")
    percent_of_dv: float = Field(alias="percentOfDV")
    threshold: float


ReasonPayload = Annotated[
    AllergenReasonPayload | IntoleranceReasonPayload | DietaryReasonPayload,
    Field(discriminator="kind"),
]


class SummaryPayload(_WireModel):
    allergens: list[str] = Field(default_factory=list)
    intolerances: list[str] = Field(default_factory=list)
    dietary: list[str] = Field(default_factory=list)


class CompareResponse(_WireModel):
    """Explainable verdict for a product and profile."""

    harmful: bool
    reasons: list[ReasonPayload]
    summary: SummaryPayload

    @classmethod
    def from_result(cls, result: ComparisonResult) -> "CompareResponse":
        return cls(
            harmful=result.harmful,
            reasons=[_reason_payload(reason) for reason in result.reasons],
            summary=SummaryPayload(
                allergens=list(result.summary.allergens),
                intolerances=list(result.summary.intolerances),
                dietary=list(result.summary.dietary),
            ),
        )


def _reason_payload(
    reason: ComparisonReason,
) -> AllergenReasonPayload | IntoleranceReasonPayload | DietaryReasonPayload:
    if isinstance(reason, AllergenReason):
        return AllergenReasonPayload(
            term=reason.term, matched_by=reason.matched_by, snippet=reason.snippet
        )
    if isinstance(reason, DietaryReason):
        return DietaryReasonPayload(
            term=reason.term,
            field=reason.field,
            value=reason.value,
            unit=reason.unit,
            daily_value=reason.daily_value,
            percent_of_dv=reason.percent_of_dv,
            threshold=reason.threshold,
        )
    return IntoleranceReasonPayload(term=reason.term, snippet=reason.snippet)
