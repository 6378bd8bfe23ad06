"""Canonical food record models shared by every data source."""

from dataclasses import dataclass, replace
from enum import StrEnum


class DataSource(StrEnum):
    """Data providers a food record can originate from."""

    LOCAL = "local"
    USDA = "usda"
    NUTRITIONIX = "nutritionix"
    OPEN_FOOD_FACTS = "openFoodFacts"


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrients for one declared serving.

    A value of ``None`` means the provider did not report the nutrient.
    """

    calories_per_serving: float | None = None
    protein_grams: float | None = None
    carbs_grams: float | None = None
    fat_grams: float | None = None
    fiber_grams: float | None = None
    sugar_grams: float | None = None
    sodium_mg: float | None = None

    def __post_init__(self) -> None:
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if value is not None and value < 0:
                object.__setattr__(self, name, 0.0)


@dataclass(frozen=True)
class Serving:
    """Serving size declared by the provider."""

    size: float
    unit: str

    def __post_init__(self) -> None:
        if self.size <= 0:
            object.__setattr__(self, "size", 100.0)
            object.__setattr__(self, "unit", "g")


@dataclass(frozen=True)
class FoodRecord:
    """Normalized food entity produced by every source adapter."""

    id: str
    name: str
    source: DataSource | str
    source_id: str
    nutrition: NutritionFacts
    serving: Serving
    brand: str | None = None
    barcode: str | None = None
    quality_score: float | None = None
    data_type: str | None = None
    image_url: str | None = None
    ingredients: str | None = None
    nutrition_grade: str | None = None
    nova_group: int | None = None
    serving_weight_grams: float | None = None

    def with_score(self, score: float) -> "FoodRecord":
        """Return a copy carrying the given quality score."""
        return replace(self, quality_score=score)


def make_record_id(source: DataSource | str, source_id: str) -> str:
    """Build the source-qualified record identifier."""
    return f"{source}_{source_id}"
