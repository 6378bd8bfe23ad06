"""Composite quality scoring for search candidates."""

from dataclasses import dataclass, field

from food_aggregator.domain.foods import DataSource, FoodRecord
from food_aggregator.services.classifiers import FoodClassifier
from food_aggregator.services.units import serving_grams

SOURCE_PRIORITY: dict[str, int] = {
    DataSource.LOCAL: 5,
    DataSource.USDA: 4,
    DataSource.NUTRITIONIX: 4,
    DataSource.OPEN_FOOD_FACTS: 2,
}

COMPLETENESS_WEIGHT = 3.0
SOURCE_WEIGHT = 2.0
RELEVANCE_WEIGHT = 3.0
SERVING_WEIGHT = 1.0
BRAND_BARCODE_WEIGHT = 1.0

NON_FOOD_SCORE = 0.1
MAX_SCORE = 10.0
REASONABLE_SERVING_MIN_G = 10.0
REASONABLE_SERVING_MAX_G = 1000.0


def source_priority(source: DataSource | str | None) -> int:
    """Return the trust priority of a source; unknown sources rank 0."""
    return SOURCE_PRIORITY.get(source or "", 0)


def _is_present(value: object) -> bool:
    return value is not None and value != ""


@dataclass(frozen=True)
class QualityScorer:
    """Score candidates on a 0-10 scale for ranking.

    The score is a weighted sum of data completeness, source reliability,
    query relevance, serving plausibility and brand/barcode presence. Names
    matching a non-food keyword collapse to a fixed low score.
    """

    classifier: FoodClassifier = field(default_factory=FoodClassifier)

    def score(self, food: FoodRecord, query: str | None = None) -> float:
        """Return the quality score of ``food`` for ``query``."""
        if self.classifier.is_non_food(food.name):
            return NON_FOOD_SCORE

        total = self.completeness(food) * COMPLETENESS_WEIGHT
        total += self.source_reliability(food.source) * SOURCE_WEIGHT
        if query and query.strip():
            total += self.relevance(food, query) * RELEVANCE_WEIGHT
        if self.is_reasonable_serving(food):
            total += SERVING_WEIGHT
        if food.brand or food.barcode:
            total += BRAND_BARCODE_WEIGHT
        return min(MAX_SCORE, max(0.0, total))

    def score_all(
        self, foods: list[FoodRecord], query: str | None = None
    ) -> list[FoodRecord]:
        """Return copies of ``foods`` with quality scores attached."""
        return [food.with_score(self.score(food, query)) for food in foods]

    @staticmethod
    def completeness(food: FoodRecord) -> float:
        """Fraction of name, calories, protein, carbs and fat that are present."""
        nutrition = food.nutrition
        fields = (
            food.name,
            nutrition.calories_per_serving,
            nutrition.protein_grams,
            nutrition.carbs_grams,
            nutrition.fat_grams,
        )
        return sum(1 for value in fields if _is_present(value)) / len(fields)

    @staticmethod
    def source_reliability(source: DataSource | str | None) -> float:
        """Source priority normalized to [0, 1]."""
        return source_priority(source) / max(SOURCE_PRIORITY.values())

    def relevance(self, food: FoodRecord, query: str) -> float:
        """Return how well a candidate matches the query, in [0, 1].

        Bonuses and penalties are summed first and clamped once at the end,
        so an exact basic-food match may exceed 1.0 before clamping.
        """
        needle = query.lower().strip()
        name = (food.name or "").lower()
        brand = (food.brand or "").lower()
        is_basic = self.classifier.is_basic_food(food.name)

        if name == needle:
            relevance = 1.2 if is_basic and not food.brand else 1.0
        elif name.startswith(needle + " "):
            relevance = 0.9
        elif needle in name:
            relevance = 0.7
        elif needle in brand:
            relevance = 0.5
        else:
            relevance = _word_overlap(needle, name, brand)

        if is_basic:
            relevance += 0.2 if food.brand else 0.4

        if self.classifier.is_basic_food(needle) and self.classifier.is_processed_food(
            food.name, food.brand
        ):
            relevance -= 0.3

        return min(1.0, max(0.0, relevance))

    @staticmethod
    def is_reasonable_serving(food: FoodRecord) -> bool:
        """Return True when the serving is between 10 g and 1 kg equivalent."""
        grams = serving_grams(
            food.serving.size,
            food.serving.unit,
            food.name,
            food.serving_weight_grams,
        )
        return REASONABLE_SERVING_MIN_G <= grams <= REASONABLE_SERVING_MAX_G


def _word_overlap(query: str, name: str, brand: str) -> float:
    query_words = query.split()
    if not query_words:
        return 0.0
    name_words = name.split()
    brand_words = brand.split()
    name_matches = sum(
        1 for word in query_words if any(word in token for token in name_words)
    )
    brand_matches = sum(
        1 for word in query_words if any(word in token for token in brand_words)
    )
    return max(
        name_matches / len(query_words) * 0.6,
        brand_matches / len(query_words) * 0.4,
    )
