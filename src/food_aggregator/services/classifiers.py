"""Keyword heuristics for non-food, basic-food and processed-food detection."""

from dataclasses import dataclass, field

from food_aggregator.domain.keywords import DEFAULT_KEYWORDS, KeywordLists


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


@dataclass(frozen=True)
class FoodClassifier:
    """Classify candidates by case-insensitive substring matches."""

    keywords: KeywordLists = field(default=DEFAULT_KEYWORDS)

    def is_non_food(self, name: str | None) -> bool:
        """Return True when the name looks like merchandise, not food."""
        return _contains_any((name or "").lower(), self.keywords.non_food)

    def is_basic_food(self, name: str | None) -> bool:
        """Return True when the name mentions an unprocessed staple."""
        return _contains_any((name or "").lower(), self.keywords.basic_food)

    def is_processed_food(self, name: str | None, brand: str | None = None) -> bool:
        """Return True when the name or brand mentions a processed-food term."""
        keywords = self.keywords.processed_food
        return _contains_any((name or "").lower(), keywords) or _contains_any(
            (brand or "").lower(), keywords
        )
