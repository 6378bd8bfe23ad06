"""Deterministic final ordering of search results."""

from food_aggregator.domain.foods import FoodRecord
from food_aggregator.services.scoring import source_priority


def _rank_key(food: FoodRecord) -> tuple[float, int, bool, int]:
    return (
        -(food.quality_score or 0.0),
        -source_priority(food.source),
        bool(food.brand),
        len(food.name or ""),
    )


def rank(foods: list[FoodRecord], limit: int | None = None) -> list[FoodRecord]:
    """Sort by score, source priority, unbranded first, then shorter names.

    The result is truncated to ``limit`` when given.
    """
    ordered = sorted(foods, key=_rank_key)
    if limit is None:
        return ordered
    return ordered[: max(0, limit)]
