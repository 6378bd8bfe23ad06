"""Collapse candidates that describe the same product."""

import re
from dataclasses import dataclass

from food_aggregator.domain.foods import FoodRecord

MIN_QUALITY_SCORE = 0.3
SIMILARITY_THRESHOLD = 0.8

_TRAILING_S = re.compile(r"s\b")
_SPECIAL_CHARS = re.compile(r"[^\w\s]")


def normalize_name(name: str | None) -> str:
    """Lowercase, drop plural ``s`` and punctuation for fuzzy comparison."""
    lowered = (name or "").lower()
    return _SPECIAL_CHARS.sub("", _TRAILING_S.sub("", lowered)).strip()


def name_similarity(first: str, second: str) -> float:
    """Token-set overlap of two normalized names, in [0, 1]."""
    if not first or not second:
        return 0.0
    if first == second:
        return 1.0
    first_tokens = set(first.split())
    second_tokens = set(second.split())
    shared = first_tokens & second_tokens
    return len(shared) / max(len(first_tokens), len(second_tokens))


def _score(food: FoodRecord) -> float:
    return food.quality_score or 0.0


def _barcode_key(food: FoodRecord) -> str:
    return str(food.barcode).strip() if food.barcode else ""


@dataclass(frozen=True)
class Deduplicator:
    """Keep the highest-scored candidate per barcode or fuzzy-name group."""

    min_score: float = MIN_QUALITY_SCORE
    similarity_threshold: float = SIMILARITY_THRESHOLD

    def filter_low_quality(self, foods: list[FoodRecord]) -> list[FoodRecord]:
        """Drop candidates scoring below the minimum quality score."""
        return [food for food in foods if _score(food) >= self.min_score]

    def deduplicate(self, foods: list[FoodRecord]) -> list[FoodRecord]:
        """Return one survivor per duplicate group, in first-seen order."""
        candidates = self.filter_low_quality(foods)
        results: list[FoodRecord] = []
        claimed: set[str] = set()

        barcode_groups: dict[str, list[FoodRecord]] = {}
        for food in candidates:
            key = _barcode_key(food)
            if key:
                barcode_groups.setdefault(key, []).append(food)

        for group in barcode_groups.values():
            best = group[0]
            for food in group[1:]:
                if _score(food) > _score(best):
                    best = food
            results.append(best)
            claimed.update(normalize_name(food.name) for food in group)

        for food in candidates:
            if _barcode_key(food):
                continue
            normalized = normalize_name(food.name)
            if normalized in claimed:
                continue

            duplicate = False
            for index, existing in enumerate(results):
                similarity = name_similarity(normalized, normalize_name(existing.name))
                if similarity >= self.similarity_threshold:
                    duplicate = True
                    if _score(food) > _score(existing):
                        results[index] = food
                    break

            if not duplicate:
                results.append(food)

        return results
