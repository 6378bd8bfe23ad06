"""Food search entry point: aggregate, score, filter, deduplicate, rank."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from uuid import UUID

from food_aggregator.domain.foods import DataSource, FoodRecord
from food_aggregator.services.aggregator import Aggregator, SourceResult
from food_aggregator.services.dedup import Deduplicator
from food_aggregator.services.ranking import rank
from food_aggregator.services.scoring import QualityScorer
from food_aggregator.services.sources import FoodSourceAdapter, LocalSource

# Most barcode-reliable provider first.
BARCODE_PRIORITY: tuple[str, ...] = (
    DataSource.LOCAL,
    DataSource.OPEN_FOOD_FACTS,
    DataSource.NUTRITIONIX,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchStats:
    """Summary of one search run."""

    total: int
    source_counts: dict[str, int]
    source_failures: dict[str, bool]
    min_score: float
    max_score: float
    avg_score: float


@dataclass(frozen=True)
class SearchOutcome:
    """Ranked results together with run statistics."""

    results: list[FoodRecord]
    stats: SearchStats


@dataclass
class FoodSearchService:
    """Search and barcode lookup across every configured source."""

    sources: list[FoodSourceAdapter]
    scorer: QualityScorer = field(default_factory=QualityScorer)
    deduplicator: Deduplicator = field(default_factory=Deduplicator)
    timeout_seconds: float = 10.0
    deadline_seconds: float | None = None
    aggregator: Aggregator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.aggregator = Aggregator(
            sources=self.sources,
            timeout_seconds=self.timeout_seconds,
            deadline_seconds=self.deadline_seconds,
        )

    def for_user(self, user_id: UUID | None) -> "FoodSearchService":
        """Return a service whose custom-food source is scoped to ``user_id``."""
        sources = [
            replace(source, user_id=user_id)
            if isinstance(source, LocalSource)
            else source
            for source in self.sources
        ]
        return replace(self, sources=sources)

    async def search_foods(self, query: str, limit: int = 25) -> list[FoodRecord]:
        """Return at most ``limit`` ranked, deduplicated records for ``query``."""
        outcome = await self.search_with_stats(query, limit)
        return outcome.results

    async def search_with_stats(self, query: str, limit: int = 25) -> SearchOutcome:
        """Run a search and report per-source counts and score statistics."""
        if not query or not query.strip() or limit <= 0:
            return SearchOutcome(results=[], stats=_build_stats([], []))

        aggregation = await self.aggregator.aggregate(query, limit)
        scored = self.scorer.score_all(aggregation.candidates, query)
        unique = self.deduplicator.deduplicate(scored)
        results = rank(unique, limit)
        _logger.info(
            "Food search: query=%s candidates=%s unique=%s returned=%s",
            query,
            len(aggregation.candidates),
            len(unique),
            len(results),
        )
        return SearchOutcome(
            results=results,
            stats=_build_stats(results, aggregation.source_results),
        )

    async def get_food_by_barcode(self, barcode: str) -> FoodRecord | None:
        """Return the first record found, trying sources in barcode priority order."""
        code = str(barcode or "").strip()
        if not code:
            return None
        for source in self._barcode_sources():
            try:
                food = await asyncio.wait_for(
                    source.lookup_barcode(code), timeout=self.timeout_seconds
                )
            except TimeoutError:
                _logger.warning(
                    "Source %s barcode lookup timed out for %r", source.name, code
                )
                continue
            except Exception as exc:
                _logger.warning(
                    "Source %s barcode lookup failed for %r: %s", source.name, code, exc
                )
                continue
            if food is not None:
                return food
        return None

    def _barcode_sources(self) -> list[FoodSourceAdapter]:
        capable = [source for source in self.sources if source.supports_barcode]

        def priority(source: FoodSourceAdapter) -> int:
            if source.name in BARCODE_PRIORITY:
                return BARCODE_PRIORITY.index(source.name)
            return len(BARCODE_PRIORITY)

        return sorted(capable, key=priority)


def _build_stats(
    results: list[FoodRecord], source_results: list[SourceResult]
) -> SearchStats:
    scores = [food.quality_score or 0.0 for food in results]
    return SearchStats(
        total=len(results),
        source_counts={result.source: len(result.foods) for result in source_results},
        source_failures={result.source: result.failed for result in source_results},
        min_score=min(scores) if scores else 0.0,
        max_score=max(scores) if scores else 0.0,
        avg_score=sum(scores) / len(scores) if scores else 0.0,
    )
