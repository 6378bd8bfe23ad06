"""Concurrent fan-out over every configured source adapter."""

import asyncio
import logging
import math
from dataclasses import dataclass, field

from food_aggregator.domain.foods import FoodRecord
from food_aggregator.services.sources import FoodSourceAdapter

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceResult:
    """Outcome of one source call within an aggregation."""

    source: str
    foods: list[FoodRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class AggregationResult:
    """Concatenated candidates plus per-source outcomes."""

    candidates: list[FoodRecord]
    source_results: list[SourceResult]


@dataclass
class Aggregator:
    """Call every text-search source concurrently and settle all of them.

    Each source call carries its own timeout. A failing or slow source only
    loses its own results; the others are never cancelled because of it.
    """

    sources: list[FoodSourceAdapter]
    timeout_seconds: float = 10.0
    deadline_seconds: float | None = None

    @property
    def search_sources(self) -> list[FoodSourceAdapter]:
        return [source for source in self.sources if source.supports_search]

    def per_source_limit(self, limit: int) -> int:
        """Share of the overall limit requested from each source."""
        count = len(self.search_sources)
        if count == 0:
            return 0
        return max(1, math.ceil(limit / count))

    async def aggregate(self, query: str, limit: int) -> AggregationResult:
        """Fan out ``query`` and concatenate successful results in source order."""
        sources = self.search_sources
        share = self.per_source_limit(limit)
        tasks = [
            asyncio.create_task(self._call(source, query, share)) for source in sources
        ]
        if not tasks:
            return AggregationResult(candidates=[], source_results=[])

        try:
            done, pending = await asyncio.wait(tasks, timeout=self.deadline_seconds)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise
        for task in pending:
            task.cancel()

        source_results: list[SourceResult] = []
        for source, task in zip(sources, tasks, strict=True):
            if task in done:
                source_results.append(task.result())
            else:
                _logger.warning(
                    "Source %s abandoned at search deadline for %r", source.name, query
                )
                source_results.append(
                    SourceResult(source=source.name, error="deadline exceeded")
                )

        candidates = [food for result in source_results for food in result.foods]
        return AggregationResult(candidates=candidates, source_results=source_results)

    async def _call(
        self, source: FoodSourceAdapter, query: str, limit: int
    ) -> SourceResult:
        try:
            foods = await asyncio.wait_for(
                source.search(query, limit), timeout=self.timeout_seconds
            )
        except TimeoutError:
            _logger.warning(
                "Source %s timed out after %ss for %r",
                source.name,
                self.timeout_seconds,
                query,
            )
            return SourceResult(source=source.name, error="timeout")
        except Exception as exc:
            _logger.warning("Source %s failed for %r: %s", source.name, query, exc)
            return SourceResult(source=source.name, error=str(exc) or type(exc).__name__)
        return SourceResult(source=source.name, foods=list(foods))
