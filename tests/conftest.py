"""Shared test fixtures."""

import asyncio
import logging
from dataclasses import dataclass, field

import pytest

from food_aggregator.config import Settings
from food_aggregator.domain.foods import (
    DataSource,
    FoodRecord,
    NutritionFacts,
    Serving,
    make_record_id,
)

COMPLETE_NUTRITION = NutritionFacts(
    calories_per_serving=52,
    protein_grams=0.3,
    carbs_grams=14,
    fat_grams=0.2,
    fiber_grams=2.4,
    sugar_grams=10.4,
    sodium_mg=1,
)


def make_food(  # noqa: PLR0913
    name: str,
    *,
    source: DataSource | str = DataSource.USDA,
    source_id: str | None = None,
    brand: str | None = None,
    barcode: str | None = None,
    nutrition: NutritionFacts = COMPLETE_NUTRITION,
    serving: Serving | None = None,
    score: float | None = None,
) -> FoodRecord:
    """Build a food record with sensible defaults."""
    resolved_id = source_id or name.lower().replace(" ", "-")
    return FoodRecord(
        id=make_record_id(source, resolved_id),
        name=name,
        source=source,
        source_id=resolved_id,
        nutrition=nutrition,
        serving=serving or Serving(size=100, unit="g"),
        brand=brand,
        barcode=barcode,
        quality_score=score,
    )


@dataclass
class FakeSource:
    """In-memory source adapter recording its calls."""

    name: str
    foods: list[FoodRecord] = field(default_factory=list)
    barcodes: dict[str, FoodRecord] = field(default_factory=dict)
    supports_search: bool = True
    supports_barcode: bool = False
    delay_seconds: float = 0.0
    error: Exception | None = None
    search_calls: list[tuple[str, int]] = field(default_factory=list)
    barcode_calls: list[str] = field(default_factory=list)

    async def search(self, query: str, limit: int) -> list[FoodRecord]:
        self.search_calls.append((query, limit))
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return list(self.foods)

    async def lookup_barcode(self, barcode: str) -> FoodRecord | None:
        self.barcode_calls.append(barcode)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.barcodes.get(barcode)


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    """Chainable stand-in for a Supabase query builder."""

    name: str
    rows: list[list[dict[str, object]]] = field(default_factory=list)
    filters: list[tuple[str, str, object]] = field(default_factory=list)
    limits: list[int] = field(default_factory=list)

    def select(self, *_args) -> "FakeTable":
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("eq", column, value))
        return self

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("ilike", column, value))
        return self

    def limit(self, count: int) -> "FakeTable":
        self.limits.append(count)
        return self

    def execute(self) -> FakeResponse:
        data = self.rows.pop(0) if self.rows else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        return self.tables.setdefault(name, FakeTable(name=name))


@pytest.fixture(autouse=True)
def _propagate_app_logs() -> None:
    logging.getLogger("food_aggregator").propagate = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        usda_api_key="usda-key",
        nutritionix_app_id="nix-app",
        nutritionix_api_key="nix-key",
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
            ".eyJyb2xlIjoic2VydmljZV9yb2xlIn0"
            ".c2lnbmF0dXJl"
        ),
        _env_file=None,
    )


@pytest.fixture
def bare_settings() -> Settings:
    return Settings(_env_file=None)
