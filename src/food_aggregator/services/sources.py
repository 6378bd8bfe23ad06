"""Source adapters that fetch provider data and map it to food records.

Every adapter recovers from provider failures at its own boundary: network
errors, timeouts and malformed payloads are logged and turned into an empty
result, so one provider can never fail a whole search.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Protocol, TypeVar
from uuid import UUID

import httpx
from postgrest.exceptions import APIError

from food_aggregator.adapters.nutritionix_client import NutritionixClient
from food_aggregator.adapters.openfoodfacts_client import OpenFoodFactsClient
from food_aggregator.adapters.usda_client import UsdaClient
from food_aggregator.domain.foods import DataSource, FoodRecord
from food_aggregator.services.transforms import (
    transform_custom_food,
    transform_nutritionix_food,
    transform_openfoodfacts_product,
    transform_usda_food,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

_logger = logging.getLogger(__name__)

T = TypeVar("T")

RECOVERABLE_ERRORS: tuple[type[Exception], ...] = (
    httpx.HTTPError,
    TimeoutError,
    ValueError,
    KeyError,
    TypeError,
    AttributeError,
    ArithmeticError,
)


class FoodSourceAdapter(Protocol):
    """Capability set shared by every data source."""

    name: str
    supports_search: bool
    supports_barcode: bool

    async def search(self, query: str, limit: int) -> list[FoodRecord]:
        """Return records matching a free-text query."""

    async def lookup_barcode(self, barcode: str) -> FoodRecord | None:
        """Return the record for a barcode, if the provider knows it."""


class CustomFoodRepository(Protocol):
    """Read interface for user-curated custom foods."""

    def search_foods(
        self, query: str, limit: int, user_id: UUID | None = None
    ) -> list[dict[str, object]]:
        """Return raw rows whose name matches the query."""

    def get_by_barcode(
        self, barcode: str, user_id: UUID | None = None
    ) -> dict[str, object] | None:
        """Return the raw row for a barcode, if present."""


@dataclass(frozen=True)
class RetryPolicy:
    """Short retry for transient provider failures."""

    attempts: int = 1
    delay_seconds: float = 0.3


@dataclass
class BaseSource:
    """Shared retry, recovery and logging for source adapters."""

    name: ClassVar[str] = "source"
    supports_search: ClassVar[bool] = True
    supports_barcode: ClassVar[bool] = False
    recoverable: ClassVar[tuple[type[Exception], ...]] = RECOVERABLE_ERRORS

    retry: RetryPolicy = field(default_factory=RetryPolicy)
    debug: bool = False

    @property
    def enabled(self) -> bool:
        """Whether the source is configured to reach its provider."""
        return True

    async def search(self, query: str, limit: int) -> list[FoodRecord]:
        """Search the provider, returning an empty list on failure."""
        if not self.supports_search or not self.enabled:
            _logger.debug("Source %s skipped search: not configured", self.name)
            return []
        foods = await self._guarded(
            lambda: self._search(query, limit), default=[], subject=query
        )
        if self.debug:
            _logger.info(
                "Source %s search: query=%s results=%s", self.name, query, len(foods)
            )
        return foods

    async def lookup_barcode(self, barcode: str) -> FoodRecord | None:
        """Look up a barcode, returning None on failure or when unknown."""
        if not self.supports_barcode or not self.enabled:
            return None
        food = await self._guarded(
            lambda: self._lookup_barcode(barcode), default=None, subject=barcode
        )
        if self.debug:
            _logger.info(
                "Source %s barcode: barcode=%s found=%s",
                self.name,
                barcode,
                food is not None,
            )
        return food

    async def _search(self, query: str, limit: int) -> list[FoodRecord]:
        return []

    def _map_each(
        self,
        items: "Iterable[object]",
        transform: "Callable[[dict[str, object]], FoodRecord]",
        subject: str,
    ) -> list[FoodRecord]:
        """Map items one at a time, skipping only the ones that fail."""
        foods: list[FoodRecord] = []
        for item in items:
            try:
                foods.append(transform(item))
            except self.recoverable as exc:
                _logger.warning(
                    "Source %s skipped a malformed item for %r: %s",
                    self.name,
                    subject,
                    exc,
                )
        return foods

    async def _lookup_barcode(self, barcode: str) -> FoodRecord | None:
        return None

    async def _guarded(
        self, func: "Callable[[], Awaitable[T]]", *, default: T, subject: str
    ) -> T:
        """Run ``func`` with retries, converting provider failures to ``default``."""
        attempt = 0
        while True:
            try:
                return await func()
            except self.recoverable as exc:
                status_code = status_code_from_exception(exc)
                if status_code == "404":
                    return default
                attempt += 1
                if attempt <= self.retry.attempts and _is_transient(exc):
                    await asyncio.sleep(self.retry.delay_seconds)
                    continue
                _logger.warning(
                    "Source %s failed for %r (status=%s): %s",
                    self.name,
                    subject,
                    status_code,
                    exc,
                )
                return default


def status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _is_transient(exc: Exception) -> bool:
    """Network errors, timeouts and 5xx/429 responses are worth retrying."""
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        return code >= 500 or code == 429
    return isinstance(exc, (httpx.TransportError, TimeoutError))


@dataclass
class UsdaSource(BaseSource):
    """USDA FoodData Central text search."""

    name: ClassVar[str] = DataSource.USDA.value

    client: UsdaClient | None = None
    data_types: str | None = "Foundation,SR Legacy,Survey (FNDDS)"

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def _search(self, query: str, limit: int) -> list[FoodRecord]:
        payload = await self.client.search_foods(
            query, page_size=limit, data_types=self.data_types
        )
        foods = [
            food
            for food in payload.get("foods") or []
            if isinstance(food, dict)
            and food.get("description")
            and food.get("foodNutrients")
        ]
        return self._map_each(foods, transform_usda_food, query)


@dataclass
class NutritionixSource(BaseSource):
    """Nutritionix branded and common food search plus UPC lookup."""

    name: ClassVar[str] = DataSource.NUTRITIONIX.value
    supports_barcode: ClassVar[bool] = True

    client: NutritionixClient | None = None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def _search(self, query: str, limit: int) -> list[FoodRecord]:
        payload = await self.client.search_instant(query)
        per_list = math.ceil(limit / 2)
        items = list(payload.get("branded") or [])[:per_list]
        items.extend(list(payload.get("common") or [])[:per_list])
        return self._map_each(items, transform_nutritionix_food, query)

    async def _lookup_barcode(self, barcode: str) -> FoodRecord | None:
        payload = await self.client.lookup_upc(barcode)
        foods = payload.get("foods") or []
        if not foods:
            return None
        return transform_nutritionix_food(foods[0])


@dataclass
class OpenFoodFactsSource(BaseSource):
    """OpenFoodFacts product search and barcode lookup."""

    name: ClassVar[str] = DataSource.OPEN_FOOD_FACTS.value
    supports_barcode: ClassVar[bool] = True

    client: OpenFoodFactsClient | None = None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def _search(self, query: str, limit: int) -> list[FoodRecord]:
        payload = await self.client.search_products(query, page_size=limit)
        products = [
            product
            for product in payload.get("products") or []
            if isinstance(product, dict)
            and product.get("product_name")
            and product.get("nutriments")
        ]
        return self._map_each(products, transform_openfoodfacts_product, query)

    async def _lookup_barcode(self, barcode: str) -> FoodRecord | None:
        payload = await self.client.get_product(barcode)
        if payload.get("status") == 0 or not payload.get("product"):
            return None
        return transform_openfoodfacts_product(payload["product"])


@dataclass
class LocalSource(BaseSource):
    """User-curated custom foods from the persistence layer."""

    name: ClassVar[str] = DataSource.LOCAL.value
    supports_barcode: ClassVar[bool] = True
    recoverable: ClassVar[tuple[type[Exception], ...]] = (
        *RECOVERABLE_ERRORS,
        APIError,
    )

    repository: CustomFoodRepository | None = None
    user_id: UUID | None = None

    @property
    def enabled(self) -> bool:
        return self.repository is not None

    async def _search(self, query: str, limit: int) -> list[FoodRecord]:
        rows = await asyncio.to_thread(
            self.repository.search_foods, query, limit, self.user_id
        )
        return self._map_each(rows, transform_custom_food, query)

    async def _lookup_barcode(self, barcode: str) -> FoodRecord | None:
        row = await asyncio.to_thread(
            self.repository.get_by_barcode, barcode, self.user_id
        )
        if row is None:
            return None
        return transform_custom_food(row)
