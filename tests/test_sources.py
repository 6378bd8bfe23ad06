"""Tests for source adapters and their failure recovery."""

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from food_aggregator.adapters.nutritionix_client import HttpxNutritionixClient
from food_aggregator.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from food_aggregator.adapters.usda_client import HttpxUsdaClient
from food_aggregator.services.sources import (
    LocalSource,
    NutritionixSource,
    OpenFoodFactsSource,
    RetryPolicy,
    UsdaSource,
)

_NO_DELAY = RetryPolicy(attempts=1, delay_seconds=0)


def _usda(handler) -> HttpxUsdaClient:  # type: ignore[no-untyped-def]
    return HttpxUsdaClient(
        api_key="key",
        base_url="https://usda.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _nutritionix(handler) -> HttpxNutritionixClient:  # type: ignore[no-untyped-def]
    return HttpxNutritionixClient(
        app_id="app",
        api_key="key",
        base_url="https://nix.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _openfoodfacts(handler) -> HttpxOpenFoodFactsClient:  # type: ignore[no-untyped-def]
    return HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def test_usda_source_maps_and_filters_results() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "foods": [
                    {
                        "fdcId": 1,
                        "description": "Bananas, raw",
                        "foodNutrients": [
                            {"nutrientName": "Energy", "unitName": "KCAL", "value": 89}
                        ],
                    },
                    {"fdcId": 2, "description": "No nutrients"},
                ]
            },
        )

    source = UsdaSource(client=_usda(handler), retry=_NO_DELAY)

    foods = asyncio.run(source.search("banana", 5))

    assert [food.name for food in foods] == ["Bananas, raw"]
    assert foods[0].nutrition.calories_per_serving == 89


def test_source_retries_transient_errors_then_gives_up(caplog) -> None:  # type: ignore[no-untyped-def]
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(503, json={"error": "unavailable"})

    source = UsdaSource(client=_usda(handler), retry=_NO_DELAY)

    with caplog.at_level(logging.WARNING, logger="food_aggregator"):
        foods = asyncio.run(source.search("banana", 5))

    assert foods == []
    assert len(calls) == 2
    assert "status=503" in caplog.text
    assert "banana" in caplog.text


def test_malformed_payload_is_not_retried() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, content=b"<html>oops</html>")

    source = OpenFoodFactsSource(client=_openfoodfacts(handler), retry=_NO_DELAY)

    assert asyncio.run(source.search("bread", 5)) == []
    assert len(calls) == 1


def test_unconfigured_source_is_a_silent_no_op(caplog) -> None:  # type: ignore[no-untyped-def]
    source = UsdaSource(client=None)

    with caplog.at_level(logging.WARNING, logger="food_aggregator"):
        foods = asyncio.run(source.search("banana", 5))

    assert foods == []
    assert not source.enabled
    assert caplog.text == ""


def test_nutritionix_splits_limit_between_branded_and_common() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["x-app-id"] == "app"
        return httpx.Response(
            200,
            json={
                "branded": [
                    {"food_name": f"Bar {index}", "nix_item_id": str(index)}
                    for index in range(5)
                ],
                "common": [{"food_name": f"oats {index}"} for index in range(5)],
            },
        )

    source = NutritionixSource(client=_nutritionix(handler), retry=_NO_DELAY)

    foods = asyncio.run(source.search("oats", 4))

    assert [food.name for food in foods] == ["Bar 0", "Bar 1", "oats 0", "oats 1"]


def test_nutritionix_unknown_upc_returns_none_without_retry() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(404, json={"message": "resource not found"})

    source = NutritionixSource(client=_nutritionix(handler), retry=_NO_DELAY)

    assert asyncio.run(source.lookup_barcode("000")) is None
    assert len(calls) == 1
    assert "upc=000" in calls[0]


def test_openfoodfacts_barcode_lookup() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/737628064502.json"):
            return httpx.Response(
                200,
                json={
                    "status": 1,
                    "product": {
                        "code": "737628064502",
                        "product_name": "Rice Noodles",
                        "serving_quantity": 52,
                        "nutriments": {"energy-kcal_100g": 385},
                    },
                },
            )
        return httpx.Response(200, json={"status": 0})

    source = OpenFoodFactsSource(client=_openfoodfacts(handler), retry=_NO_DELAY)

    found = asyncio.run(source.lookup_barcode("737628064502"))
    missing = asyncio.run(source.lookup_barcode("1"))

    assert found is not None
    assert found.nutrition.calories_per_serving == 200
    assert missing is None


def test_usda_does_not_support_barcodes() -> None:
    source = UsdaSource(client=_usda(lambda request: httpx.Response(500)))

    assert asyncio.run(source.lookup_barcode("123")) is None


@dataclass
class InMemoryCustomFoodRepository:
    rows: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None
    seen_user_ids: list[object] = field(default_factory=list)

    def search_foods(self, query, limit, user_id=None):  # type: ignore[no-untyped-def]
        self.seen_user_ids.append(user_id)
        if self.error is not None:
            raise self.error
        return [row for row in self.rows if query.lower() in row["name"].lower()][
            :limit
        ]

    def get_by_barcode(self, barcode, user_id=None):  # type: ignore[no-untyped-def]
        return next((row for row in self.rows if row.get("barcode") == barcode), None)


def test_local_source_reads_custom_foods() -> None:
    repository = InMemoryCustomFoodRepository(
        rows=[
            {"id": "1", "name": "Protein Pancakes", "calories": 210, "barcode": "77"},
            {"id": "2", "name": "Green Smoothie", "calories": 150},
        ]
    )
    source = LocalSource(repository=repository, user_id="user-1")  # type: ignore[arg-type]

    foods = asyncio.run(source.search("pancake", 5))
    by_code = asyncio.run(source.lookup_barcode("77"))

    assert [food.id for food in foods] == ["local_1"]
    assert repository.seen_user_ids == ["user-1"]
    assert by_code is not None
    assert by_code.name == "Protein Pancakes"


def test_local_source_recovers_from_repository_errors() -> None:
    repository = InMemoryCustomFoodRepository(error=ValueError("bad row"))
    source = LocalSource(repository=repository, retry=_NO_DELAY)

    assert asyncio.run(source.search("pancake", 5)) == []


def test_openfoodfacts_keeps_good_products_next_to_bad_ones(caplog) -> None:  # type: ignore[no-untyped-def]
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            content=(
                b'{"products": ['
                b'{"code": "1", "product_name": "Good",'
                b' "nutriments": {"energy-kcal_100g": 250, "fat_100g": 10}},'
                b'{"code": "2", "product_name": "Bad",'
                b' "nutriments": {"energy-kcal_100g": 120, "fat_100g": NaN}},'
                b'{"code": "3", "product_name": "Broken", "nutriments": ["oops"]}'
                b"]}"
            ),
            headers={"content-type": "application/json"},
        )

    source = OpenFoodFactsSource(client=_openfoodfacts(handler), retry=_NO_DELAY)

    with caplog.at_level(logging.WARNING, logger="food_aggregator"):
        foods = asyncio.run(source.search("spread", 5))

    by_name = {food.name: food for food in foods}
    assert list(by_name) == ["Good", "Bad"]
    assert by_name["Good"].nutrition.fat_grams == 10
    assert by_name["Bad"].nutrition.fat_grams is None
    assert by_name["Bad"].nutrition.calories_per_serving == 120
    assert "skipped a malformed item" in caplog.text


def test_nutritionix_skips_only_the_malformed_item() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "branded": [
                    {"food_name": "Bar", "nix_item_id": "1"},
                    "not a food",
                ],
                "common": [{"food_name": "oats"}],
            },
        )

    source = NutritionixSource(client=_nutritionix(handler), retry=_NO_DELAY)

    foods = asyncio.run(source.search("oats", 4))

    assert [food.name for food in foods] == ["Bar", "oats"]
