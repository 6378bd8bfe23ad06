"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_aggregator.adapters.nutritionix_client import HttpxNutritionixClient
from food_aggregator.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from food_aggregator.adapters.supabase_custom_food_repository import (
    SupabaseCustomFoodRepository,
)
from food_aggregator.adapters.usda_client import HttpxUsdaClient
from food_aggregator.app_logging import configure_logging
from food_aggregator.config import Settings, parse_source_list
from food_aggregator.services.search import FoodSearchService
from food_aggregator.services.sources import (
    BaseSource,
    LocalSource,
    NutritionixSource,
    OpenFoodFactsSource,
    RetryPolicy,
    UsdaSource,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    sources: list[BaseSource]
    search_service: FoodSearchService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Sources whose credentials are missing are built without a client and
    answer every call with an empty result.
    """
    resolved_settings = settings or Settings()
    configure_logging(logging.DEBUG if resolved_settings.debug else logging.INFO)
    timeout = resolved_settings.adapter_timeout_seconds
    retry = RetryPolicy(
        attempts=resolved_settings.adapter_retry_attempts,
        delay_seconds=resolved_settings.adapter_retry_delay_seconds,
    )
    debug = resolved_settings.debug

    usda_client = None
    if resolved_settings.usda_api_key:
        usda_client = HttpxUsdaClient.create(
            api_key=resolved_settings.usda_api_key,
            base_url=resolved_settings.usda_base_url,
            timeout_seconds=timeout,
        )
    nutritionix_client = None
    if resolved_settings.nutritionix_app_id and resolved_settings.nutritionix_api_key:
        nutritionix_client = HttpxNutritionixClient.create(
            app_id=resolved_settings.nutritionix_app_id,
            api_key=resolved_settings.nutritionix_api_key,
            base_url=resolved_settings.nutritionix_base_url,
            timeout_seconds=timeout,
        )
    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        timeout_seconds=timeout,
    )
    custom_food_repository = None
    if resolved_settings.supabase_url and resolved_settings.supabase_service_key:
        custom_food_repository = SupabaseCustomFoodRepository(
            create_client(
                resolved_settings.supabase_url, resolved_settings.supabase_service_key
            ),
            table=resolved_settings.custom_foods_table,
        )

    all_sources: list[BaseSource] = [
        LocalSource(retry=retry, debug=debug, repository=custom_food_repository),
        UsdaSource(
            retry=retry,
            debug=debug,
            client=usda_client,
            data_types=resolved_settings.usda_data_types,
        ),
        NutritionixSource(retry=retry, debug=debug, client=nutritionix_client),
        OpenFoodFactsSource(retry=retry, debug=debug, client=openfoodfacts_client),
    ]
    allowed = parse_source_list(resolved_settings.enabled_sources)
    sources = [
        source
        for source in all_sources
        if source.enabled and (allowed is None or source.name in allowed)
    ]

    search_service = FoodSearchService(
        sources=sources,
        timeout_seconds=timeout,
        deadline_seconds=resolved_settings.search_deadline_seconds,
    )

    async def close_resources() -> None:
        for client in (usda_client, nutritionix_client, openfoodfacts_client):
            if client is not None:
                await client.close()

    return AppContainer(
        settings=resolved_settings,
        sources=sources,
        search_service=search_service,
        close_resources=close_resources,
    )
