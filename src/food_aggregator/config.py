"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every provider credential is optional; a source without credentials is
    disabled rather than treated as an error.
    """

    usda_api_key: str | None = None
    usda_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    usda_data_types: str = "Foundation,SR Legacy,Survey (FNDDS)"
    nutritionix_app_id: str | None = None
    nutritionix_api_key: str | None = None
    nutritionix_base_url: str = "https://trackapi.nutritionix.com/v2"
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    custom_foods_table: str = "custom_foods"
    enabled_sources: str | None = None
    adapter_timeout_seconds: float = 10.0
    adapter_retry_attempts: int = 1
    adapter_retry_delay_seconds: float = 0.3
    search_deadline_seconds: float | None = None
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_source_list(raw: str | None) -> set[str] | None:
    """Parse the optional comma-separated source allow-list from env."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return None
    names = {chunk.strip() for chunk in cleaned.split(",")}
    names.discard("")
    return names or None
