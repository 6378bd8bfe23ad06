"""Nutritionix API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class NutritionixClient(Protocol):
    """Interface for Nutritionix API interactions."""

    async def search_instant(self, query: str) -> dict[str, object]:
        """Search branded and common foods and return raw API data."""

    async def lookup_upc(self, upc: str) -> dict[str, object]:
        """Look up a branded item by UPC and return raw API data."""


@dataclass
class HttpxNutritionixClient(NutritionixClient):
    """Nutritionix client implemented with httpx."""

    app_id: str
    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls, app_id: str, api_key: str, base_url: str, timeout_seconds: float = 10.0
    ) -> "HttpxNutritionixClient":
        """Create a Nutritionix client with a managed httpx session."""
        return cls(
            app_id=app_id,
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    def _headers(self) -> dict[str, str]:
        return {"x-app-id": self.app_id, "x-app-key": self.api_key}

    async def search_instant(self, query: str) -> dict[str, object]:
        """Search foods using the instant endpoint."""
        response = await self.http_client.post(
            f"{self.base_url}/search/instant",
            headers=self._headers(),
            json={"query": query, "branded": True, "common": True},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def lookup_upc(self, upc: str) -> dict[str, object]:
        """Look up an item by UPC."""
        response = await self.http_client.get(
            f"{self.base_url}/search/item",
            headers=self._headers(),
            params={"upc": upc},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
