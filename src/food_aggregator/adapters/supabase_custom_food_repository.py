"""Supabase implementation for user-curated custom foods."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from food_aggregator.services.sources import CustomFoodRepository


@dataclass
class SupabaseCustomFoodRepository(CustomFoodRepository):
    """Supabase-backed read access to the custom foods table."""

    client: Client
    table: str = "custom_foods"

    def search_foods(
        self, query: str, limit: int, user_id: UUID | None = None
    ) -> list[dict[str, object]]:
        """Return rows whose name contains the query."""
        request = (
            self.client.table(self.table)
            .select("*")
            .eq("is_deleted", False)
            .ilike("name", f"%{query}%")
        )
        if user_id is not None:
            request = request.eq("user_id", str(user_id))
        response = request.limit(limit).execute()
        return list(response.data or [])

    def get_by_barcode(
        self, barcode: str, user_id: UUID | None = None
    ) -> dict[str, object] | None:
        """Return the row with the given barcode, if present."""
        request = (
            self.client.table(self.table)
            .select("*")
            .eq("is_deleted", False)
            .eq("barcode", barcode)
        )
        if user_id is not None:
            request = request.eq("user_id", str(user_id))
        response = request.limit(1).execute()
        if not response.data:
            return None
        return response.data[0]
