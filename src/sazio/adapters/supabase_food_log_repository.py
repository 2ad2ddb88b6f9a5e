"""Supabase repository for reading food logs with their foods."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from sazio.domain.foods import FoodLogEntry
from sazio.services.summaries import FoodLogRepository

_ENTRY_COLUMNS = (
    "created_at, quantity, "
    "foods!inner(serving_size, protein, carbs, fat), "
    "serving_units(grams_equivalent)"
)


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for summary queries."""

    client: Client

    def list_entries(self, user_id: UUID, start: int, end: int) -> list[FoodLogEntry]:
        """Return food logs in [start, end) joined to food and serving unit."""
        response = (
            self.client.table("food_logs")
            .select(_ENTRY_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("created_at", start)
            .lt("created_at", end)
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> FoodLogEntry:
    food = row.get("foods") or {}
    unit = row.get("serving_units") or {}
    grams_equivalent = unit.get("grams_equivalent")
    return FoodLogEntry(
        created_at=int(row["created_at"]),
        quantity=float(row.get("quantity", 0.0)),
        serving_size=int(food.get("serving_size", 0)),
        protein=float(food.get("protein", 0.0)),
        carbs=float(food.get("carbs", 0.0)),
        fat=float(food.get("fat", 0.0)),
        grams_equivalent=int(grams_equivalent)
        if grams_equivalent is not None
        else None,
    )
