"""Supabase repository for foods, serving units and food logs."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from sazio.adapters.supabase_errors import translate_storage_errors
from sazio.domain.foods import Food, FoodLog, ServingUnit
from sazio.services.foods import FoodRepository


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for the food catalog and logs."""

    client: Client

    def create_food(self, user_id: UUID, payload: dict[str, object]) -> Food:
        """Create a food row owned by the user."""
        with translate_storage_errors(
            "create_food", "A food with this barcode already exists"
        ):
            response = (
                self.client.table("foods")
                .insert({"user_id": str(user_id), **payload})
                .execute()
            )
        if not response.data:
            raise RuntimeError("Failed to create food")
        return _parse_food(response.data[0])

    def get_food(self, food_id: int) -> Food | None:
        """Return a food by id, if present."""
        response = (
            self.client.table("foods")
            .select("*")
            .eq("id", food_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def create_serving_unit(
        self, food_id: int, name: str, grams_equivalent: int
    ) -> ServingUnit:
        """Create a serving unit row."""
        with translate_storage_errors(
            "create_serving_unit", "Serving unit already exists"
        ):
            response = (
                self.client.table("serving_units")
                .insert(
                    {
                        "food_id": food_id,
                        "name": name,
                        "grams_equivalent": grams_equivalent,
                    }
                )
                .execute()
            )
        if not response.data:
            raise RuntimeError("Failed to create serving unit")
        return _parse_serving_unit(response.data[0])

    def get_serving_unit(self, serving_unit_id: int) -> ServingUnit | None:
        """Return a serving unit by id, if present."""
        response = (
            self.client.table("serving_units")
            .select("id, food_id, name, grams_equivalent")
            .eq("id", serving_unit_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_serving_unit(response.data[0])

    def create_food_log(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_id: int,
        serving_unit_id: int | None,
        quantity: float,
        created_at: int,
    ) -> FoodLog:
        """Insert a food log row."""
        with translate_storage_errors("create_food_log", "Food log already exists"):
            response = (
                self.client.table("food_logs")
                .insert(
                    {
                        "user_id": str(user_id),
                        "food_id": food_id,
                        "serving_unit_id": serving_unit_id,
                        "quantity": quantity,
                        "created_at": created_at,
                    }
                )
                .execute()
            )
        if not response.data:
            raise RuntimeError("Failed to create food log")
        row = response.data[0]
        serving_unit_raw = row.get("serving_unit_id")
        return FoodLog(
            id=int(row["id"]),
            user_id=UUID(str(row["user_id"])),
            food_id=int(row["food_id"]),
            serving_unit_id=int(serving_unit_raw)
            if serving_unit_raw is not None
            else None,
            quantity=float(row.get("quantity", 0.0)),
            created_at=int(row["created_at"]),
        )


def _parse_food(row: dict[str, object]) -> Food:
    owner = row.get("user_id")
    return Food(
        id=int(row["id"]),
        user_id=UUID(str(owner)) if owner else None,
        name=str(row.get("name", "")),
        serving_size=int(row.get("serving_size", 0)),
        serving_unit=str(row.get("serving_unit", "g")),
        protein=float(row.get("protein", 0.0)),
        carbs=float(row.get("carbs", 0.0)),
        fat=float(row.get("fat", 0.0)),
        barcode=row.get("barcode"),
    )


def _parse_serving_unit(row: dict[str, object]) -> ServingUnit:
    return ServingUnit(
        id=int(row["id"]),
        food_id=int(row["food_id"]),
        name=str(row.get("name", "")),
        grams_equivalent=int(row.get("grams_equivalent", 0)),
    )
