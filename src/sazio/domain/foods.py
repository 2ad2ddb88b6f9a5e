"""Domain models for the food catalog and food logs."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Food:
    """Catalog food with macros per base serving."""

    id: int
    user_id: UUID | None
    name: str
    serving_size: int
    serving_unit: str
    protein: float
    carbs: float
    fat: float
    barcode: str | None = None


@dataclass(frozen=True)
class ServingUnit:
    """Alternate named serving for a food, expressed in grams."""

    id: int
    food_id: int
    name: str
    grams_equivalent: int


@dataclass(frozen=True)
class FoodLog:
    """A single consumption record."""

    id: int
    user_id: UUID
    food_id: int
    serving_unit_id: int | None
    quantity: float
    created_at: int


@dataclass(frozen=True)
class FoodLogEntry:
    """Food log row joined to its food and optional serving unit."""

    created_at: int
    quantity: float
    serving_size: int
    protein: float
    carbs: float
    fat: float
    grams_equivalent: int | None = None
