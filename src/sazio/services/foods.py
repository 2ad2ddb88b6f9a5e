"""Food catalog and consumption logging."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from sazio.domain.foods import Food, FoodLog, ServingUnit
from sazio.errors import InvalidInputError, NotFoundError
from sazio.services.calendar import to_epoch_ms

MAX_FOOD_NAME_LENGTH = 50
SERVING_UNITS = {"g", "ml"}

_FOOD_FIELDS = {
    "name",
    "serving_size",
    "serving_unit",
    "protein",
    "carbs",
    "fat",
    "barcode",
}
_MACRO_FIELDS = ("protein", "carbs", "fat")

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Persistence interface for foods, serving units and food logs."""

    def create_food(self, user_id: UUID, payload: dict[str, object]) -> Food:
        """Create a food owned by the user and return it."""

    def get_food(self, food_id: int) -> Food | None:
        """Return a food by id, if present."""

    def create_serving_unit(
        self, food_id: int, name: str, grams_equivalent: int
    ) -> ServingUnit:
        """Create an alternate serving unit for a food."""

    def get_serving_unit(self, serving_unit_id: int) -> ServingUnit | None:
        """Return a serving unit by id, if present."""

    def create_food_log(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_id: int,
        serving_unit_id: int | None,
        quantity: float,
        created_at: int,
    ) -> FoodLog:
        """Append a food log row and return it."""


@dataclass
class FoodService:
    """Validates and records foods and consumption."""

    repository: FoodRepository

    def create_food(self, user_id: UUID, payload: dict[str, object]) -> Food:
        """Create a food in the user's catalog."""
        fields = _clean_food_fields(payload)
        food = self.repository.create_food(user_id, fields)
        _logger.info("Created food %s for user_id=%s", food.id, user_id)
        return food

    def add_serving_unit(
        self, user_id: UUID, food_id: int, name: str, grams_equivalent: int
    ) -> ServingUnit:
        """Add an alternate serving unit to a food the user owns."""
        food = self.repository.get_food(food_id)
        if food is None or food.user_id != user_id:
            raise NotFoundError("Food not found")
        cleaned_name = _clean_name(name, "name")
        if (
            isinstance(grams_equivalent, bool)
            or not isinstance(grams_equivalent, int)
            or grams_equivalent <= 0
        ):
            raise InvalidInputError("gramsEquivalent must be a positive integer")
        return self.repository.create_serving_unit(
            food_id, cleaned_name, grams_equivalent
        )

    def log_food(
        self,
        user_id: UUID,
        food_id: int,
        quantity: float,
        serving_unit_id: int | None = None,
    ) -> FoodLog:
        """Record that the user consumed ``quantity`` of a food."""
        food = self.repository.get_food(food_id)
        if food is None or food.user_id not in {None, user_id}:
            raise NotFoundError("Food not found")
        if _require_number(quantity, "quantity") <= 0:
            raise InvalidInputError("quantity must be positive")
        if serving_unit_id is not None:
            unit = self.repository.get_serving_unit(serving_unit_id)
            if unit is None or unit.food_id != food.id:
                raise InvalidInputError("Serving unit does not belong to this food")
        log = self.repository.create_food_log(
            user_id=user_id,
            food_id=food.id,
            serving_unit_id=serving_unit_id,
            quantity=float(quantity),
            created_at=to_epoch_ms(datetime.now(tz=UTC)),
        )
        _logger.info(
            "Logged food %s x%s for user_id=%s", food.id, log.quantity, user_id
        )
        return log


def _clean_food_fields(payload: dict[str, object]) -> dict[str, object]:
    unknown = set(payload) - _FOOD_FIELDS
    if unknown:
        raise InvalidInputError(f"Unknown food fields: {', '.join(sorted(unknown))}")
    missing = (_FOOD_FIELDS - {"barcode"}) - set(payload)
    if missing:
        raise InvalidInputError(f"Missing food fields: {', '.join(sorted(missing))}")

    serving_size = payload["serving_size"]
    if (
        isinstance(serving_size, bool)
        or not isinstance(serving_size, int)
        or serving_size <= 0
    ):
        raise InvalidInputError("servingSize must be a positive integer")
    if payload["serving_unit"] not in SERVING_UNITS:
        raise InvalidInputError("servingUnit must be one of: g, ml")

    fields: dict[str, object] = {
        "name": _clean_name(payload["name"], "name"),
        "serving_size": serving_size,
        "serving_unit": payload["serving_unit"],
    }
    for key in _MACRO_FIELDS:
        value = _require_number(payload[key], key)
        if value < 0:
            raise InvalidInputError(f"{key} must be non-negative")
        fields[key] = float(value)

    barcode = payload.get("barcode")
    if barcode is not None:
        if not isinstance(barcode, str) or not barcode.strip():
            raise InvalidInputError("barcode must be a non-empty string")
        fields["barcode"] = barcode.strip()
    return fields


def _clean_name(value: object, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{label} must be a non-empty string")
    if len(value.strip()) > MAX_FOOD_NAME_LENGTH:
        raise InvalidInputError(
            f"{label} must be at most {MAX_FOOD_NAME_LENGTH} characters"
        )
    return value.strip()


def _require_number(value: object, label: str) -> float:
    if (
        isinstance(value, bool)
        or not isinstance(value, int | float)
        or not math.isfinite(value)
    ):
        raise InvalidInputError(f"{label} must be a finite number")
    return value
