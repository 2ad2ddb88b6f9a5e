"""Conversion of logged quantities into base-serving multiples."""

from sazio.domain.foods import FoodLogEntry
from sazio.domain.nutrition import Macros


def serving_multiplier(
    quantity: float, serving_size: int, grams_equivalent: int | None
) -> float:
    """Return how many base servings a logged quantity represents.

    Quantities logged in an alternate unit are converted through its gram
    equivalent. A missing or non-positive gram equivalent means the quantity
    is already expressed in base servings.
    """
    if grams_equivalent and grams_equivalent > 0 and serving_size > 0:
        return quantity * grams_equivalent / serving_size
    return quantity


def consumed_macros(entry: FoodLogEntry) -> Macros:
    """Return the macros actually consumed for a log entry."""
    multiplier = serving_multiplier(
        entry.quantity, entry.serving_size, entry.grams_equivalent
    )
    return Macros(
        protein=entry.protein * multiplier,
        carbs=entry.carbs * multiplier,
        fat=entry.fat * multiplier,
    )


def add_macros(left: Macros, right: Macros) -> Macros:
    """Return the element-wise sum of two macro amounts."""
    return Macros(
        protein=left.protein + right.protein,
        carbs=left.carbs + right.carbs,
        fat=left.fat + right.fat,
    )
