"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Macros:
    """Macronutrient amounts in grams."""

    protein: float
    carbs: float
    fat: float


ZERO_MACROS = Macros(protein=0.0, carbs=0.0, fat=0.0)
