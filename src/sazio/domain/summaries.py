"""Domain models for consumption summaries."""

from dataclasses import dataclass

from sazio.domain.goals import GoalView


@dataclass(frozen=True)
class DailySummary:
    """Calories and macros consumed over one calendar day."""

    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class DaySummary:
    """Daily totals keyed by ISO date, as used in weekly summaries."""

    date: str
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class NutrientProgress:
    """Consumption of one nutrient against its goal."""

    consumed: float
    goal: float | None
    remaining: float | None
    progress: float


@dataclass(frozen=True)
class DailyProgress:
    """Daily summary compared against the goal active that day."""

    date: str
    goal: GoalView | None
    calories: NutrientProgress
    protein: NutrientProgress
    carbs: NutrientProgress
    fat: NutrientProgress
