"""Daily and weekly consumption summaries."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from sazio.domain.foods import FoodLogEntry
from sazio.domain.nutrition import ZERO_MACROS, Macros
from sazio.domain.summaries import (
    DailyProgress,
    DailySummary,
    DaySummary,
    NutrientProgress,
)
from sazio.services.calculator import calculate_calories
from sazio.services.calendar import (
    day_window,
    iso_date,
    resolve_zone,
    start_of_day,
)
from sazio.services.goals import GoalService
from sazio.services.servings import add_macros, consumed_macros

DAYS_PER_WEEK = 7


class FoodLogRepository(Protocol):
    """Read interface for food logs joined to foods and serving units."""

    def list_entries(self, user_id: UUID, start: int, end: int) -> list[FoodLogEntry]:
        """Return entries with ``start <= created_at < end``."""


@dataclass
class SummaryService:
    """Aggregates food logs into per-day totals for a timezone."""

    repository: FoodLogRepository
    goal_service: GoalService

    def daily_summary(
        self, user_id: UUID, at: datetime | None = None, timezone: str | None = None
    ) -> DailySummary:
        """Return totals for the calendar day containing ``at``."""
        zone = resolve_zone(timezone)
        start, end = day_window(at or datetime.now(tz=UTC), zone)
        totals = _sum_entries(self.repository.list_entries(user_id, start, end))
        return DailySummary(
            calories=calculate_calories(totals),
            protein=totals.protein,
            carbs=totals.carbs,
            fat=totals.fat,
        )

    def weekly_summary(
        self, user_id: UUID, week_start: datetime, timezone: str | None = None
    ) -> list[DaySummary]:
        """Return seven daily totals starting at the day of ``week_start``."""
        zone = resolve_zone(timezone)
        first_day = start_of_day(week_start, zone)
        buckets: dict[str, Macros] = {
            (first_day + timedelta(days=offset)).date().isoformat(): ZERO_MACROS
            for offset in range(DAYS_PER_WEEK)
        }
        start, end = day_window(week_start, zone, days=DAYS_PER_WEEK)

        for entry in self.repository.list_entries(user_id, start, end):
            key = iso_date(entry.created_at, zone)
            if key in buckets:
                buckets[key] = add_macros(buckets[key], consumed_macros(entry))

        return [
            DaySummary(
                date=day,
                calories=calculate_calories(totals),
                protein=totals.protein,
                carbs=totals.carbs,
                fat=totals.fat,
            )
            for day, totals in buckets.items()
        ]

    def daily_progress(
        self, user_id: UUID, at: datetime | None = None, timezone: str | None = None
    ) -> DailyProgress:
        """Compare the day's totals with the goal active that day."""
        resolved_at = at or datetime.now(tz=UTC)
        zone = resolve_zone(timezone)
        summary = self.daily_summary(user_id, resolved_at, timezone)
        goal = self.goal_service.get_active_goal(user_id, resolved_at, timezone)
        return DailyProgress(
            date=start_of_day(resolved_at, zone).date().isoformat(),
            goal=goal,
            calories=_progress(summary.calories, goal.calorie_goal if goal else None),
            protein=_progress(summary.protein, goal.protein_goal if goal else None),
            carbs=_progress(summary.carbs, goal.carbs_goal if goal else None),
            fat=_progress(summary.fat, goal.fat_goal if goal else None),
        )


def _sum_entries(entries: list[FoodLogEntry]) -> Macros:
    totals = ZERO_MACROS
    for entry in entries:
        totals = add_macros(totals, consumed_macros(entry))
    return totals


def _progress(consumed: float, goal: float | None) -> NutrientProgress:
    if goal is None:
        return NutrientProgress(consumed=consumed, goal=None, remaining=None, progress=0)
    return NutrientProgress(
        consumed=consumed,
        goal=goal,
        remaining=goal - consumed,
        progress=min(consumed / goal, 1) if goal > 0 else 0,
    )
