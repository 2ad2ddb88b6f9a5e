"""Domain models for goal periods."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Goal:
    """A user's daily macro targets over the half-open period [start_at, end_at)."""

    id: int
    user_id: UUID
    name: str
    start_at: int
    end_at: int | None
    protein_goal: int
    carbs_goal: int
    fat_goal: int


@dataclass(frozen=True)
class GoalView:
    """Goal with its derived calorie target."""

    id: int
    name: str
    start_at: int
    end_at: int | None
    protein_goal: int
    carbs_goal: int
    fat_goal: int
    calorie_goal: float
