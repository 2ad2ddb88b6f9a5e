"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from sazio.adapters.supabase_identity_verifier import IdentityVerifier
from sazio.config import Settings
from sazio.containers import AppContainer
from sazio.domain.foods import Food, FoodLog, FoodLogEntry, ServingUnit
from sazio.domain.goals import Goal
from sazio.errors import ConflictError
from sazio.services.calendar import to_epoch_ms
from sazio.services.foods import FoodRepository, FoodService
from sazio.services.goals import GoalRepository, GoalService, goals_overlap
from sazio.services.summaries import FoodLogRepository, SummaryService

TEST_TOKEN = "token-for-tests"


def epoch_ms(*args: int, tz=UTC) -> int:
    """Epoch milliseconds for a wall-clock datetime in ``tz``."""
    return to_epoch_ms(datetime(*args, tzinfo=tz))


@dataclass
class InMemoryGoalRepository(GoalRepository):
    """In-memory goal repository mirroring the storage exclusion constraint."""

    goals: dict[int, Goal] = field(default_factory=dict)
    next_id: int = 1

    def add(self, user_id: UUID, start_at: int, end_at: int | None, **targets) -> Goal:
        goal = Goal(
            id=self.next_id,
            user_id=user_id,
            name=str(targets.pop("name", f"Goal {self.next_id}")),
            start_at=start_at,
            end_at=end_at,
            protein_goal=int(targets.pop("protein_goal", 150)),
            carbs_goal=int(targets.pop("carbs_goal", 200)),
            fat_goal=int(targets.pop("fat_goal", 60)),
        )
        self.goals[goal.id] = goal
        self.next_id += 1
        return goal

    def get_goal(self, user_id: UUID, goal_id: int) -> Goal | None:
        goal = self.goals.get(goal_id)
        if goal is None or goal.user_id != user_id:
            return None
        return goal

    def find_active_goal(self, user_id: UUID, at: int) -> Goal | None:
        matches = [
            goal
            for goal in self._for_user(user_id)
            if goal.start_at <= at and (goal.end_at is None or goal.end_at > at)
        ]
        return matches[0] if matches else None

    def list_goals(self, user_id: UUID, limit: int, offset: int) -> list[Goal]:
        return self._for_user(user_id)[offset : offset + limit]

    def find_overlapping_goals(
        self, user_id: UUID, start_at: int, end_at: int | None
    ) -> list[Goal]:
        return [
            goal
            for goal in self._for_user(user_id)
            if goals_overlap(goal.start_at, goal.end_at, start_at, end_at)
        ]

    def get_open_goal(self, user_id: UUID) -> Goal | None:
        for goal in self._for_user(user_id):
            if goal.end_at is None:
                return goal
        return None

    def create_goal(
        self, user_id: UUID, payload: dict[str, object], close_goal_id: int | None
    ) -> Goal:
        staged = dict(self.goals)
        if close_goal_id is not None:
            previous = staged.get(close_goal_id)
            if previous and previous.user_id == user_id and previous.end_at is None:
                staged[close_goal_id] = replace(previous, end_at=payload["start_at"])
        goal = Goal(
            id=self.next_id,
            user_id=user_id,
            name=str(payload["name"]),
            start_at=int(payload["start_at"]),
            end_at=payload.get("end_at"),
            protein_goal=int(payload["protein_goal"]),
            carbs_goal=int(payload["carbs_goal"]),
            fat_goal=int(payload["fat_goal"]),
        )
        _ensure_no_overlap(staged.values(), goal)
        staged[goal.id] = goal
        self.goals = staged
        self.next_id += 1
        return goal

    def update_goal(
        self, user_id: UUID, goal_id: int, changes: dict[str, object]
    ) -> Goal:
        updated = replace(self.goals[goal_id], **changes)
        _ensure_no_overlap(self.goals.values(), updated)
        self.goals[goal_id] = updated
        return updated

    def delete_goal(self, user_id: UUID, goal_id: int) -> None:
        self.goals.pop(goal_id, None)

    def _for_user(self, user_id: UUID) -> list[Goal]:
        return sorted(
            (goal for goal in self.goals.values() if goal.user_id == user_id),
            key=lambda goal: goal.start_at,
            reverse=True,
        )


def _ensure_no_overlap(goals, candidate: Goal) -> None:
    for goal in goals:
        if goal.id == candidate.id or goal.user_id != candidate.user_id:
            continue
        if goals_overlap(goal.start_at, goal.end_at, candidate.start_at, candidate.end_at):
            raise ConflictError("Goal period overlaps with an existing goal")


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory joined food log entries for tests.

    With a ``catalog``, logs written through it are joined to their food and
    serving unit the way the storage query does.
    """

    entries: dict[UUID, list[FoodLogEntry]] = field(default_factory=dict)
    catalog: "InMemoryFoodRepository | None" = None

    def add(self, user_id: UUID, entry: FoodLogEntry) -> None:
        self.entries.setdefault(user_id, []).append(entry)

    def list_entries(self, user_id: UUID, start: int, end: int) -> list[FoodLogEntry]:
        return [
            entry
            for entry in [*self.entries.get(user_id, []), *self._joined(user_id)]
            if start <= entry.created_at < end
        ]

    def _joined(self, user_id: UUID) -> list[FoodLogEntry]:
        if self.catalog is None:
            return []
        joined = []
        for log in self.catalog.logs:
            if log.user_id != user_id:
                continue
            food = self.catalog.foods[log.food_id]
            unit = self.catalog.units.get(log.serving_unit_id)
            joined.append(
                FoodLogEntry(
                    created_at=log.created_at,
                    quantity=log.quantity,
                    serving_size=food.serving_size,
                    protein=food.protein,
                    carbs=food.carbs,
                    fat=food.fat,
                    grams_equivalent=unit.grams_equivalent if unit else None,
                )
            )
        return joined


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food catalog for tests."""

    foods: dict[int, Food] = field(default_factory=dict)
    units: dict[int, ServingUnit] = field(default_factory=dict)
    logs: list[FoodLog] = field(default_factory=list)
    next_id: int = 1

    def create_food(self, user_id: UUID | None, payload: dict[str, object]) -> Food:
        barcode = payload.get("barcode")
        if barcode and any(food.barcode == barcode for food in self.foods.values()):
            raise ConflictError("A food with this barcode already exists")
        food = Food(id=self._next(), user_id=user_id, **payload)
        self.foods[food.id] = food
        return food

    def get_food(self, food_id: int) -> Food | None:
        return self.foods.get(food_id)

    def create_serving_unit(
        self, food_id: int, name: str, grams_equivalent: int
    ) -> ServingUnit:
        unit = ServingUnit(
            id=self._next(),
            food_id=food_id,
            name=name,
            grams_equivalent=grams_equivalent,
        )
        self.units[unit.id] = unit
        return unit

    def get_serving_unit(self, serving_unit_id: int) -> ServingUnit | None:
        return self.units.get(serving_unit_id)

    def create_food_log(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_id: int,
        serving_unit_id: int | None,
        quantity: float,
        created_at: int,
    ) -> FoodLog:
        log = FoodLog(
            id=self._next(),
            user_id=user_id,
            food_id=food_id,
            serving_unit_id=serving_unit_id,
            quantity=quantity,
            created_at=created_at,
        )
        self.logs.append(log)
        return log

    def _next(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value


@dataclass
class FakeIdentityVerifier(IdentityVerifier):
    """Maps known tokens to user ids."""

    tokens: dict[str, UUID] = field(default_factory=dict)

    def resolve_user_id(self, token: str) -> UUID | None:
        return self.tokens.get(token)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def goal_repository() -> InMemoryGoalRepository:
    return InMemoryGoalRepository()


@pytest.fixture
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture
def food_log_repository(
    food_repository: InMemoryFoodRepository,
) -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository(catalog=food_repository)


@pytest.fixture
def identity_verifier(user_id: UUID) -> FakeIdentityVerifier:
    return FakeIdentityVerifier(tokens={TEST_TOKEN: user_id})


@pytest.fixture
def container(
    settings: Settings,
    goal_repository: InMemoryGoalRepository,
    food_log_repository: InMemoryFoodLogRepository,
    food_repository: InMemoryFoodRepository,
    identity_verifier: FakeIdentityVerifier,
) -> AppContainer:
    goal_service = GoalService(goal_repository)
    return AppContainer(
        settings=settings,
        identity_verifier=identity_verifier,
        goal_service=goal_service,
        summary_service=SummaryService(
            repository=food_log_repository, goal_service=goal_service
        ),
        food_service=FoodService(food_repository),
    )
