"""Authenticated procedure endpoints for goals, summaries and food logs."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, Query, Request

from sazio.api.models import (
    AddServingUnitInput,
    CreateFoodInput,
    CreateGoalInput,
    DeleteGoalInput,
    LogFoodInput,
    UpdateGoalInput,
)
from sazio.errors import UnauthenticatedError
from sazio.services.goals import DEFAULT_HISTORY_LIMIT

if TYPE_CHECKING:
    from sazio.containers import AppContainer
    from sazio.domain.foods import Food, FoodLog, ServingUnit
    from sazio.domain.goals import GoalView
    from sazio.domain.summaries import (
        DailyProgress,
        DailySummary,
        DaySummary,
        NutrientProgress,
    )

router = APIRouter(prefix="/rpc", tags=["rpc"])

_BEARER_PREFIX = "bearer "


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def require_user_id(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Resolve the caller from the bearer token or fail as unauthenticated."""
    token = _bearer_token(authorization)
    if token is None:
        raise UnauthenticatedError("You must be logged in to access this resource")
    user_id = _container(request).identity_verifier.resolve_user_id(token)
    if user_id is None:
        raise UnauthenticatedError("You must be logged in to access this resource")
    return user_id


@router.get("/getCurrentGoal")
def get_current_goal(
    request: Request,
    date: datetime | None = None,
    timezone: str | None = None,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object] | None:
    """Return the goal active on the given day."""
    goal = _container(request).goal_service.get_active_goal(user_id, date, timezone)
    return _serialize_goal(goal) if goal else None


@router.get("/getGoalHistory")
def get_goal_history(
    request: Request,
    limit: int = DEFAULT_HISTORY_LIMIT,
    offset: int = 0,
    user_id: UUID = Depends(require_user_id),
) -> list[dict[str, object]]:
    """Return goals, most recent start first."""
    goals = _container(request).goal_service.list_goal_history(user_id, limit, offset)
    return [_serialize_goal(goal) for goal in goals]


@router.post("/createGoal")
def create_goal(
    body: CreateGoalInput,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Create a goal period."""
    goal = _container(request).goal_service.create_goal(
        user_id,
        body.model_dump(exclude={"close_previous_goal"}),
        close_previous=body.close_previous_goal,
    )
    return _serialize_goal(goal)


@router.post("/updateGoal")
def update_goal(
    body: UpdateGoalInput,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Apply a partial update to a goal."""
    goal = _container(request).goal_service.update_goal(
        user_id, body.id, body.model_dump(exclude_unset=True, exclude={"id"})
    )
    return _serialize_goal(goal)


@router.post("/deleteGoal")
def delete_goal(
    body: DeleteGoalInput,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> None:
    """Delete a goal."""
    _container(request).goal_service.delete_goal(user_id, body.id)


@router.get("/getDailySummary")
def get_daily_summary(
    request: Request,
    date: datetime | None = None,
    timezone: str | None = None,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Return the day's calorie and macro totals."""
    summary = _container(request).summary_service.daily_summary(
        user_id, date, timezone
    )
    return _serialize_daily(summary)


@router.get("/getWeeklySummary")
def get_weekly_summary(
    request: Request,
    week_start_date: datetime = Query(alias="weekStartDate"),
    timezone: str | None = None,
    user_id: UUID = Depends(require_user_id),
) -> list[dict[str, object]]:
    """Return seven daily totals starting at ``weekStartDate``."""
    days = _container(request).summary_service.weekly_summary(
        user_id, week_start_date, timezone
    )
    return [_serialize_day(day) for day in days]


@router.get("/getDailyProgress")
def get_daily_progress(
    request: Request,
    date: datetime | None = None,
    timezone: str | None = None,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Return the day's totals measured against the active goal."""
    progress = _container(request).summary_service.daily_progress(
        user_id, date, timezone
    )
    return _serialize_progress(progress)


@router.post("/createFood")
def create_food(
    body: CreateFoodInput,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Create a food in the caller's catalog."""
    food = _container(request).food_service.create_food(
        user_id, body.model_dump(exclude_none=True)
    )
    return _serialize_food(food)


@router.post("/addServingUnit")
def add_serving_unit(
    body: AddServingUnitInput,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Add an alternate serving unit to a food."""
    unit = _container(request).food_service.add_serving_unit(
        user_id, body.food_id, body.name, body.grams_equivalent
    )
    return _serialize_serving_unit(unit)


@router.post("/logFood")
def log_food(
    body: LogFoodInput,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Record a consumed food."""
    log = _container(request).food_service.log_food(
        user_id, body.food_id, body.quantity, body.serving_unit_id
    )
    return _serialize_food_log(log)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX) :].strip()
    return token or None


def _serialize_goal(goal: GoalView) -> dict[str, object]:
    return {
        "id": goal.id,
        "name": goal.name,
        "startAt": goal.start_at,
        "endAt": goal.end_at,
        "proteinGoal": goal.protein_goal,
        "carbsGoal": goal.carbs_goal,
        "fatGoal": goal.fat_goal,
        "calorieGoal": goal.calorie_goal,
    }


def _serialize_daily(summary: DailySummary) -> dict[str, object]:
    return {
        "calories": summary.calories,
        "protein": summary.protein,
        "carbs": summary.carbs,
        "fat": summary.fat,
    }


def _serialize_day(day: DaySummary) -> dict[str, object]:
    return {
        "date": day.date,
        "calories": day.calories,
        "protein": day.protein,
        "carbs": day.carbs,
        "fat": day.fat,
    }


def _serialize_nutrient(progress: NutrientProgress) -> dict[str, object]:
    return {
        "consumed": progress.consumed,
        "goal": progress.goal,
        "remaining": progress.remaining,
        "progress": progress.progress,
    }


def _serialize_progress(progress: DailyProgress) -> dict[str, object]:
    return {
        "date": progress.date,
        "goal": _serialize_goal(progress.goal) if progress.goal else None,
        "calories": _serialize_nutrient(progress.calories),
        "protein": _serialize_nutrient(progress.protein),
        "carbs": _serialize_nutrient(progress.carbs),
        "fat": _serialize_nutrient(progress.fat),
    }


def _serialize_food(food: Food) -> dict[str, object]:
    return {
        "id": food.id,
        "name": food.name,
        "servingSize": food.serving_size,
        "servingUnit": food.serving_unit,
        "protein": food.protein,
        "carbs": food.carbs,
        "fat": food.fat,
        "barcode": food.barcode,
    }


def _serialize_serving_unit(unit: ServingUnit) -> dict[str, object]:
    return {
        "id": unit.id,
        "foodId": unit.food_id,
        "name": unit.name,
        "gramsEquivalent": unit.grams_equivalent,
    }


def _serialize_food_log(log: FoodLog) -> dict[str, object]:
    return {
        "id": log.id,
        "foodId": log.food_id,
        "servingUnitId": log.serving_unit_id,
        "quantity": log.quantity,
        "createdAt": log.created_at,
    }
