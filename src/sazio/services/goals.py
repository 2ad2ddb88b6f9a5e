"""Goal period management."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from sazio.domain.goals import Goal, GoalView
from sazio.errors import ConflictError, InvalidInputError, NotFoundError
from sazio.services.calculator import with_calorie_goal
from sazio.services.calendar import resolve_zone, start_of_day, to_epoch_ms

DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 100
MAX_GOAL_NAME_LENGTH = 100

_TARGET_FIELDS = {
    "protein_goal": "proteinGoal",
    "carbs_goal": "carbsGoal",
    "fat_goal": "fatGoal",
}
_GOAL_FIELDS = {"name", "start_at", "end_at", *_TARGET_FIELDS}
_REQUIRED_FIELDS = {"name", "start_at", *_TARGET_FIELDS}

_logger = logging.getLogger(__name__)


class GoalRepository(Protocol):
    """Persistence interface for goal periods."""

    def get_goal(self, user_id: UUID, goal_id: int) -> Goal | None:
        """Return a goal owned by the user, if present."""

    def find_active_goal(self, user_id: UUID, at: int) -> Goal | None:
        """Return the goal whose period contains ``at``, latest start first."""

    def list_goals(self, user_id: UUID, limit: int, offset: int) -> list[Goal]:
        """Return goals ordered by start descending."""

    def find_overlapping_goals(
        self, user_id: UUID, start_at: int, end_at: int | None
    ) -> list[Goal]:
        """Return goals intersecting [start_at, end_at)."""

    def get_open_goal(self, user_id: UUID) -> Goal | None:
        """Return the user's goal without an end, if any."""

    def create_goal(
        self, user_id: UUID, payload: dict[str, object], close_goal_id: int | None
    ) -> Goal:
        """Insert a goal, first closing ``close_goal_id`` at its start, atomically."""

    def update_goal(
        self, user_id: UUID, goal_id: int, changes: dict[str, object]
    ) -> Goal:
        """Apply changes to a goal and return it."""

    def delete_goal(self, user_id: UUID, goal_id: int) -> None:
        """Delete a goal."""


@dataclass
class GoalService:
    """Enforces goal period invariants on top of a repository."""

    repository: GoalRepository

    def get_active_goal(
        self, user_id: UUID, at: datetime | None = None, timezone: str | None = None
    ) -> GoalView | None:
        """Return the goal active at the start of the day containing ``at``."""
        zone = resolve_zone(timezone)
        day_start = start_of_day(at or datetime.now(tz=UTC), zone)
        goal = self.repository.find_active_goal(user_id, to_epoch_ms(day_start))
        if goal is None:
            return None
        return with_calorie_goal(goal)

    def list_goal_history(
        self,
        user_id: UUID,
        limit: int = DEFAULT_HISTORY_LIMIT,
        offset: int = 0,
    ) -> list[GoalView]:
        """Return a page of goals, most recent start first."""
        if not 1 <= limit <= MAX_HISTORY_LIMIT:
            raise InvalidInputError(
                f"limit must be between 1 and {MAX_HISTORY_LIMIT}"
            )
        if offset < 0:
            raise InvalidInputError("offset must be non-negative")
        goals = self.repository.list_goals(user_id, limit, offset)
        return [with_calorie_goal(goal) for goal in goals]

    def create_goal(
        self,
        user_id: UUID,
        payload: dict[str, object],
        close_previous: bool = False,
    ) -> GoalView:
        """Create a goal period, optionally closing the open one."""
        fields = _clean_goal_fields(payload, partial=False)
        start_at = fields["start_at"]
        end_at = fields.get("end_at")
        _check_interval(start_at, end_at)

        closable: Goal | None = None
        if close_previous:
            open_goal = self.repository.get_open_goal(user_id)
            if open_goal is not None and open_goal.start_at < start_at:
                closable = open_goal

        for existing in self.repository.find_overlapping_goals(
            user_id, start_at, end_at
        ):
            existing_end = existing.end_at
            if closable is not None and existing.id == closable.id:
                existing_end = start_at
            if not goals_overlap(existing.start_at, existing_end, start_at, end_at):
                continue
            _logger.info(
                "Goal overlaps existing period: user_id=%s existing_id=%s",
                user_id,
                existing.id,
            )
            raise ConflictError("Goal period overlaps with an existing goal")

        goal = self.repository.create_goal(
            user_id, fields, close_goal_id=closable.id if closable else None
        )
        if closable is not None:
            _logger.info(
                "Closed goal %s at %s for user_id=%s", closable.id, start_at, user_id
            )
        _logger.info("Created goal %s for user_id=%s", goal.id, user_id)
        return with_calorie_goal(goal)

    def update_goal(
        self, user_id: UUID, goal_id: int, changes: dict[str, object]
    ) -> GoalView:
        """Apply a partial update to a goal."""
        existing = self._require_goal(user_id, goal_id)
        fields = _clean_goal_fields(changes, partial=True)
        start_at = fields.get("start_at", existing.start_at)
        end_at = fields["end_at"] if "end_at" in fields else existing.end_at
        _check_interval(start_at, end_at)
        if not fields:
            return with_calorie_goal(existing)
        goal = self.repository.update_goal(user_id, goal_id, fields)
        _logger.info(
            "Updated goal %s for user_id=%s fields=%s",
            goal_id,
            user_id,
            sorted(fields),
        )
        return with_calorie_goal(goal)

    def delete_goal(self, user_id: UUID, goal_id: int) -> None:
        """Delete a goal owned by the user."""
        self._require_goal(user_id, goal_id)
        self.repository.delete_goal(user_id, goal_id)
        _logger.info("Deleted goal %s for user_id=%s", goal_id, user_id)

    def _require_goal(self, user_id: UUID, goal_id: int) -> Goal:
        goal = self.repository.get_goal(user_id, goal_id)
        if goal is None:
            raise NotFoundError("Goal not found")
        return goal


def goals_overlap(
    first_start: int,
    first_end: int | None,
    second_start: int,
    second_end: int | None,
) -> bool:
    """Return True when two half-open periods intersect; None ends are open."""
    return (second_end is None or first_start < second_end) and (
        first_end is None or second_start < first_end
    )


def _check_interval(start_at: int, end_at: int | None) -> None:
    if end_at is not None and start_at >= end_at:
        raise InvalidInputError("startAt must be before endAt")


def _clean_goal_fields(
    payload: dict[str, object], *, partial: bool
) -> dict[str, object]:
    """Validate goal fields and return a normalised copy."""
    unknown = set(payload) - _GOAL_FIELDS
    if unknown:
        raise InvalidInputError(f"Unknown goal fields: {', '.join(sorted(unknown))}")
    if not partial:
        missing = _REQUIRED_FIELDS - set(payload)
        if missing:
            raise InvalidInputError(
                f"Missing goal fields: {', '.join(sorted(missing))}"
            )

    fields: dict[str, object] = {}
    if "name" in payload:
        name = payload["name"]
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError("name must be a non-empty string")
        if len(name.strip()) > MAX_GOAL_NAME_LENGTH:
            raise InvalidInputError(
                f"name must be at most {MAX_GOAL_NAME_LENGTH} characters"
            )
        fields["name"] = name.strip()
    if "start_at" in payload:
        fields["start_at"] = _require_int(payload["start_at"], "startAt")
    if "end_at" in payload:
        end_at = payload["end_at"]
        fields["end_at"] = None if end_at is None else _require_int(end_at, "endAt")
    for key, label in _TARGET_FIELDS.items():
        if key in payload:
            value = _require_int(payload[key], label)
            if value < 0:
                raise InvalidInputError(f"{label} must be non-negative")
            fields[key] = value
    return fields


def _require_int(value: object, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{label} must be an integer")
    return value
