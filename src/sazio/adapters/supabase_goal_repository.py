"""Supabase repository for goal periods."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from sazio.adapters.supabase_errors import translate_storage_errors
from sazio.domain.goals import Goal
from sazio.services.calendar import to_epoch_ms
from sazio.services.goals import GoalRepository

_COLUMNS = "id, user_id, name, start_at, end_at, protein_goal, carbs_goal, fat_goal"
_OVERLAP_MESSAGE = "Goal period overlaps with an existing goal"


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for goal persistence.

    The ``goals`` table carries an exclusion constraint over each user's
    ``int8range(start_at, end_at)``, so overlapping rows are rejected by
    Postgres even when two requests race past the service-level check.
    """

    client: Client

    def get_goal(self, user_id: UUID, goal_id: int) -> Goal | None:
        """Return a goal owned by the user, if present."""
        response = (
            self.client.table("goals")
            .select(_COLUMNS)
            .eq("id", goal_id)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_goal(response.data[0])

    def find_active_goal(self, user_id: UUID, at: int) -> Goal | None:
        """Return the goal whose period contains ``at``."""
        response = (
            self.client.table("goals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .lte("start_at", at)
            .or_(f"end_at.is.null,end_at.gt.{at}")
            .order("start_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_goal(response.data[0])

    def list_goals(self, user_id: UUID, limit: int, offset: int) -> list[Goal]:
        """Return a page of goals ordered by start descending."""
        response = (
            self.client.table("goals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("start_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_goal(row) for row in response.data or []]

    def find_overlapping_goals(
        self, user_id: UUID, start_at: int, end_at: int | None
    ) -> list[Goal]:
        """Return goals intersecting [start_at, end_at)."""
        query = (
            self.client.table("goals").select(_COLUMNS).eq("user_id", str(user_id))
        )
        if end_at is not None:
            query = query.lt("start_at", end_at)
        response = query.or_(f"end_at.is.null,end_at.gt.{start_at}").execute()
        return [_parse_goal(row) for row in response.data or []]

    def get_open_goal(self, user_id: UUID) -> Goal | None:
        """Return the user's ongoing goal, if any."""
        response = (
            self.client.table("goals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .is_("end_at", "null")
            .order("start_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_goal(response.data[0])

    def create_goal(
        self, user_id: UUID, payload: dict[str, object], close_goal_id: int | None
    ) -> Goal:
        """Close the previous goal and insert the new one in one transaction."""
        with translate_storage_errors("create_goal", _OVERLAP_MESSAGE):
            response = self.client.rpc(
                "create_goal",
                {
                    "p_user_id": str(user_id),
                    "p_name": payload["name"],
                    "p_start_at": payload["start_at"],
                    "p_end_at": payload.get("end_at"),
                    "p_protein_goal": payload["protein_goal"],
                    "p_carbs_goal": payload["carbs_goal"],
                    "p_fat_goal": payload["fat_goal"],
                    "p_close_goal_id": close_goal_id,
                },
            ).execute()
        if not response.data:
            raise RuntimeError("Failed to create goal")
        return _parse_goal(response.data[0])

    def update_goal(
        self, user_id: UUID, goal_id: int, changes: dict[str, object]
    ) -> Goal:
        """Apply changes to a goal, stamp ``updated_at`` and return it."""
        row = {**changes, "updated_at": to_epoch_ms(datetime.now(tz=UTC))}
        with translate_storage_errors("update_goal", _OVERLAP_MESSAGE):
            response = (
                self.client.table("goals")
                .update(row)
                .eq("id", goal_id)
                .eq("user_id", str(user_id))
                .execute()
            )
        if not response.data:
            raise RuntimeError("Failed to update goal")
        return _parse_goal(response.data[0])

    def delete_goal(self, user_id: UUID, goal_id: int) -> None:
        """Delete a goal row."""
        self.client.table("goals").delete().eq("id", goal_id).eq(
            "user_id", str(user_id)
        ).execute()


def _parse_goal(row: dict[str, object]) -> Goal:
    end_at = row.get("end_at")
    return Goal(
        id=int(row["id"]),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        start_at=int(row["start_at"]),
        end_at=int(end_at) if end_at is not None else None,
        protein_goal=int(row.get("protein_goal", 0)),
        carbs_goal=int(row.get("carbs_goal", 0)),
        fat_goal=int(row.get("fat_goal", 0)),
    )
