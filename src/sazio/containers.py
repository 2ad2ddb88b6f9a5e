"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from sazio.adapters.supabase_food_log_repository import SupabaseFoodLogRepository
from sazio.adapters.supabase_food_repository import SupabaseFoodRepository
from sazio.adapters.supabase_goal_repository import SupabaseGoalRepository
from sazio.adapters.supabase_identity_verifier import (
    IdentityVerifier,
    SupabaseIdentityVerifier,
)
from sazio.config import Settings
from sazio.services.foods import FoodService
from sazio.services.goals import GoalService
from sazio.services.summaries import SummaryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_verifier: IdentityVerifier
    goal_service: GoalService
    summary_service: SummaryService
    food_service: FoodService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    goal_service = GoalService(SupabaseGoalRepository(supabase_client))
    summary_service = SummaryService(
        repository=SupabaseFoodLogRepository(supabase_client),
        goal_service=goal_service,
    )
    food_service = FoodService(SupabaseFoodRepository(supabase_client))
    return AppContainer(
        settings=resolved_settings,
        identity_verifier=SupabaseIdentityVerifier(supabase_client),
        goal_service=goal_service,
        summary_service=summary_service,
        food_service=food_service,
    )
