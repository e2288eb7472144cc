"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_planner.adapters.supabase_plan_repository import SupabasePlanRepository
from meal_planner.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from meal_planner.adapters.supabase_settings_repository import (
    SupabaseSystemSettingsRepository,
)
from meal_planner.config import Settings
from meal_planner.services.planner import PlanningService
from meal_planner.services.rate_limit import InMemoryRateLimiter, RateLimiter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    planning_service: PlanningService
    rate_limiter: RateLimiter
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    planning_service = PlanningService(
        recipe_repository=SupabaseRecipeRepository(supabase_client),
        plan_repository=SupabasePlanRepository(supabase_client),
        settings_repository=SupabaseSystemSettingsRepository(supabase_client),
        default_limits=resolved_settings.scaling_limits(),
        tie_window=resolved_settings.macro_tie_window,
    )
    rate_limiter = InMemoryRateLimiter(
        max_requests=resolved_settings.plan_rate_limit_requests,
        window_seconds=resolved_settings.plan_rate_limit_window_seconds,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        planning_service=planning_service,
        rate_limiter=rate_limiter,
        close_resources=close_resources,
    )
