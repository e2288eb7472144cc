"""Tests for container wiring."""

import asyncio

from meal_planner.adapters.supabase_plan_repository import SupabasePlanRepository
from meal_planner.containers import build_container
from meal_planner.services.rate_limit import InMemoryRateLimiter
from meal_planner.services.scoring import ScalingLimits


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    service = container.planning_service
    assert isinstance(service.plan_repository, SupabasePlanRepository)
    assert service.settings_repository is not None
    assert service.default_limits == ScalingLimits(0.5, 2.0)
    assert service.tie_window == settings.macro_tie_window
    assert isinstance(container.rate_limiter, InMemoryRateLimiter)
    asyncio.run(container.close_resources())


def test_settings_scaling_limits(settings) -> None:
    tuned = settings.model_copy(
        update={"min_scale_factor": 0.75, "max_scale_factor": 1.5}
    )

    assert tuned.scaling_limits() == ScalingLimits(0.75, 1.5)
