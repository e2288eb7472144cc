"""Plan API endpoints with token auth and per-user rate limiting."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from meal_planner.api.models import GeneratePlanRequest
from meal_planner.domain.plans import DailyPlan, PlanGenerationResult, PlanMode
from meal_planner.services.meal_structure import resolve_meal_structure
from meal_planner.services.planner import plan_date_error

if TYPE_CHECKING:
    from meal_planner.containers import AppContainer

router = APIRouter(prefix="/plans", tags=["plans"])

_logger = logging.getLogger(__name__)


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def enforce_rate_limit(container: AppContainer, user_id: UUID) -> None:
    """Reject the request with 429 when the user is over the limit."""
    result = container.rate_limiter.check(str(user_id))
    if result.allowed:
        return
    _logger.info("Rate limit exceeded: user_id=%s", user_id)
    headers = {"X-RateLimit-Remaining": str(result.remaining)}
    if result.retry_after is not None:
        headers["Retry-After"] = str(result.retry_after)
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too many plan requests",
        headers=headers,
    )


@router.post("/generate", dependencies=[Depends(require_api_token)])
async def generate_plan(
    payload: GeneratePlanRequest, request: Request
) -> dict[str, object]:
    """Generate (or return the existing) plan for a user and date."""
    container: AppContainer = request.app.state.container
    enforce_rate_limit(container, payload.user_id)
    date_error = plan_date_error(
        payload.plan_date,
        datetime.now(tz=UTC).date(),
        container.settings.max_plan_days_ahead,
    )
    if date_error:
        raise HTTPException(status_code=422, detail=date_error)
    slots = resolve_meal_structure(payload.meals_per_day, payload.fasting_slots)
    service = container.planning_service
    generate = service.regenerate_plan if payload.regenerate else service.generate_plan
    result = generate(
        payload.user_id,
        payload.plan_date,
        payload.daily_calories,
        slots,
        payload.mode,
    )
    return serialize_result(result)


@router.get("/{user_id}/{plan_date}", dependencies=[Depends(require_api_token)])
async def get_plan(
    user_id: UUID,
    plan_date: date,
    request: Request,
    mode: PlanMode = PlanMode.REGULAR,
) -> dict[str, object]:
    """Return a stored plan."""
    container: AppContainer = request.app.state.container
    enforce_rate_limit(container, user_id)
    plan = container.planning_service.get_plan(user_id, plan_date, mode)
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_plan(plan)


def serialize_plan(plan: DailyPlan) -> dict[str, object]:
    """Return a JSON-ready plan payload."""
    return {
        "user_id": str(plan.user_id),
        "plan_date": plan.plan_date.isoformat(),
        "mode": plan.mode.value,
        "entries": {name: asdict(entry) for name, entry in plan.entries.items()},
        "daily_totals": asdict(plan.daily_totals) if plan.daily_totals else None,
        "is_generated": plan.is_generated,
    }


def serialize_result(result: PlanGenerationResult) -> dict[str, object]:
    """Return a JSON-ready generation result."""
    return {
        "status": result.status.value,
        "plan": serialize_plan(result.plan),
        "warnings": [asdict(warning) for warning in result.warnings],
    }
