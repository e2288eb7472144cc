"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from meal_planner.api.models import MealStructureRequest, TargetsRequest
from meal_planner.api.plans import router as plans_router
from meal_planner.app_logging import configure_logging
from meal_planner.containers import AppContainer
from meal_planner.domain.errors import (
    InvalidProfileError,
    RecipeNotFoundError,
    UnsupportedMealStructureError,
)
from meal_planner.services.energy import (
    calculate_meal_budgets,
    calculate_targets,
    calorie_range,
    parse_goal,
    parse_profile,
)
from meal_planner.services.meal_structure import resolve_meal_structure


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(plans_router)

    @app.exception_handler(InvalidProfileError)
    async def invalid_profile(
        request: Request, exc: InvalidProfileError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(UnsupportedMealStructureError)
    async def unsupported_structure(
        request: Request, exc: UnsupportedMealStructureError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "field": "meal_structure"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/targets")
    async def targets(payload: TargetsRequest) -> dict[str, object]:
        """Calculate daily energy and macro targets."""
        result = calculate_targets(
            parse_profile(payload.profile), parse_goal(payload.goal)
        )
        return asdict(result)

    @app.post("/meal-structure")
    async def meal_structure(payload: MealStructureRequest) -> dict[str, object]:
        """Resolve meal slots and, given a calorie total, their budgets."""
        slots = resolve_meal_structure(payload.meals_per_day, payload.fasting_slots)
        response: dict[str, object] = {"slots": [asdict(slot) for slot in slots]}
        if payload.daily_calories is not None:
            budgets = calculate_meal_budgets(payload.daily_calories, slots)
            response["budgets"] = [
                {
                    "slot": budget.slot.name,
                    "target_calories": budget.target_calories,
                    "calorie_range": list(calorie_range(budget.target_calories)),
                }
                for budget in budgets
            ]
        return response

    @app.get("/suggestions")
    async def suggestions(
        request: Request,
        plan_date: date,
        meals_per_day: int | None = None,
        fasting_slots: list[str] | None = Query(default=None),
    ) -> dict[str, object]:
        """Preview stable recipe suggestions for a day without a plan."""
        state_container: AppContainer = request.app.state.container
        slots = resolve_meal_structure(meals_per_day, fasting_slots)
        return {
            "plan_date": plan_date.isoformat(),
            "suggestions": state_container.planning_service.suggest_for_date(
                plan_date, slots
            ),
        }

    @app.get("/recipes/{recipe_id}/alternatives")
    async def alternatives(
        recipe_id: str,
        request: Request,
        target_calories: float | None = Query(default=None, gt=0),
        limit: int = Query(default=10, gt=0, le=50),
    ) -> dict[str, object]:
        """Return recipes that can replace a planned recipe."""
        state_container: AppContainer = request.app.state.container
        try:
            scored = state_container.planning_service.list_alternatives(
                recipe_id, target_calories, limit
            )
        except RecipeNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from None
        return {"alternatives": [asdict(candidate) for candidate in scored]}

    return app
