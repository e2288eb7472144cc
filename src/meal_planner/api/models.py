"""Pydantic models for API request payloads."""

from datetime import date
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from meal_planner.domain.plans import PlanMode


class TargetsRequest(BaseModel):
    """Profile and goal fields for a target calculation.

    Fields stay loosely typed so validation errors name the offending field
    through the domain parser.
    """

    profile: dict[str, Any]
    goal: dict[str, Any]


class MealStructureRequest(BaseModel):
    """Meal structure selector with an optional calorie total to split."""

    meals_per_day: int | None = None
    fasting_slots: list[str] | None = None
    daily_calories: int | None = Field(default=None, gt=0)


class GeneratePlanRequest(BaseModel):
    """Plan generation request for one user and date."""

    user_id: UUID
    plan_date: date
    daily_calories: int = Field(gt=0)
    meals_per_day: int | None = None
    fasting_slots: list[str] | None = None
    regenerate: bool = False

    @property
    def mode(self) -> PlanMode:
        """Fasting selections are stored separately from regular plans."""
        return PlanMode.FASTING if self.fasting_slots is not None else PlanMode.REGULAR
