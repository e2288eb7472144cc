"""Energy expenditure and macro target calculation (Mifflin-St Jeor)."""

import logging
import math
from collections.abc import Mapping
from enum import Enum
from typing import TypeVar

from meal_planner.domain.energy import (
    ActivityLevel,
    EnergyTargets,
    GoalAdjustment,
    GoalType,
    MetabolicProfile,
    Pace,
    Sex,
)
from meal_planner.domain.errors import InvalidProfileError
from meal_planner.domain.meals import MealSlot, SlotBudget

_logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=Enum)

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

GOAL_ADJUSTMENTS: dict[GoalType, dict[Pace, float]] = {
    GoalType.LOSE_WEIGHT: {
        Pace.SLOW: -0.10,
        Pace.MODERATE: -0.20,
        Pace.AGGRESSIVE: -0.25,
    },
    GoalType.MAINTAIN: {
        Pace.SLOW: 0.0,
        Pace.MODERATE: 0.0,
        Pace.AGGRESSIVE: 0.0,
    },
    GoalType.BUILD_MUSCLE: {
        Pace.SLOW: 0.10,
        Pace.MODERATE: 0.15,
        Pace.AGGRESSIVE: 0.20,
    },
    GoalType.RECOMPOSITION: {
        Pace.SLOW: -0.05,
        Pace.MODERATE: 0.0,
        Pace.AGGRESSIVE: 0.05,
    },
}

PROTEIN_G_PER_KG = 2
PROTEIN_CALORIE_SHARE = 0.30
FAT_CALORIE_SHARE = 0.25
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def calculate_bmr(weight_kg: float, height_cm: float, age: int, sex: Sex) -> int:
    """Return basal metabolic rate in kcal/day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex == Sex.MALE:
        return round_half_up(base + 5)
    return round_half_up(base - 161)


def calculate_targets(profile: MetabolicProfile, goal: GoalAdjustment) -> EnergyTargets:
    """Compute BMR, TDEE, daily calories and macro grams."""
    _validate_profile(profile)
    _validate_goal(goal)

    bmr = calculate_bmr(profile.weight_kg, profile.height_cm, profile.age, profile.sex)
    activity_multiplier = ACTIVITY_MULTIPLIERS[profile.activity_level]
    tdee = round_half_up(bmr * activity_multiplier)

    goal_percent = GOAL_ADJUSTMENTS[goal.goal_type][goal.pace]
    calorie_adjustment = round_half_up(tdee * goal_percent)
    daily_calories = tdee + calorie_adjustment

    protein_g = max(
        round_half_up(profile.weight_kg * PROTEIN_G_PER_KG),
        round_half_up(daily_calories * PROTEIN_CALORIE_SHARE / KCAL_PER_G_PROTEIN),
    )
    fat_g = round_half_up(daily_calories * FAT_CALORIE_SHARE / KCAL_PER_G_FAT)
    carb_calories = (
        daily_calories - protein_g * KCAL_PER_G_PROTEIN - fat_g * KCAL_PER_G_FAT
    )
    carbs_g = round_half_up(carb_calories / KCAL_PER_G_CARBS)
    carbs_clamped = carbs_g < 0
    if carbs_clamped:
        _logger.warning(
            "Carbs clamped to 0: daily_calories=%s protein_g=%s fat_g=%s "
            "raw_carbs_g=%s",
            daily_calories,
            protein_g,
            fat_g,
            carbs_g,
        )
        carbs_g = 0

    return EnergyTargets(
        bmr=bmr,
        tdee=tdee,
        daily_calories=daily_calories,
        calorie_adjustment=calorie_adjustment,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        activity_multiplier=activity_multiplier,
        goal_adjustment_percent=goal_percent,
        carbs_clamped=carbs_clamped,
    )


def calculate_meal_budgets(
    daily_calories: int, slots: tuple[MealSlot, ...] | list[MealSlot]
) -> list[SlotBudget]:
    """Split daily calories across slots by percentage."""
    return [
        SlotBudget(
            slot=slot,
            target_calories=round_half_up(daily_calories * slot.percentage / 100),
        )
        for slot in slots
    ]


def calorie_range(
    target_calories: float, deviation_tolerance: float = 0.25
) -> tuple[int, int]:
    """Return the (min, max) calories accepted around a target."""
    return (
        round_half_up(target_calories * (1 - deviation_tolerance)),
        round_half_up(target_calories * (1 + deviation_tolerance)),
    )


def parse_profile(raw: Mapping[str, object]) -> MetabolicProfile:
    """Build a profile from loosely typed input, naming the first bad field."""
    age = _positive_number(raw.get("age"), "age")
    if age != int(age):
        raise InvalidProfileError("age", "must be a whole number")
    return MetabolicProfile(
        age=int(age),
        sex=_enum_value(Sex, raw.get("sex"), "sex"),
        weight_kg=_positive_number(raw.get("weight_kg"), "weight_kg"),
        height_cm=_positive_number(raw.get("height_cm"), "height_cm"),
        activity_level=_enum_value(
            ActivityLevel, raw.get("activity_level"), "activity_level"
        ),
    )


def parse_goal(raw: Mapping[str, object]) -> GoalAdjustment:
    """Build a goal selection from loosely typed input."""
    pace = raw.get("pace")
    return GoalAdjustment(
        goal_type=_enum_value(GoalType, raw.get("goal_type"), "goal_type"),
        pace=Pace.MODERATE if pace is None else _enum_value(Pace, pace, "pace"),
    )


def _validate_profile(profile: MetabolicProfile) -> None:
    _positive_number(profile.age, "age")
    _positive_number(profile.weight_kg, "weight_kg")
    _positive_number(profile.height_cm, "height_cm")
    _enum_value(Sex, profile.sex, "sex")
    _enum_value(ActivityLevel, profile.activity_level, "activity_level")


def _validate_goal(goal: GoalAdjustment) -> None:
    _enum_value(GoalType, goal.goal_type, "goal_type")
    _enum_value(Pace, goal.pace, "pace")


def _positive_number(value: object, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidProfileError(field, "must be a number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidProfileError(field, "must be greater than zero")
    return float(value)


def _enum_value(enum_cls: type[_E], value: object, field: str) -> _E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidProfileError(field, f"must be one of: {allowed}") from None
