"""Scale recipes to a calorie target and score their macro balance."""

from collections.abc import Iterable
from dataclasses import dataclass

from meal_planner.domain.plans import ScaledCandidate
from meal_planner.domain.recipes import NutrientProfile, RecipeCandidate
from meal_planner.services.energy import (
    KCAL_PER_G_CARBS,
    KCAL_PER_G_FAT,
    KCAL_PER_G_PROTEIN,
    round_half_up,
)

IDEAL_PROTEIN_PCT = 30
IDEAL_CARBS_PCT = 40
IDEAL_FAT_PCT = 30

PROTEIN_WEIGHT = 0.5
CARBS_WEIGHT = 0.3
FAT_WEIGHT = 0.2

DEVIATION_PENALTY = 1.5
MAX_SCORE = 100


@dataclass(frozen=True)
class ScalingLimits:
    """Bounds on how far a recipe serving may be scaled."""

    min_scale: float = 0.5
    max_scale: float = 2.0

    def allows(self, scale_factor: float) -> bool:
        """Return True when a scale factor is within bounds (inclusive)."""
        return self.min_scale <= scale_factor <= self.max_scale


def macro_percentages(nutrition: NutrientProfile) -> tuple[int, int, int]:
    """Return (protein, carbs, fat) shares of calories, in whole percent."""
    calories = nutrition.calories
    return (
        round_half_up(nutrition.protein_g * KCAL_PER_G_PROTEIN / calories * 100),
        round_half_up(nutrition.carbs_g * KCAL_PER_G_CARBS / calories * 100),
        round_half_up(nutrition.fat_g * KCAL_PER_G_FAT / calories * 100),
    )


def score_macros(nutrition: NutrientProfile) -> int:
    """Score 0-100 for closeness to a 30/40/30 protein/carbs/fat split.

    Uses unscaled per-serving macros; uniform scaling keeps the split.
    """
    if nutrition.calories <= 0:
        return 0
    protein_pct, carbs_pct, fat_pct = macro_percentages(nutrition)
    weighted = (
        _component_score(IDEAL_PROTEIN_PCT, protein_pct) * PROTEIN_WEIGHT
        + _component_score(IDEAL_CARBS_PCT, carbs_pct) * CARBS_WEIGHT
        + _component_score(IDEAL_FAT_PCT, fat_pct) * FAT_WEIGHT
    )
    return min(MAX_SCORE, max(0, round_half_up(weighted)))


def scale_and_score(
    candidates: Iterable[RecipeCandidate],
    target_calories: float,
    limits: ScalingLimits | None = None,
) -> list[ScaledCandidate]:
    """Scale each candidate to the target, dropping those outside the limits."""
    resolved_limits = limits or ScalingLimits()
    scored: list[ScaledCandidate] = []
    for candidate in candidates:
        base_calories = candidate.base_calories_per_serving
        if not base_calories or base_calories <= 0:
            continue
        scale_factor = target_calories / base_calories
        if not resolved_limits.allows(scale_factor):
            continue
        scored.append(
            ScaledCandidate(
                candidate_id=candidate.id,
                scale_factor=scale_factor,
                scaled_calories=base_calories * scale_factor,
                macro_score=score_macros(candidate.nutrition),
            )
        )
    return scored


def _component_score(ideal_pct: int, actual_pct: int) -> float:
    return max(0.0, MAX_SCORE - abs(ideal_pct - actual_pct) * DEVIATION_PENALTY)
