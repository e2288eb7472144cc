"""Daily plan generation service."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from meal_planner.domain.errors import RecipeNotFoundError
from meal_planner.domain.meals import MealSlot
from meal_planner.domain.plans import (
    DailyPlan,
    DailyTotals,
    GenerationStatus,
    PlanEntry,
    PlanGenerationResult,
    PlanMode,
    ScaledCandidate,
)
from meal_planner.domain.recipes import RecipeCandidate
from meal_planner.services.candidates import (
    filter_candidates,
    normalized_meal_types,
)
from meal_planner.services.energy import round_half_up
from meal_planner.services.scoring import ScalingLimits, scale_and_score
from meal_planner.services.selection import DEFAULT_TIE_WINDOW, build_assignment
from meal_planner.services.suggestions import suggest_index

SCALING_LIMITS_SETTING = "scaling_limits"
DEFAULT_ALTERNATIVE_CALORIES = 500
MAX_PLAN_DAYS_AHEAD = 14

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Read access to the public recipe corpus."""

    def list_candidates(self, query: str | None = None) -> list[RecipeCandidate]:
        """Return public recipes with nutrition, optionally text-matched."""

    def get_recipes(self, recipe_ids: Sequence[str]) -> list[RecipeCandidate]:
        """Return the recipes with the given ids in one read."""

    def get_recipe(self, recipe_id: str) -> RecipeCandidate | None:
        """Return a single recipe by id."""


class PlanRepository(Protocol):
    """Persistence interface for daily plans."""

    def get_plan(
        self, user_id: UUID, plan_date: date, mode: PlanMode
    ) -> DailyPlan | None:
        """Return the stored plan for a user, date and mode."""

    def save_plan(self, plan: DailyPlan) -> None:
        """Create or replace a plan."""

    def delete_plan(self, user_id: UUID, plan_date: date, mode: PlanMode) -> None:
        """Delete the plan for a user, date and mode."""


class SystemSettingsRepository(Protocol):
    """Read access to system-wide settings."""

    def get_setting(self, key: str) -> object | None:
        """Return a setting value by key."""


@dataclass
class PlanningService:
    """Generates, reads and previews daily plans."""

    recipe_repository: RecipeRepository
    plan_repository: PlanRepository
    settings_repository: SystemSettingsRepository | None = None
    default_limits: ScalingLimits = field(default_factory=ScalingLimits)
    tie_window: int = DEFAULT_TIE_WINDOW

    def scaling_limits(self) -> ScalingLimits:
        """Return scale bounds, preferring the stored system setting."""
        if self.settings_repository is None:
            return self.default_limits
        value = self.settings_repository.get_setting(SCALING_LIMITS_SETTING)
        return parse_scaling_limits(value, self.default_limits)

    def generate_plan(  # noqa: PLR0913
        self,
        user_id: UUID,
        plan_date: date,
        daily_calories: int,
        slots: Sequence[MealSlot],
        mode: PlanMode = PlanMode.REGULAR,
    ) -> PlanGenerationResult:
        """Generate and store a plan unless one already exists.

        An existing non-empty plan is returned untouched; regeneration goes
        through ``regenerate_plan``.
        """
        existing = self.plan_repository.get_plan(user_id, plan_date, mode)
        if existing is not None and existing.entries:
            _logger.info(
                "Plan exists, skipping generation: user_id=%s date=%s mode=%s",
                user_id,
                plan_date,
                mode.value,
            )
            return PlanGenerationResult(
                status=GenerationStatus.SKIPPED, plan=self._with_totals(existing)
            )

        corpus = self.recipe_repository.list_candidates()
        assignment = build_assignment(
            daily_calories,
            slots,
            corpus,
            limits=self.scaling_limits(),
            tie_window=self.tie_window,
        )
        recipes_by_id = {recipe.id: recipe for recipe in corpus}
        plan = DailyPlan(
            user_id=user_id,
            plan_date=plan_date,
            mode=mode,
            entries=assignment.entries,
            daily_totals=sum_daily_totals(assignment.entries, recipes_by_id),
            is_generated=True,
        )
        self.plan_repository.save_plan(plan)
        _logger.info(
            "Plan generated: user_id=%s date=%s mode=%s assigned=%s unfilled=%s",
            user_id,
            plan_date,
            mode.value,
            len(assignment.entries),
            len(assignment.warnings),
        )
        return PlanGenerationResult(
            status=GenerationStatus.CREATED,
            plan=plan,
            warnings=assignment.warnings,
        )

    def regenerate_plan(  # noqa: PLR0913
        self,
        user_id: UUID,
        plan_date: date,
        daily_calories: int,
        slots: Sequence[MealSlot],
        mode: PlanMode = PlanMode.REGULAR,
    ) -> PlanGenerationResult:
        """Discard any stored plan and generate a fresh one."""
        self.plan_repository.delete_plan(user_id, plan_date, mode)
        return self.generate_plan(user_id, plan_date, daily_calories, slots, mode)

    def get_plan(
        self, user_id: UUID, plan_date: date, mode: PlanMode = PlanMode.REGULAR
    ) -> DailyPlan | None:
        """Return the stored plan, if any, with totals filled in."""
        plan = self.plan_repository.get_plan(user_id, plan_date, mode)
        if plan is None:
            return None
        return self._with_totals(plan)

    def delete_plan(
        self, user_id: UUID, plan_date: date, mode: PlanMode = PlanMode.REGULAR
    ) -> None:
        """Delete the stored plan."""
        self.plan_repository.delete_plan(user_id, plan_date, mode)

    def compute_daily_totals(self, entries: Mapping[str, PlanEntry]) -> DailyTotals:
        """Sum scaled nutrition for plan entries using one batched recipe read."""
        recipe_ids = sorted({entry.recipe_id for entry in entries.values()})
        recipes = self.recipe_repository.get_recipes(recipe_ids) if recipe_ids else []
        return sum_daily_totals(entries, {recipe.id: recipe for recipe in recipes})

    def _with_totals(self, plan: DailyPlan) -> DailyPlan:
        # Fasting plans are stored without totals.
        if plan.daily_totals is not None or not plan.entries:
            return plan
        return replace(plan, daily_totals=self.compute_daily_totals(plan.entries))

    def list_alternatives(
        self,
        recipe_id: str,
        target_calories: float | None = None,
        limit: int = 10,
    ) -> list[ScaledCandidate]:
        """Return recipes sharing a meal type, scaled to the same target."""
        current = self.recipe_repository.get_recipe(recipe_id)
        if current is None:
            raise RecipeNotFoundError(recipe_id)
        meal_types = normalized_meal_types(current)
        if not meal_types:
            return []
        target = (
            target_calories
            or current.base_calories_per_serving
            or DEFAULT_ALTERNATIVE_CALORIES
        )
        alternatives = [
            recipe
            for recipe in self.recipe_repository.list_candidates()
            if recipe.id != recipe_id
            and meal_types & normalized_meal_types(recipe)
        ]
        scored = scale_and_score(alternatives, target, self.scaling_limits())
        scored.sort(key=lambda candidate: abs(candidate.scale_factor - 1))
        return scored[:limit]

    def suggest_for_date(
        self, plan_date: date, slots: Sequence[MealSlot]
    ) -> dict[str, str]:
        """Return a stable recipe suggestion per slot without storing anything."""
        corpus = sorted(
            self.recipe_repository.list_candidates(),
            key=lambda recipe: (recipe.name, recipe.id),
        )
        date_key = plan_date.isoformat()
        suggestions: dict[str, str] = {}
        for slot in slots:
            candidates = filter_candidates(corpus, slot.name)
            if not candidates:
                continue
            index = suggest_index(date_key, slot.name, len(candidates))
            suggestions[slot.name] = candidates[index].id
        return suggestions


def sum_daily_totals(
    entries: Mapping[str, PlanEntry], recipes_by_id: Mapping[str, RecipeCandidate]
) -> DailyTotals:
    """Sum nutrition scaled by servings; calories whole, macros to 0.1 g."""
    calories = protein = carbs = fat = 0.0
    for entry in entries.values():
        recipe = recipes_by_id.get(entry.recipe_id)
        if recipe is None:
            continue
        calories += recipe.nutrition.calories * entry.servings
        protein += recipe.nutrition.protein_g * entry.servings
        carbs += recipe.nutrition.carbs_g * entry.servings
        fat += recipe.nutrition.fat_g * entry.servings
    return DailyTotals(
        calories=round_half_up(calories),
        protein_g=round_half_up(protein * 10) / 10,
        carbs_g=round_half_up(carbs * 10) / 10,
        fat_g=round_half_up(fat * 10) / 10,
    )


def parse_scaling_limits(value: object, default: ScalingLimits) -> ScalingLimits:
    """Read a ``scaling_limits`` setting, falling back per missing bound."""
    if not isinstance(value, Mapping):
        return default
    min_scale = value.get("min_scale_factor")
    max_scale = value.get("max_scale_factor")
    return ScalingLimits(
        min_scale=float(min_scale)
        if isinstance(min_scale, int | float) and min_scale > 0
        else default.min_scale,
        max_scale=float(max_scale)
        if isinstance(max_scale, int | float) and max_scale > 0
        else default.max_scale,
    )


def plan_date_error(
    plan_date: date, today: date, max_days_ahead: int = MAX_PLAN_DAYS_AHEAD
) -> str | None:
    """Return why a date cannot be planned, or None when it can."""
    if plan_date < today:
        return "Cannot plan meals for past dates"
    if plan_date > today + timedelta(days=max_days_ahead):
        return f"Can only plan {max_days_ahead} days ahead"
    return None
