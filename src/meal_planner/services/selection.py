"""Pick the best scaled candidate for each slot and build assignments."""

import logging
from collections.abc import Sequence
from functools import cmp_to_key

from meal_planner.domain.meals import MealSlot
from meal_planner.domain.plans import (
    PartialAssignmentWarning,
    PlanAssignment,
    PlanEntry,
    ScaledCandidate,
)
from meal_planner.domain.recipes import RecipeCandidate
from meal_planner.services.candidates import filter_candidates
from meal_planner.services.energy import calculate_meal_budgets, round_half_up
from meal_planner.services.scoring import ScalingLimits, scale_and_score

DEFAULT_TIE_WINDOW = 5

NO_FEASIBLE_CANDIDATE = "no_feasible_candidate"
EMPTY_CORPUS = "empty_corpus"

_logger = logging.getLogger(__name__)


def rank_candidates(
    scored: Sequence[ScaledCandidate], tie_window: int = DEFAULT_TIE_WINDOW
) -> list[ScaledCandidate]:
    """Order by macro score, using scale proximity to 1.0 for near-ties.

    The near-tie rule is not transitive (80@1.0, 84@1.1 and 88@1.2 form a
    cycle), so input is put in id order first and exact ties fall back to the
    id. The ranking then depends only on the set of candidates.
    """

    def compare(a: ScaledCandidate, b: ScaledCandidate) -> float:
        score_diff = b.macro_score - a.macro_score
        if abs(score_diff) > tie_window:
            return score_diff
        scale_diff = abs(a.scale_factor - 1) - abs(b.scale_factor - 1)
        if scale_diff:
            return scale_diff
        return (a.candidate_id > b.candidate_id) - (a.candidate_id < b.candidate_id)

    by_id = sorted(scored, key=lambda candidate: candidate.candidate_id)
    return sorted(by_id, key=cmp_to_key(compare))


def select_best(
    scored: Sequence[ScaledCandidate], tie_window: int = DEFAULT_TIE_WINDOW
) -> PlanEntry | None:
    """Return the top-ranked candidate as a plan entry, or None."""
    if not scored:
        return None
    best = rank_candidates(scored, tie_window)[0]
    return PlanEntry(
        recipe_id=best.candidate_id, servings=round_servings(best.scale_factor)
    )


def round_servings(scale_factor: float) -> float:
    """Round a scale factor to 2 decimals for storage as servings."""
    return round_half_up(scale_factor * 100) / 100


def build_assignment(
    daily_calories: int,
    slots: Sequence[MealSlot],
    corpus: Sequence[RecipeCandidate],
    limits: ScalingLimits | None = None,
    tie_window: int = DEFAULT_TIE_WINDOW,
) -> PlanAssignment:
    """Assign the best-fitting recipe to every slot that has one.

    Unfillable slots are left out and reported as warnings.
    """
    assignment = PlanAssignment()
    for budget in calculate_meal_budgets(daily_calories, slots):
        slot_name = budget.slot.name
        if not corpus:
            assignment.warnings.append(
                PartialAssignmentWarning(
                    slot_name, budget.target_calories, EMPTY_CORPUS
                )
            )
            continue
        candidates = filter_candidates(corpus, slot_name)
        scored = scale_and_score(candidates, budget.target_calories, limits)
        entry = select_best(scored, tie_window)
        if entry is None:
            _logger.warning(
                "No suitable recipes for slot=%s target_calories=%s candidates=%s",
                slot_name,
                budget.target_calories,
                len(candidates),
            )
            assignment.warnings.append(
                PartialAssignmentWarning(
                    slot_name, budget.target_calories, NO_FEASIBLE_CANDIDATE
                )
            )
            continue
        assignment.entries[slot_name] = entry
    if not corpus:
        _logger.warning("Recipe corpus is empty; no slots assigned")
    return assignment
