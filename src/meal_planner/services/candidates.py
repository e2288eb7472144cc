"""Narrow a recipe corpus to the candidates eligible for a meal slot."""

from collections.abc import Iterable

from meal_planner.domain.recipes import RecipeCandidate
from meal_planner.services.meal_structure import FASTING_SLOT_NAMES, PRE_IFTAR

RAMADAN_TAG = "ramadan"

_SNACK_TYPES = frozenset({"snack", "snacks & sweetes", "smoothies"})

MEAL_TYPE_MAPPING: dict[str, frozenset[str]] = {
    "breakfast": frozenset({"breakfast", "smoothies"}),
    "lunch": frozenset({"lunch", "one pot", "side dishes"}),
    "dinner": frozenset({"dinner", "one pot", "side dishes"}),
    "snacks": _SNACK_TYPES,
    "mid_morning": _SNACK_TYPES,
    "afternoon": _SNACK_TYPES,
    PRE_IFTAR: frozenset({PRE_IFTAR, "smoothies"}),
    "iftar": frozenset({"lunch"}),
    "full-meal-taraweeh": frozenset({"lunch", "dinner"}),
    "snack-taraweeh": frozenset({"snack"}),
    "suhoor": frozenset({"breakfast", "dinner"}),
}


def accepted_meal_types(slot_name: str) -> frozenset[str]:
    """Return the recipe meal types a slot accepts (empty when unmapped)."""
    return MEAL_TYPE_MAPPING.get(slot_name, frozenset())


def filter_candidates(
    corpus: Iterable[RecipeCandidate],
    slot_name: str,
    query: str = "",
    limit: int | None = None,
) -> list[RecipeCandidate]:
    """Return the candidates eligible for a slot.

    A non-empty ``query`` switches to search mode: recipes are matched on name or
    description and meal-type filtering is skipped, since the user is browsing.
    Without a query, recipes must carry at least one accepted meal type; a slot
    with no mapping keeps the whole corpus.

    Fasting slots then get a stable re-ordering that puts Ramadan recommendations
    first (and, for pre-iftar, recipes explicitly typed as pre-iftar).
    """
    term = query.strip().lower()
    if term:
        filtered = [recipe for recipe in corpus if _matches_text(recipe, term)]
    else:
        accepted = accepted_meal_types(slot_name)
        if accepted:
            filtered = [
                recipe for recipe in corpus if normalized_meal_types(recipe) & accepted
            ]
        else:
            filtered = list(corpus)

    ordered = order_recommendations(filtered, slot_name)
    if limit is not None:
        return ordered[:limit]
    return ordered


def order_recommendations(
    candidates: list[RecipeCandidate], slot_name: str
) -> list[RecipeCandidate]:
    """Move recommended recipes to the front for fasting slots."""
    if slot_name not in FASTING_SLOT_NAMES:
        return list(candidates)

    def sort_key(recipe: RecipeCandidate) -> tuple[int, int]:
        tags = {tag.lower() for tag in recipe.recommendation_tags}
        not_ramadan = 0 if RAMADAN_TAG in tags else 1
        not_pre_iftar = 1
        if slot_name == PRE_IFTAR and PRE_IFTAR in normalized_meal_types(recipe):
            not_pre_iftar = 0
        return not_ramadan, not_pre_iftar

    return sorted(candidates, key=sort_key)


def normalized_meal_types(recipe: RecipeCandidate) -> set[str]:
    """Return a recipe's meal types in lower case."""
    return {meal_type.lower() for meal_type in recipe.eligible_meal_types}


def _matches_text(recipe: RecipeCandidate, term: str) -> bool:
    if term in recipe.name.lower():
        return True
    return bool(recipe.description) and term in str(recipe.description).lower()
