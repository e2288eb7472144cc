"""Supabase repository for the public recipe corpus."""

from collections.abc import Sequence
from dataclasses import dataclass

from supabase import Client

from meal_planner.domain.recipes import NutrientProfile, RecipeCandidate
from meal_planner.services.planner import RecipeRepository

_RECIPE_COLUMNS = (
    "id, name, description, meal_type, recommendation_group, nutrition_per_serving"
)
_KNOWN_NUTRIENTS = {"calories", "protein_g", "carbs_g", "fat_g", "fiber_g", "sugar_g"}


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed recipe corpus reads."""

    client: Client
    max_rows: int = 500

    def list_candidates(self, query: str | None = None) -> list[RecipeCandidate]:
        """Return public recipes with nutrition in a single read."""
        request = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("is_public", True)
            .not_.is_("nutrition_per_serving", "null")
        )
        term = (query or "").strip()
        if term:
            pattern = f"%{term}%"
            request = request.or_(f"name.ilike.{pattern},description.ilike.{pattern}")
        response = request.order("name").order("id").limit(self.max_rows).execute()
        return [_parse_recipe(row) for row in response.data or []]

    def get_recipes(self, recipe_ids: Sequence[str]) -> list[RecipeCandidate]:
        """Return recipes by id in a single read."""
        if not recipe_ids:
            return []
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .in_("id", list(recipe_ids))
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def get_recipe(self, recipe_id: str) -> RecipeCandidate | None:
        """Return a recipe by id, if present."""
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])


def _parse_recipe(row: dict[str, object]) -> RecipeCandidate:
    return RecipeCandidate(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        description=row.get("description"),
        nutrition=_parse_nutrition(row.get("nutrition_per_serving") or {}),
        eligible_meal_types=frozenset(row.get("meal_type") or []),
        recommendation_tags=frozenset(row.get("recommendation_group") or []),
    )


def _parse_nutrition(payload: dict[str, object]) -> NutrientProfile:
    extras = {
        key: float(value)
        for key, value in payload.items()
        if key not in _KNOWN_NUTRIENTS and _is_number(value)
    }
    return NutrientProfile(
        calories=_to_float(payload.get("calories")),
        protein_g=_to_float(payload.get("protein_g")),
        carbs_g=_to_float(payload.get("carbs_g")),
        fat_g=_to_float(payload.get("fat_g")),
        fiber_g=_optional_float(payload.get("fiber_g")),
        sugar_g=_optional_float(payload.get("sugar_g")),
        extras=extras,
    )


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _to_float(value: object) -> float:
    return float(value) if _is_number(value) else 0.0


def _optional_float(value: object) -> float | None:
    return float(value) if _is_number(value) else None
