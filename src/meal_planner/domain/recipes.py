"""Recipe corpus domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class NutrientProfile:
    """Nutrition per serving.

    Well-known nutrients are typed fields. Anything else the corpus supplies
    (vitamins, minerals) lands in ``extras`` instead of widening the record.
    """

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None
    extras: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class RecipeCandidate:
    """A publicly visible recipe with nutrition data."""

    id: str
    name: str
    nutrition: NutrientProfile
    eligible_meal_types: frozenset[str] = frozenset()
    recommendation_tags: frozenset[str] = frozenset()
    description: str | None = None

    @property
    def base_calories_per_serving(self) -> float:
        """Calories in one unscaled serving."""
        return self.nutrition.calories
