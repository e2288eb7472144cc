"""Domain models for meal structure."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MealSlot:
    """A named meal position with its share of daily calories."""

    name: str
    label: str
    percentage: float


MealSlotTemplate = tuple[MealSlot, ...]


@dataclass(frozen=True)
class SlotBudget:
    """A meal slot with its resolved calorie target."""

    slot: MealSlot
    target_calories: int
