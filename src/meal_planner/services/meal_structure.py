"""Table-driven meal structure templates."""

from collections.abc import Iterable

from meal_planner.domain.errors import UnsupportedMealStructureError
from meal_planner.domain.meals import MealSlot, MealSlotTemplate

PRE_IFTAR = "pre-iftar"
IFTAR = "iftar"
FULL_MEAL_TARAWEEH = "full-meal-taraweeh"
SNACK_TARAWEEH = "snack-taraweeh"
SUHOOR = "suhoor"

FULL_DAY_PERCENT = 100

FASTING_SLOT_NAMES: frozenset[str] = frozenset(
    {PRE_IFTAR, IFTAR, FULL_MEAL_TARAWEEH, SNACK_TARAWEEH, SUHOOR}
)

REGULAR_TEMPLATES: dict[int, MealSlotTemplate] = {
    3: (
        MealSlot("breakfast", "Breakfast", 25),
        MealSlot("lunch", "Lunch", 40),
        MealSlot("dinner", "Dinner", 35),
    ),
    4: (
        MealSlot("breakfast", "Breakfast", 25),
        MealSlot("lunch", "Lunch", 30),
        MealSlot("dinner", "Dinner", 30),
        MealSlot("snacks", "Snacks", 15),
    ),
    5: (
        MealSlot("breakfast", "Breakfast", 25),
        MealSlot("mid_morning", "Mid-Morning", 10),
        MealSlot("lunch", "Lunch", 30),
        MealSlot("afternoon", "Afternoon", 10),
        MealSlot("dinner", "Dinner", 25),
    ),
}

# Pre-iftar stays light (<= 10%); iftar and suhoor carry the day.
FASTING_TEMPLATES: dict[int, MealSlotTemplate] = {
    1: (MealSlot(IFTAR, "Iftar", 100),),
    2: (
        MealSlot(IFTAR, "Iftar", 50),
        MealSlot(SUHOOR, "Suhoor", 50),
    ),
    3: (
        MealSlot(PRE_IFTAR, "Pre-Iftar", 10),
        MealSlot(IFTAR, "Iftar", 45),
        MealSlot(SUHOOR, "Suhoor", 45),
    ),
    4: (
        MealSlot(PRE_IFTAR, "Pre-Iftar", 10),
        MealSlot(IFTAR, "Iftar", 40),
        MealSlot(SNACK_TARAWEEH, "Snack (After Taraweeh)", 15),
        MealSlot(SUHOOR, "Suhoor", 35),
    ),
    5: (
        MealSlot(PRE_IFTAR, "Pre-Iftar", 10),
        MealSlot(IFTAR, "Iftar", 30),
        MealSlot(SNACK_TARAWEEH, "Snack (After Taraweeh)", 15),
        MealSlot(FULL_MEAL_TARAWEEH, "Full Meal (After Taraweeh)", 20),
        MealSlot(SUHOOR, "Suhoor", 25),
    ),
}


def resolve_meal_structure(
    meals_per_day: int | None = None,
    fasting_slots: Iterable[str] | None = None,
) -> MealSlotTemplate:
    """Return the slot template for a meal count or a fasting slot selection."""
    if (meals_per_day is None) == (fasting_slots is None):
        raise UnsupportedMealStructureError(
            "Provide either meals_per_day or fasting_slots"
        )
    if fasting_slots is not None:
        return resolve_fasting_selection(fasting_slots)
    template = REGULAR_TEMPLATES.get(meals_per_day)  # type: ignore[arg-type]
    if template is None:
        raise UnsupportedMealStructureError(
            f"No meal template for {meals_per_day} meals per day"
        )
    return template


def resolve_fasting_selection(selected: Iterable[str]) -> MealSlotTemplate:
    """Return the fasting template whose slots match the selection exactly."""
    names = {name.strip().lower() for name in selected}
    unknown = names - FASTING_SLOT_NAMES
    if unknown:
        raise UnsupportedMealStructureError(
            f"Unknown fasting slots: {', '.join(sorted(unknown))}"
        )
    template = FASTING_TEMPLATES.get(len(names))
    if template is None or {slot.name for slot in template} != names:
        raise UnsupportedMealStructureError(
            f"No fasting template for selection: {', '.join(sorted(names)) or '-'}"
        )
    return template


def resolve_fasting_by_count(count: int) -> MealSlotTemplate:
    """Return the predefined fasting template for a meal count."""
    template = FASTING_TEMPLATES.get(count)
    if template is None:
        raise UnsupportedMealStructureError(f"No fasting template for {count} meals")
    return template


def validate_template(template: Iterable[MealSlot], tolerance: float = 1.0) -> bool:
    """Return True when slot percentages sum to 100 within tolerance."""
    slots = list(template)
    if not slots:
        return False
    if any(
        slot.percentage <= 0 or slot.percentage > FULL_DAY_PERCENT for slot in slots
    ):
        return False
    total = sum(slot.percentage for slot in slots)
    return abs(total - FULL_DAY_PERCENT) <= tolerance
