"""Exceptions raised by the meal planner."""


class MealPlannerError(Exception):
    """Base error for the meal planner."""


class InvalidProfileError(MealPlannerError, ValueError):
    """Raised when a profile or goal field is missing or out of range."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class UnsupportedMealStructureError(MealPlannerError, ValueError):
    """Raised when no slot template matches the requested meal structure."""


class PersistenceError(MealPlannerError, RuntimeError):
    """Raised when the storage backend rejects or drops a write."""


class RecipeNotFoundError(MealPlannerError, LookupError):
    """Raised when a referenced recipe does not exist in the corpus."""
