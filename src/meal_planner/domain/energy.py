"""Domain models for energy and macro targets."""

from dataclasses import dataclass
from enum import Enum


class Sex(str, Enum):
    """Biological sex used by the Mifflin-St Jeor equation."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    """Self-reported activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class GoalType(str, Enum):
    """Body composition goal."""

    LOSE_WEIGHT = "lose_weight"
    MAINTAIN = "maintain"
    BUILD_MUSCLE = "build_muscle"
    RECOMPOSITION = "recomposition"


class Pace(str, Enum):
    """How fast the goal should be pursued."""

    SLOW = "slow"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


@dataclass(frozen=True)
class MetabolicProfile:
    """Body measurements supplied per calculation."""

    age: int
    sex: Sex
    weight_kg: float
    height_cm: float
    activity_level: ActivityLevel


@dataclass(frozen=True)
class GoalAdjustment:
    """Goal selection; pace is ignored for maintenance."""

    goal_type: GoalType
    pace: Pace = Pace.MODERATE


@dataclass(frozen=True)
class EnergyTargets:
    """Daily energy expenditure and macro targets."""

    bmr: int
    tdee: int
    daily_calories: int
    calorie_adjustment: int
    protein_g: int
    carbs_g: int
    fat_g: int
    activity_multiplier: float
    goal_adjustment_percent: float
    carbs_clamped: bool = False
