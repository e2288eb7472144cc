"""Domain models for generated daily plans."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID


class PlanMode(str, Enum):
    """Which plan column a plan lives in."""

    REGULAR = "regular"
    FASTING = "fasting"


class GenerationStatus(str, Enum):
    """Outcome of a plan generation request."""

    CREATED = "created"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ScaledCandidate:
    """A recipe scaled to a slot target and scored for macro balance."""

    candidate_id: str
    scale_factor: float
    scaled_calories: float
    macro_score: int


@dataclass(frozen=True)
class PlanEntry:
    """Recipe assigned to a slot; servings is the scale factor at 2dp."""

    recipe_id: str
    servings: float


@dataclass(frozen=True)
class PartialAssignmentWarning:
    """A slot that could not be filled."""

    slot_name: str
    target_calories: int
    reason: str


@dataclass
class PlanAssignment:
    """Slot assignments for one day, possibly partial."""

    entries: dict[str, PlanEntry] = field(default_factory=dict)
    warnings: list[PartialAssignmentWarning] = field(default_factory=list)


@dataclass(frozen=True)
class DailyTotals:
    """Nutrition totals for a plan."""

    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class DailyPlan:
    """A persisted plan for one user and date."""

    user_id: UUID
    plan_date: date
    mode: PlanMode
    entries: dict[str, PlanEntry]
    daily_totals: DailyTotals | None = None
    is_generated: bool = True


@dataclass(frozen=True)
class PlanGenerationResult:
    """Result of generating (or skipping) a daily plan."""

    status: GenerationStatus
    plan: DailyPlan
    warnings: list[PartialAssignmentWarning] = field(default_factory=list)
