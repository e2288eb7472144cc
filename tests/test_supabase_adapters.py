"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import date
from uuid import uuid4

import pytest

from meal_planner.adapters.supabase_plan_repository import SupabasePlanRepository
from meal_planner.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from meal_planner.adapters.supabase_settings_repository import (
    SupabaseSystemSettingsRepository,
)
from meal_planner.domain.errors import PersistenceError
from meal_planner.domain.plans import DailyPlan, DailyTotals, PlanEntry, PlanMode


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": [], "update": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_on_conflict: str | None = None
    orderings: list[str] = field(default_factory=list)
    executions: int = 0

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def is_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def or_(self, filters: str) -> "FakeTable":
        self.last_filters.append(("or", filters))
        return self

    @property
    def not_(self) -> "FakeTable":
        self.last_filters.append(("not", None))
        return self

    def order(self, column: str) -> "FakeTable":
        self.orderings.append(column)
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        self.executions += 1
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _recipe_row(  # type: ignore[no-untyped-def]
    recipe_id: str, **overrides
) -> dict[str, object]:
    row: dict[str, object] = {
        "id": recipe_id,
        "name": "Chicken Bowl",
        "description": "Rice and chicken",
        "meal_type": ["lunch", "dinner"],
        "recommendation_group": ["ramadan"],
        "nutrition_per_serving": {
            "calories": 600,
            "protein_g": 45,
            "carbs_g": 60.5,
            "fat_g": 20,
            "fiber_g": 6,
            "sodium_mg": 480,
        },
    }
    row.update(overrides)
    return row


def test_recipe_repository_lists_public_recipes() -> None:
    client = FakeSupabaseClient()
    recipes_table = client.table("recipes")
    recipes_table.queue("select", [_recipe_row("r1")])

    repository = SupabaseRecipeRepository(client)
    recipes = repository.list_candidates()

    assert len(recipes) == 1
    recipe = recipes[0]
    assert recipe.id == "r1"
    assert recipe.eligible_meal_types == frozenset({"lunch", "dinner"})
    assert recipe.recommendation_tags == frozenset({"ramadan"})
    assert recipe.nutrition.calories == 600.0
    assert recipe.nutrition.carbs_g == 60.5
    assert recipe.nutrition.fiber_g == 6.0
    assert recipe.nutrition.sugar_g is None
    assert recipe.nutrition.extras == {"sodium_mg": 480.0}
    assert ("is_public", True) in recipes_table.last_filters
    assert ("nutrition_per_serving", "null") in recipes_table.last_filters
    assert recipes_table.orderings == ["name", "id"]
    assert recipes_table.executions == 1


def test_recipe_repository_search_matches_name_or_description() -> None:
    client = FakeSupabaseClient()
    recipes_table = client.table("recipes")

    SupabaseRecipeRepository(client).list_candidates(" soup ")

    assert (
        "or",
        "name.ilike.%soup%,description.ilike.%soup%",
    ) in recipes_table.last_filters


def test_recipe_repository_batches_lookups() -> None:
    client = FakeSupabaseClient()
    recipes_table = client.table("recipes")
    recipes_table.queue("select", [_recipe_row("r1"), _recipe_row("r2")])

    recipes = SupabaseRecipeRepository(client).get_recipes(["r1", "r2"])

    assert [recipe.id for recipe in recipes] == ["r1", "r2"]
    assert ("id", ["r1", "r2"]) in recipes_table.last_filters
    assert recipes_table.executions == 1


def test_recipe_repository_skips_empty_lookup() -> None:
    client = FakeSupabaseClient()

    assert SupabaseRecipeRepository(client).get_recipes([]) == []
    assert "recipes" not in client.tables


def test_recipe_repository_get_recipe_handles_missing_nutrition() -> None:
    client = FakeSupabaseClient()
    recipes_table = client.table("recipes")
    recipes_table.queue(
        "select",
        [_recipe_row("r1", nutrition_per_serving=None, meal_type=None)],
    )

    recipe = SupabaseRecipeRepository(client).get_recipe("r1")
    missing = SupabaseRecipeRepository(client).get_recipe("r2")

    assert recipe is not None
    assert recipe.nutrition.calories == 0.0
    assert recipe.eligible_meal_types == frozenset()
    assert missing is None


def test_plan_repository_roundtrip_regular_plan() -> None:
    client = FakeSupabaseClient()
    plans_table = client.table("daily_plans")
    user_id = uuid4()
    plan = DailyPlan(
        user_id=user_id,
        plan_date=date(2025, 3, 10),
        mode=PlanMode.REGULAR,
        entries={"lunch": PlanEntry("r1", 1.33)},
        daily_totals=DailyTotals(798, 59.9, 80.5, 26.6),
    )
    plans_table.queue("upsert", [{"user_id": str(user_id)}])

    repository = SupabasePlanRepository(client)
    repository.save_plan(plan)

    payload = plans_table.last_payload
    assert isinstance(payload, dict)
    assert payload["plan"] == {"lunch": {"recipe_id": "r1", "servings": 1.33}}
    assert "fasting_plan" not in payload
    assert payload["plan_date"] == "2025-03-10"
    assert payload["daily_totals"] == {
        "calories": 798,
        "protein_g": 59.9,
        "carbs_g": 80.5,
        "fat_g": 26.6,
    }
    assert plans_table.last_on_conflict == "user_id,plan_date"

    plans_table.queue(
        "select",
        [
            {
                "user_id": str(user_id),
                "plan_date": "2025-03-10",
                "plan": payload["plan"],
                "daily_totals": payload["daily_totals"],
                "is_generated": True,
            }
        ],
    )
    fetched = repository.get_plan(user_id, date(2025, 3, 10), PlanMode.REGULAR)

    assert fetched == plan


def test_plan_repository_reads_fasting_column() -> None:
    client = FakeSupabaseClient()
    plans_table = client.table("daily_plans")
    user_id = uuid4()
    plans_table.queue(
        "select",
        [
            {
                "user_id": str(user_id),
                "plan_date": "2025-03-10",
                "fasting_plan": {
                    "iftar": {"recipe_id": "r1", "servings": 1.5},
                    "suhoor": {"recipe_id": None},
                },
                "daily_totals": {},
                "is_generated": False,
            }
        ],
    )

    plan = SupabasePlanRepository(client).get_plan(
        user_id, date(2025, 3, 10), PlanMode.FASTING
    )

    assert plan is not None
    assert plan.mode is PlanMode.FASTING
    assert plan.entries == {"iftar": PlanEntry("r1", 1.5)}
    assert plan.daily_totals is None
    assert plan.is_generated is False


def test_plan_repository_accepts_list_shaped_snacks() -> None:
    client = FakeSupabaseClient()
    plans_table = client.table("daily_plans")
    plans_table.queue(
        "select",
        [{"plan": {"snacks": [{"recipe_id": "r9", "servings": 0.5}]}}],
    )

    plan = SupabasePlanRepository(client).get_plan(
        uuid4(), date(2025, 3, 10), PlanMode.REGULAR
    )

    assert plan is not None
    assert plan.entries == {"snacks": PlanEntry("r9", 0.5)}


def test_plan_repository_missing_row_or_column() -> None:
    client = FakeSupabaseClient()
    plans_table = client.table("daily_plans")
    plans_table.queue("select", [{"plan": {"lunch": {"recipe_id": "r1"}}}])
    repository = SupabasePlanRepository(client)

    assert repository.get_plan(uuid4(), date(2025, 3, 10), PlanMode.FASTING) is None
    assert repository.get_plan(uuid4(), date(2025, 3, 10), PlanMode.REGULAR) is None


def test_plan_repository_raises_on_empty_write() -> None:
    client = FakeSupabaseClient()
    plan = DailyPlan(
        user_id=uuid4(),
        plan_date=date(2025, 3, 10),
        mode=PlanMode.FASTING,
        entries={},
    )

    with pytest.raises(PersistenceError):
        SupabasePlanRepository(client).save_plan(plan)


def test_plan_repository_delete_clears_mode_column() -> None:
    client = FakeSupabaseClient()
    plans_table = client.table("daily_plans")
    user_id = uuid4()

    SupabasePlanRepository(client).delete_plan(
        user_id, date(2025, 3, 10), PlanMode.REGULAR
    )

    assert plans_table.last_payload == {"plan": {}, "daily_totals": {}}
    assert ("user_id", str(user_id)) in plans_table.last_filters
    assert ("plan_date", "2025-03-10") in plans_table.last_filters


def _shared_row() -> dict[str, object]:
    return {
        "plan": {"lunch": {"recipe_id": "r2", "servings": 1.0}},
        "fasting_plan": {"iftar": {"recipe_id": "r1", "servings": 1.5}},
        "daily_totals": {
            "calories": 2000,
            "protein_g": 150.0,
            "carbs_g": 200.0,
            "fat_g": 66.7,
        },
    }


def test_fasting_plan_leaves_regular_totals_alone() -> None:
    client = FakeSupabaseClient()
    plans_table = client.table("daily_plans")
    user_id = uuid4()
    repository = SupabasePlanRepository(client)
    plans_table.queue("upsert", [{"user_id": str(user_id)}])

    repository.save_plan(
        DailyPlan(
            user_id=user_id,
            plan_date=date(2025, 3, 10),
            mode=PlanMode.FASTING,
            entries={"iftar": PlanEntry("r1", 1.5)},
            daily_totals=DailyTotals(900, 67.5, 90.0, 30.0),
        )
    )
    saved = plans_table.last_payload
    repository.delete_plan(user_id, date(2025, 3, 10), PlanMode.FASTING)
    deleted = plans_table.last_payload
    plans_table.queue("select", [_shared_row()])
    plans_table.queue("select", [_shared_row()])
    regular = repository.get_plan(user_id, date(2025, 3, 10), PlanMode.REGULAR)
    fasting = repository.get_plan(user_id, date(2025, 3, 10), PlanMode.FASTING)

    assert isinstance(saved, dict)
    assert "daily_totals" not in saved
    assert deleted == {"fasting_plan": {}}
    assert regular is not None
    assert regular.daily_totals == DailyTotals(2000, 150.0, 200.0, 66.7)
    assert fasting is not None
    assert fasting.daily_totals is None


def test_settings_repository_reads_value() -> None:
    client = FakeSupabaseClient()
    settings_table = client.table("system_settings")
    settings_table.queue(
        "select", [{"value": {"min_scale_factor": 0.6, "max_scale_factor": 1.8}}]
    )
    repository = SupabaseSystemSettingsRepository(client)

    value = repository.get_setting("scaling_limits")
    missing = repository.get_setting("unknown")

    assert value == {"min_scale_factor": 0.6, "max_scale_factor": 1.8}
    assert missing is None
    assert ("key", "scaling_limits") in settings_table.last_filters
