"""Supabase repository for daily plans."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from meal_planner.domain.errors import PersistenceError
from meal_planner.domain.plans import DailyPlan, DailyTotals, PlanEntry, PlanMode
from meal_planner.services.planner import PlanRepository

_PLAN_COLUMNS = {
    PlanMode.REGULAR: "plan",
    PlanMode.FASTING: "fasting_plan",
}


@dataclass
class SupabasePlanRepository(PlanRepository):
    """Supabase implementation for daily plans.

    Regular and fasting plans share one row per (user, date) and live in
    separate JSON columns. The row has a single ``daily_totals`` column, which
    belongs to the regular plan; fasting totals are never stored.
    """

    client: Client

    def get_plan(
        self, user_id: UUID, plan_date: date, mode: PlanMode
    ) -> DailyPlan | None:
        """Return the plan stored for a user, date and mode."""
        column = _PLAN_COLUMNS[mode]
        response = (
            self.client.table("daily_plans")
            .select(f"user_id, plan_date, {column}, daily_totals, is_generated")
            .eq("user_id", str(user_id))
            .eq("plan_date", plan_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        payload = row.get(column)
        if payload is None:
            return None
        return DailyPlan(
            user_id=user_id,
            plan_date=plan_date,
            mode=mode,
            entries=_parse_entries(payload),
            daily_totals=(
                _parse_totals(row.get("daily_totals"))
                if mode is PlanMode.REGULAR
                else None
            ),
            is_generated=bool(row.get("is_generated", True)),
        )

    def save_plan(self, plan: DailyPlan) -> None:
        """Upsert a plan into its mode column."""
        payload: dict[str, object] = {
            "user_id": str(plan.user_id),
            "plan_date": plan.plan_date.isoformat(),
            _PLAN_COLUMNS[plan.mode]: {
                slot_name: {"recipe_id": entry.recipe_id, "servings": entry.servings}
                for slot_name, entry in plan.entries.items()
            },
            "is_generated": plan.is_generated,
        }
        if plan.mode is PlanMode.REGULAR and plan.daily_totals is not None:
            payload["daily_totals"] = {
                "calories": plan.daily_totals.calories,
                "protein_g": plan.daily_totals.protein_g,
                "carbs_g": plan.daily_totals.carbs_g,
                "fat_g": plan.daily_totals.fat_g,
            }
        response = (
            self.client.table("daily_plans")
            .upsert(payload, on_conflict="user_id,plan_date")
            .execute()
        )
        if not response.data:
            raise PersistenceError("Failed to save daily plan")

    def delete_plan(self, user_id: UUID, plan_date: date, mode: PlanMode) -> None:
        """Clear the plan column for a mode."""
        cleared: dict[str, object] = {_PLAN_COLUMNS[mode]: {}}
        if mode is PlanMode.REGULAR:
            cleared["daily_totals"] = {}
        self.client.table("daily_plans").update(cleared).eq(
            "user_id", str(user_id)
        ).eq("plan_date", plan_date.isoformat()).execute()


def _parse_entries(payload: dict[str, object]) -> dict[str, PlanEntry]:
    entries: dict[str, PlanEntry] = {}
    for slot_name, value in payload.items():
        # Snacks written by older clients are stored as a one-item list.
        item = value[0] if isinstance(value, list) and value else value
        if not isinstance(item, dict) or not item.get("recipe_id"):
            continue
        entries[slot_name] = PlanEntry(
            recipe_id=str(item["recipe_id"]),
            servings=float(item.get("servings") or 1),
        )
    return entries


def _parse_totals(payload: object) -> DailyTotals | None:
    if not isinstance(payload, dict) or "calories" not in payload:
        return None
    return DailyTotals(
        calories=int(payload.get("calories") or 0),
        protein_g=float(payload.get("protein_g") or 0.0),
        carbs_g=float(payload.get("carbs_g") or 0.0),
        fat_g=float(payload.get("fat_g") or 0.0),
    )
