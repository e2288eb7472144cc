"""Supabase repository for system settings."""

from dataclasses import dataclass

from supabase import Client

from meal_planner.services.planner import SystemSettingsRepository


@dataclass
class SupabaseSystemSettingsRepository(SystemSettingsRepository):
    """Supabase implementation for system-wide settings."""

    client: Client

    def get_setting(self, key: str) -> object | None:
        """Return the stored value for a setting key."""
        response = (
            self.client.table("system_settings")
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")
