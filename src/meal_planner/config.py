"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_planner.services.scoring import ScalingLimits

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    min_scale_factor: float = 0.5
    max_scale_factor: float = 2.0
    macro_tie_window: int = 5
    max_plan_days_ahead: int = 14
    plan_rate_limit_requests: int = 10
    plan_rate_limit_window_seconds: float = 60.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def scaling_limits(self) -> ScalingLimits:
        """Return the configured default scale bounds."""
        return ScalingLimits(
            min_scale=self.min_scale_factor, max_scale=self.max_scale_factor
        )
