from __future__ import annotations

from typing import List

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Literal


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="FP_", case_sensitive=False)
    """Application runtime configuration."""

    app_name: str = "FieldPlan"
    environment: str = "development"
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"
    cors_origins: str = "http://127.0.0.1:5173,http://localhost:5173"

    locale: str = "de-DE"
    timezone: str = "Europe/Berlin"

    service_hours_s: float = 2
    service_hours_m: float = 4
    service_hours_l: float = 8

    default_start_hour: float = 8
    default_day_start: float = 8
    default_day_end: float = 18

    backlog_window_days: int = 30
    reminder_overdue_days: int = 10
    reminder_ahead_days: int = 30
    capacity_free_hours: float = 4

    enforce_slot_conflicts: bool = False
    technician_delete_policy: Literal["reject", "cascade"] = "reject"

    seed_demo: bool = True

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @computed_field
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
