"""Application configuration."""

import os
import re

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: str = "json"
    storage_path: str = ".meal_budget_data.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    admin_token: str = ""
    timezone: str = "UTC"
    default_calorie_target: int = 2000
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="MEAL_BUDGET_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_month(raw: str) -> tuple[int, int]:
    """Parse a ``YYYY-MM`` month selector into (year, month)."""
    match = _MONTH_PATTERN.match(raw.strip())
    if match is None:
        raise ValueError(f"Invalid month selector: {raw!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:  # noqa: PLR2004
        raise ValueError(f"Invalid month selector: {raw!r}")
    return year, month
