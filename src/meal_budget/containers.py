"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from supabase import create_client

from meal_budget.adapters.fdc_client import HttpxFdcClient
from meal_budget.adapters.json_file_store import JsonFileStore
from meal_budget.adapters.kv_household_repository import (
    KeyValueHouseholdRepository,
    KeyValueStore,
)
from meal_budget.adapters.supabase_kv_store import SupabaseKeyValueStore
from meal_budget.config import Settings
from meal_budget.services.budget import BudgetService
from meal_budget.services.catalog import CatalogService
from meal_budget.services.errors import LoggingErrorReporter
from meal_budget.services.household import HouseholdRepository
from meal_budget.services.meals import MealLogService
from meal_budget.services.people import PeopleService
from meal_budget.services.reports import ReportService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    repository: HouseholdRepository
    error_reporter: LoggingErrorReporter
    catalog_service: CatalogService
    people_service: PeopleService
    meal_log_service: MealLogService
    report_service: ReportService
    budget_service: BudgetService
    today: Callable[[], date]
    close_resources: Callable[[], None]


def local_today(timezone_name: str) -> Callable[[], date]:
    """Return a callable yielding the current date in a timezone."""
    tz = ZoneInfo(timezone_name)

    def today() -> date:
        return datetime.now(tz=tz).date()

    return today


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by the settings.

    Raises:
        ValueError: if the backend is unknown or missing its credentials.
    """
    if settings.storage_backend == "json":
        return JsonFileStore(Path(settings.storage_path))
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires a URL and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_table)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


def build_container(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    today: Callable[[], date] | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    repository = KeyValueHouseholdRepository(store or build_store(resolved_settings))
    repository.initialize()
    error_reporter = LoggingErrorReporter()
    today = today or local_today(resolved_settings.timezone)
    fdc_client = (
        HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
        )
        if resolved_settings.fdc_api_key
        else None
    )
    people_service = PeopleService(
        repository,
        default_calorie_target=resolved_settings.default_calorie_target,
    )
    people_service.ensure_defaults()

    def close_resources() -> None:
        if fdc_client is not None:
            fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        repository=repository,
        error_reporter=error_reporter,
        catalog_service=CatalogService(repository, fdc_client=fdc_client),
        people_service=people_service,
        meal_log_service=MealLogService(
            repository=repository,
            people=people_service,
            errors=error_reporter,
        ),
        report_service=ReportService(repository, error_reporter, today),
        budget_service=BudgetService(repository, error_reporter, today),
        today=today,
        close_resources=close_resources,
    )
