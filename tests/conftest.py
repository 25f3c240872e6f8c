"""Shared test fixtures."""

import copy
from dataclasses import dataclass, field
from datetime import date

import pytest

from meal_budget.adapters.fdc_client import FdcClient
from meal_budget.adapters.kv_household_repository import (
    KeyValueHouseholdRepository,
    KeyValueStore,
)
from meal_budget.config import Settings
from meal_budget.containers import AppContainer, build_container
from meal_budget.domain.catalog import FoodItem
from meal_budget.domain.errors import StorageError
from meal_budget.domain.people import ActivityLevel, Person
from meal_budget.services.errors import LoggingErrorReporter

TODAY = date(2024, 3, 15)


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key-value store that copies values like a real backend."""

    data: dict[str, object] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        return copy.deepcopy(self.data.get(key))

    def set(self, key: str, value: object) -> None:
        self.data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass
class FailingWriteStore(InMemoryKeyValueStore):
    """Store whose writes fail once ``fail_writes`` is set or for ``fail_keys``."""

    fail_writes: bool = False
    fail_keys: set[str] = field(default_factory=set)

    def set(self, key: str, value: object) -> None:
        if self.fail_writes or key in self.fail_keys:
            raise StorageError(f"write refused for {key}")
        super().set(key, value)


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 171077,
            "description": "Chicken, broilers or fryers, breast, cooked",
            "dataType": "SR Legacy",
            "servingSize": 85,
            "servingSizeUnit": "g",
            "foodNutrients": [
                {"nutrient": {"id": 1008}, "amount": 165},
                {"nutrient": {"id": 1003}, "amount": 31},
                {"nutrient": {"id": 1004}, "amount": 3.6},
                {"nutrient": {"id": 1005}, "amount": 0},
                {"nutrientId": 1093, "value": 74},
            ],
        }
    )
    requested: list[int] = field(default_factory=list)

    def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        return {"foods": [self.food_payload]}

    def get_food(self, fdc_id: int) -> dict[str, object]:
        self.requested.append(fdc_id)
        return self.food_payload


def make_food(food_id: str | int, **overrides: object) -> FoodItem:
    values: dict[str, object] = {
        "name": f"Food {food_id}",
        "serving_size": "1 serving",
        "calories": 100.0,
        "protein": 10.0,
        "carbs": 10.0,
        "fat": 2.0,
    }
    values.update(overrides)
    return FoodItem(id=food_id, **values)


def make_person(person_id: str = "p1", **overrides: object) -> Person:
    values: dict[str, object] = {
        "name": "Alex",
        "gender": "male",
        "age": 32,
        "weight": 75.0,
        "height": 180.0,
        "activity_level": ActivityLevel.MODERATE,
    }
    values.update(overrides)
    return Person(id=person_id, **values)


@pytest.fixture
def settings() -> Settings:
    return Settings(admin_token="admin-token", timezone="UTC")


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store: InMemoryKeyValueStore) -> KeyValueHouseholdRepository:
    repo = KeyValueHouseholdRepository(store)
    repo.initialize()
    return repo


@pytest.fixture
def error_reporter() -> LoggingErrorReporter:
    return LoggingErrorReporter()


@pytest.fixture
def container(settings: Settings, store: InMemoryKeyValueStore) -> AppContainer:
    return build_container(settings, store=store, today=lambda: TODAY)
