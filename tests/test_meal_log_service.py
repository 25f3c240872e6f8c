"""Tests for meal log service."""

from datetime import date
from itertools import count

import pytest

from meal_budget.adapters.kv_household_repository import (
    MEAL_PLANS_KEY,
    MEALS_KEY,
    KeyValueHouseholdRepository,
)
from meal_budget.domain.catalog import MealKind
from meal_budget.domain.errors import ErrorCode, LookupMiss, StorageError
from meal_budget.services.meals import MealLogService
from meal_budget.services.people import PeopleService
from tests.conftest import FailingWriteStore, make_person

DAY = date(2024, 3, 14)


def _service(repository, error_reporter) -> MealLogService:
    ticks = count(1000)
    return MealLogService(
        repository=repository,
        people=PeopleService(repository),
        errors=error_reporter,
        clock_ms=lambda: next(ticks),
    )


@pytest.fixture
def service(repository, error_reporter) -> MealLogService:
    repository.save_people([make_person("p1")])
    return _service(repository, error_reporter)


def test_add_entry_appends_to_slot(service: MealLogService) -> None:
    first = service.add_entry(DAY, "p1", "breakfast", "1", servings=2)
    service.add_entry(DAY, "p1", "breakfast", "3", notes="steamed")

    meals = service.get_meals(DAY, "p1", MealKind.CONSUMED)

    assert [entry.food_id for entry in meals.breakfast] == ["1", "3"]
    assert meals.breakfast[1].notes == "steamed"
    assert first.servings == 2
    assert first.status == MealKind.CONSUMED
    assert first.timestamp == 1000


def test_add_entry_resolves_invalid_servings(service: MealLogService) -> None:
    entry = service.add_entry(DAY, "p1", "lunch", "2", servings=-3)

    assert entry.servings == 1.0


def test_add_entry_rejects_unknown_slot(service: MealLogService) -> None:
    with pytest.raises(ValueError, match="Unknown meal slot"):
        service.add_entry(DAY, "p1", "brunch", "1")


def test_planned_and_consumed_are_separate(service: MealLogService) -> None:
    service.add_entry(DAY, "p1", "dinner", "2", kind=MealKind.PLANNED)

    assert service.get_meals(DAY, "p1", MealKind.CONSUMED).is_empty()
    assert len(service.get_meals(DAY, "p1", MealKind.PLANNED).dinner) == 1


def test_update_entry_keeps_creation_time(service: MealLogService) -> None:
    existing = service.add_entry(DAY, "p1", "snacks", "1")

    updated = service.update_entry(DAY, "p1", "snacks", 0, "3", servings=2)

    assert updated is not None
    assert updated.food_id == "3"
    assert updated.servings == 2
    assert updated.timestamp == existing.timestamp
    assert updated.updated_at is not None
    assert service.update_entry(DAY, "p1", "snacks", 5, "3") is None


def test_delete_entry(service: MealLogService) -> None:
    service.add_entry(DAY, "p1", "lunch", "1")
    service.add_entry(DAY, "p1", "lunch", "2")

    assert service.delete_entry(DAY, "p1", "lunch", 0) is True
    assert service.delete_entry(DAY, "p1", "lunch", 3) is False
    meals = service.get_meals(DAY, "p1", MealKind.CONSUMED)
    assert [entry.food_id for entry in meals.lunch] == ["2"]


def test_consume_planned_moves_entry(service: MealLogService) -> None:
    service.add_entry(DAY, "p1", "dinner", "2", servings=1.5, kind=MealKind.PLANNED)

    consumed = service.consume_planned(DAY, "p1", "dinner", 0)

    assert consumed is not None
    assert consumed.from_plan is True
    assert consumed.consumed_at == consumed.timestamp
    assert consumed.servings == 1.5
    assert service.get_meals(DAY, "p1", MealKind.PLANNED).is_empty()
    assert service.get_meals(DAY, "p1", MealKind.CONSUMED).dinner == (consumed,)
    assert service.consume_planned(DAY, "p1", "dinner", 0) is None


def test_day_summary_uses_person_target(service: MealLogService) -> None:
    service.add_entry(DAY, "p1", "breakfast", "1", servings=2)

    summary = service.day_summary(DAY, "p1")

    assert summary.day == "2024-03-14"
    assert summary.totals.calories == 300.0
    assert summary.calorie_target == 2751
    assert summary.percentages.calories == 11


def test_day_summary_defaults_target_for_unknown_person(
    service: MealLogService,
) -> None:
    summary = service.day_summary(DAY, "nobody")

    assert summary.calorie_target == 2000
    assert summary.totals.calories == 0.0


def test_save_failure_is_reported(error_reporter) -> None:
    store = FailingWriteStore()
    repository = KeyValueHouseholdRepository(store)
    repository.initialize()
    service = _service(repository, error_reporter)
    store.fail_writes = True

    with pytest.raises(StorageError):
        service.add_entry(DAY, "p1", "breakfast", "1")

    assert error_reporter.recent()[0].code == ErrorCode.MEAL_ADD_ERROR


def test_add_and_update_reject_unknown_food(service: MealLogService) -> None:
    service.add_entry(DAY, "p1", "lunch", "1")

    with pytest.raises(LookupMiss, match="Unknown food id: 99"):
        service.add_entry(DAY, "p1", "lunch", "99")
    with pytest.raises(LookupMiss):
        service.update_entry(DAY, "p1", "lunch", 0, "missing")
    lunch = service.get_meals(DAY, "p1", MealKind.CONSUMED).lunch
    assert [entry.food_id for entry in lunch] == ["1"]


@pytest.mark.parametrize("refused_key", [MEAL_PLANS_KEY, MEALS_KEY])
def test_failed_consume_keeps_plan_and_log_unchanged(
    error_reporter, refused_key: str
) -> None:
    store = FailingWriteStore()
    repository = KeyValueHouseholdRepository(store)
    repository.initialize()
    service = _service(repository, error_reporter)
    planned = service.add_entry(DAY, "p1", "dinner", "2", kind=MealKind.PLANNED)
    store.fail_keys.add(refused_key)

    with pytest.raises(StorageError):
        service.consume_planned(DAY, "p1", "dinner", 0)

    assert service.get_meals(DAY, "p1", MealKind.PLANNED).dinner == (planned,)
    assert service.get_meals(DAY, "p1", MealKind.CONSUMED).is_empty()
    assert error_reporter.recent()[0].code == ErrorCode.MEAL_UPDATE_ERROR
