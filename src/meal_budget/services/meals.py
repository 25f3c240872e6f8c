"""Consumed and planned meal logging."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date

from meal_budget.domain.catalog import MEAL_SLOTS, DayMealSet, MealEntry, MealKind
from meal_budget.domain.errors import ErrorCode, TrackerError
from meal_budget.domain.nutrition import DaySummary
from meal_budget.services.catalog import FoodCatalog
from meal_budget.services.errors import ErrorReporter
from meal_budget.services.household import HouseholdRepository
from meal_budget.services.nutrition import (
    aggregate_day,
    percentages_of,
    resolve_servings,
)
from meal_budget.services.people import PeopleService

_logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class MealLogService:
    """Service that edits per-day meal sets and summarises them."""

    repository: HouseholdRepository
    people: PeopleService
    errors: ErrorReporter
    clock_ms: Callable[[], int] = field(default=_now_ms)

    def get_meals(self, day: date, person_id: str, kind: MealKind) -> DayMealSet:
        """Return the stored meal set for a date and person."""
        return self.repository.get_day_meal_set(day.isoformat(), person_id, kind)

    def add_entry(  # noqa: PLR0913
        self,
        day: date,
        person_id: str,
        slot: str,
        food_id: str | int,
        servings: float | None = None,
        notes: str = "",
        kind: MealKind = MealKind.CONSUMED,
    ) -> MealEntry:
        """Append an entry to a meal slot.

        Raises:
            ValueError: if the slot name is unknown.
            LookupMiss: if the food is not in the catalog.
        """
        _require_slot(slot)
        self._catalog().require(food_id)
        entry = MealEntry(
            food_id=food_id,
            servings=resolve_servings(servings),
            notes=notes or "",
            timestamp=self.clock_ms(),
            status=kind,
        )
        meals = self.get_meals(day, person_id, kind)
        updated = _with_slot(meals, slot, [*meals.slot(slot), entry])
        self._save(day, person_id, kind, updated, ErrorCode.MEAL_ADD_ERROR)
        return entry

    def update_entry(  # noqa: PLR0913
        self,
        day: date,
        person_id: str,
        slot: str,
        index: int,
        food_id: str | int,
        servings: float | None = None,
        notes: str = "",
        kind: MealKind = MealKind.CONSUMED,
    ) -> MealEntry | None:
        """Replace an entry, keeping its creation time and status."""
        _require_slot(slot)
        self._catalog().require(food_id)
        meals = self.get_meals(day, person_id, kind)
        entries = list(meals.slot(slot))
        if not 0 <= index < len(entries):
            return None
        existing = entries[index]
        entries[index] = MealEntry(
            food_id=food_id,
            servings=resolve_servings(servings),
            notes=notes or "",
            timestamp=existing.timestamp or self.clock_ms(),
            status=existing.status or kind,
            updated_at=self.clock_ms(),
            from_plan=existing.from_plan,
            consumed_at=existing.consumed_at,
        )
        self._save(
            day,
            person_id,
            kind,
            _with_slot(meals, slot, entries),
            ErrorCode.MEAL_UPDATE_ERROR,
        )
        return entries[index]

    def delete_entry(
        self,
        day: date,
        person_id: str,
        slot: str,
        index: int,
        kind: MealKind = MealKind.CONSUMED,
    ) -> bool:
        """Remove an entry; returns False when it does not exist."""
        _require_slot(slot)
        meals = self.get_meals(day, person_id, kind)
        entries = list(meals.slot(slot))
        if not 0 <= index < len(entries):
            return False
        del entries[index]
        self._save(
            day,
            person_id,
            kind,
            _with_slot(meals, slot, entries),
            ErrorCode.MEAL_DELETE_ERROR,
        )
        return True

    def consume_planned(
        self, day: date, person_id: str, slot: str, index: int
    ) -> MealEntry | None:
        """Move a planned entry into the consumed log.

        The plan is updated first and put back if the consumed log cannot
        be written, so an entry is never stored in both.
        """
        _require_slot(slot)
        planned = self.get_meals(day, person_id, MealKind.PLANNED)
        plan_entries = list(planned.slot(slot))
        if not 0 <= index < len(plan_entries):
            return None
        plan_item = plan_entries.pop(index)
        now = self.clock_ms()
        consumed_entry = MealEntry(
            food_id=plan_item.food_id,
            servings=plan_item.servings,
            notes=plan_item.notes,
            timestamp=now,
            status=MealKind.CONSUMED,
            from_plan=True,
            consumed_at=now,
        )
        self._save(
            day,
            person_id,
            MealKind.PLANNED,
            _with_slot(planned, slot, plan_entries),
            ErrorCode.MEAL_UPDATE_ERROR,
        )
        consumed = self.get_meals(day, person_id, MealKind.CONSUMED)
        try:
            self._save(
                day,
                person_id,
                MealKind.CONSUMED,
                _with_slot(consumed, slot, [*consumed.slot(slot), consumed_entry]),
                ErrorCode.MEAL_UPDATE_ERROR,
            )
        except TrackerError:
            self._restore(day, person_id, MealKind.PLANNED, planned)
            raise
        return consumed_entry

    def day_summary(
        self, day: date, person_id: str, kind: MealKind = MealKind.CONSUMED
    ) -> DaySummary:
        """Return totals for a day and their share of the member's targets."""
        totals = aggregate_day(self.get_meals(day, person_id, kind), self._catalog())
        person = self.people.get_person(person_id)
        target = (
            self.people.calorie_needs(person)
            if person is not None
            else self.people.default_calorie_target
        )
        return DaySummary(
            day=day.isoformat(),
            person_id=person_id,
            kind=str(kind),
            totals=totals,
            percentages=percentages_of(totals, target),
            calorie_target=target,
        )

    def _catalog(self) -> FoodCatalog:
        return FoodCatalog.from_items(self.repository.get_food_catalog())

    def _restore(
        self, day: date, person_id: str, kind: MealKind, meals: DayMealSet
    ) -> None:
        try:
            self.repository.save_day_meal_set(day.isoformat(), person_id, kind, meals)
        except TrackerError as exc:
            _logger.error(
                "Failed to restore %s meals for %s on %s: %s", kind, person_id, day, exc
            )

    def _save(
        self,
        day: date,
        person_id: str,
        kind: MealKind,
        meals: DayMealSet,
        code: ErrorCode,
    ) -> None:
        try:
            self.repository.save_day_meal_set(day.isoformat(), person_id, kind, meals)
        except TrackerError as exc:
            self.errors.report(code, f"Failed to save {kind} meals", str(exc))
            raise
        _logger.debug("Saved %s meals for %s on %s", kind, person_id, day)


def _require_slot(slot: str) -> None:
    if slot not in MEAL_SLOTS:
        raise ValueError(f"Unknown meal slot: {slot}")


def _with_slot(meals: DayMealSet, slot: str, entries: list[MealEntry]) -> DayMealSet:
    return replace(meals, **{slot: tuple(entries)})
