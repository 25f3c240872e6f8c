"""Household repository over a JSON key-value store."""

import logging
from dataclasses import dataclass
from typing import Protocol

from meal_budget.domain.budget import Budget, Expense
from meal_budget.domain.catalog import (
    MEAL_SLOTS,
    DayMealSet,
    FoodItem,
    MealEntry,
    MealKind,
    StoredDayMealSet,
)
from meal_budget.domain.errors import StorageError
from meal_budget.domain.people import Person
from meal_budget.numbers import non_negative, to_float
from meal_budget.services.household import HouseholdRepository

MEALS_KEY = "family-meal-tracker-meals"
MEAL_PLANS_KEY = "family-meal-tracker-meal-plans"
PEOPLE_KEY = "family-meal-tracker-members"
BUDGET_KEY = "family-meal-tracker-budget"
EXPENSES_KEY = "family-meal-tracker-expenses"
FOOD_DATABASE_KEY = "family-meal-tracker-food-db"

ALL_KEYS = (
    MEALS_KEY,
    MEAL_PLANS_KEY,
    PEOPLE_KEY,
    BUDGET_KEY,
    EXPENSES_KEY,
    FOOD_DATABASE_KEY,
)

SAMPLE_FOODS: tuple[dict[str, object], ...] = (
    {
        "id": 1,
        "name": "Oatmeal",
        "servingSize": "1 cup cooked",
        "calories": 150,
        "protein": 5,
        "carbs": 27,
        "fat": 3,
        "costPerServing": 0.35,
        "category": "breakfast",
    },
    {
        "id": 2,
        "name": "Chicken Breast",
        "servingSize": "3 oz cooked",
        "calories": 165,
        "protein": 31,
        "carbs": 0,
        "fat": 3.5,
        "costPerServing": 1.20,
        "category": "protein",
    },
    {
        "id": 3,
        "name": "Broccoli",
        "servingSize": "1 cup",
        "calories": 55,
        "protein": 3.7,
        "carbs": 11,
        "fat": 0.6,
        "costPerServing": 0.60,
        "category": "vegetable",
    },
)

# Stored record keys for FoodItem fields that differ from the attribute name.
_FOOD_RECORD_KEYS = {
    "serving_size": "servingSize",
    "vitamin_a": "vitaminA",
    "vitamin_c": "vitaminC",
    "cost_per_serving": "costPerServing",
}
_FOOD_NUMERIC_FIELDS = (
    "calories",
    "protein",
    "carbs",
    "fat",
    "fiber",
    "sodium",
    "calcium",
    "iron",
    "vitamin_a",
    "vitamin_c",
    "cost_per_serving",
)

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal JSON key-value storage."""

    def get(self, key: str) -> object | None:
        """Return the value for a key, or None."""

    def set(self, key: str, value: object) -> None:
        """Store a JSON-serialisable value."""

    def delete(self, key: str) -> None:
        """Remove a key."""


@dataclass
class KeyValueHouseholdRepository(HouseholdRepository):
    """Stores each collection under a fixed key; meal sets by date and person."""

    store: KeyValueStore

    def initialize(self) -> None:
        """Seed missing collections with their defaults."""
        defaults: dict[str, object] = {
            MEALS_KEY: {},
            MEAL_PLANS_KEY: {},
            PEOPLE_KEY: [],
            BUDGET_KEY: {"monthly": 0},
            EXPENSES_KEY: [],
            FOOD_DATABASE_KEY: [dict(food) for food in SAMPLE_FOODS],
        }
        for key, value in defaults.items():
            if self._get(key) is None:
                self.store.set(key, value)

    def reset(self) -> None:
        """Delete every collection and seed the defaults again."""
        for key in ALL_KEYS:
            self.store.delete(key)
        self.initialize()
        _logger.info("Storage reset to defaults")

    def get_food_catalog(self) -> list[FoodItem]:
        """Return the stored foods, skipping malformed records."""
        records = self._get(FOOD_DATABASE_KEY)
        if not isinstance(records, list):
            return []
        return [
            food_from_record(record)
            for record in records
            if isinstance(record, dict) and record.get("id") is not None
        ]

    def save_food_catalog(self, foods: list[FoodItem]) -> None:
        """Replace the stored foods."""
        self.store.set(FOOD_DATABASE_KEY, [food_to_record(food) for food in foods])

    def get_day_meal_set(self, day: str, person_id: str, kind: MealKind) -> DayMealSet:
        """Return the meal set stored under ``{day}_{person_id}``."""
        collection = self._meal_collection(kind)
        return meal_set_from_record(collection.get(meal_set_key(day, person_id)))

    def save_day_meal_set(
        self, day: str, person_id: str, kind: MealKind, meals: DayMealSet
    ) -> None:
        """Store the meal set under ``{day}_{person_id}``."""
        collection = dict(self._meal_collection(kind))
        collection[meal_set_key(day, person_id)] = meal_set_to_record(meals)
        self.store.set(_meal_key(kind), collection)

    def list_day_meal_sets(self, kind: MealKind) -> list[StoredDayMealSet]:
        """Return every stored meal set of a kind."""
        stored: list[StoredDayMealSet] = []
        for key, record in self._meal_collection(kind).items():
            day, _, person_id = key.partition("_")
            stored.append(
                StoredDayMealSet(
                    day=day,
                    person_id=person_id,
                    meals=meal_set_from_record(record),
                )
            )
        return stored

    def get_people(self) -> list[Person]:
        """Return the stored household members."""
        records = self._get(PEOPLE_KEY)
        if not isinstance(records, list):
            return []
        return [
            person_from_record(record) for record in records if isinstance(record, dict)
        ]

    def save_people(self, people: list[Person]) -> None:
        """Replace the stored household members."""
        self.store.set(PEOPLE_KEY, [person_to_record(person) for person in people])

    def get_expenses(self) -> list[Expense]:
        """Return the stored expenses."""
        records = self._get(EXPENSES_KEY)
        if not isinstance(records, list):
            return []
        return [
            expense_from_record(record)
            for record in records
            if isinstance(record, dict) and isinstance(record.get("date"), str)
        ]

    def save_expenses(self, expenses: list[Expense]) -> None:
        """Replace the stored expenses."""
        self.store.set(
            EXPENSES_KEY,
            [
                {
                    "id": expense.id,
                    "date": expense.date,
                    "description": expense.description,
                    "amount": expense.amount,
                }
                for expense in expenses
            ],
        )

    def get_budget(self) -> Budget:
        """Return the stored budget, zero when unset."""
        record = self._get(BUDGET_KEY)
        if not isinstance(record, dict):
            return Budget()
        return Budget(monthly=to_float(record.get("monthly")))

    def save_budget(self, budget: Budget) -> None:
        """Store the budget."""
        self.store.set(BUDGET_KEY, {"monthly": budget.monthly})

    def _meal_collection(self, kind: MealKind) -> dict[str, object]:
        collection = self._get(_meal_key(kind))
        return collection if isinstance(collection, dict) else {}

    def _get(self, key: str) -> object | None:
        try:
            return self.store.get(key)
        except StorageError as exc:
            _logger.error("Failed to get data for key %s: %s", key, exc)
            return None


def meal_set_key(day: str, person_id: str) -> str:
    """Return the storage key for a person's meals on a date."""
    return f"{day}_{person_id}"


def _meal_key(kind: MealKind) -> str:
    return MEALS_KEY if kind == MealKind.CONSUMED else MEAL_PLANS_KEY


def food_from_record(record: dict[str, object]) -> FoodItem:
    """Parse a stored food, zero-filling missing or invalid numbers."""
    numbers = {
        name: non_negative(record.get(_FOOD_RECORD_KEYS.get(name, name)))
        for name in _FOOD_NUMERIC_FIELDS
    }
    category = record.get("category")
    return FoodItem(
        id=record["id"],
        name=str(record.get("name") or ""),
        serving_size=str(record.get("servingSize") or ""),
        category=str(category) if category else None,
        **numbers,
    )


def food_to_record(food: FoodItem) -> dict[str, object]:
    """Serialise a food to its stored form."""
    record: dict[str, object] = {
        "id": food.id,
        "name": food.name,
        "servingSize": food.serving_size,
    }
    for name in _FOOD_NUMERIC_FIELDS:
        record[_FOOD_RECORD_KEYS.get(name, name)] = getattr(food, name)
    if food.category:
        record["category"] = food.category
    return record


def entry_from_record(record: dict[str, object]) -> MealEntry:
    """Parse a stored meal entry."""
    status = record.get("status")
    return MealEntry(
        food_id=record.get("foodId"),
        servings=to_float(record.get("servings"), default=1.0),
        notes=str(record.get("notes") or ""),
        timestamp=int(to_float(record.get("timestamp"))),
        status=MealKind(status) if status in {"consumed", "planned"} else None,
        updated_at=_optional_int(record.get("updatedAt")),
        from_plan=bool(record.get("planned", False)),
        consumed_at=_optional_int(record.get("consumedAt")),
    )


def entry_to_record(entry: MealEntry) -> dict[str, object]:
    """Serialise a meal entry to its stored form."""
    record: dict[str, object] = {
        "foodId": entry.food_id,
        "servings": entry.servings,
        "notes": entry.notes,
        "timestamp": entry.timestamp,
    }
    if entry.status is not None:
        record["status"] = str(entry.status)
    if entry.updated_at is not None:
        record["updatedAt"] = entry.updated_at
    if entry.from_plan:
        record["planned"] = True
    if entry.consumed_at is not None:
        record["consumedAt"] = entry.consumed_at
    return record


def meal_set_from_record(record: object) -> DayMealSet:
    """Parse a stored meal set; missing or non-list slots are empty."""
    if not isinstance(record, dict):
        return DayMealSet()
    slots: dict[str, tuple[MealEntry, ...]] = {}
    for slot in MEAL_SLOTS:
        raw = record.get(slot)
        if not isinstance(raw, list):
            continue
        slots[slot] = tuple(
            entry_from_record(item)
            for item in raw
            if isinstance(item, dict) and item.get("foodId") is not None
        )
    return DayMealSet(**slots)


def meal_set_to_record(meals: DayMealSet) -> dict[str, object]:
    """Serialise a meal set to its stored form."""
    return {
        slot: [entry_to_record(entry) for entry in meals.slot(slot)]
        for slot in MEAL_SLOTS
    }


def person_from_record(record: dict[str, object]) -> Person:
    """Parse a stored household member, leaving absent measurements as None."""
    age = to_float(record.get("age"))
    weight = to_float(record.get("weight"))
    height = to_float(record.get("height"))
    gender = record.get("gender")
    activity = record.get("activityLevel")
    return Person(
        id=str(record.get("id") or ""),
        name=str(record.get("name") or ""),
        gender=str(gender) if gender else None,
        age=int(age) if age > 0 else None,
        weight=weight if weight > 0 else None,
        weight_unit=str(record.get("weightUnit") or "kg"),
        height=height if height > 0 else None,
        height_unit=str(record.get("heightUnit") or "cm"),
        activity_level=str(activity) if activity else None,
    )


def person_to_record(person: Person) -> dict[str, object]:
    """Serialise a household member to its stored form."""
    return {
        "id": person.id,
        "name": person.name,
        "gender": person.gender,
        "age": person.age,
        "weight": person.weight,
        "weightUnit": person.weight_unit,
        "height": person.height,
        "heightUnit": person.height_unit,
        "activityLevel": (
            str(person.activity_level) if person.activity_level else None
        ),
    }


def expense_from_record(record: dict[str, object]) -> Expense:
    """Parse a stored expense."""
    return Expense(
        id=str(record.get("id") or ""),
        date=str(record["date"]),
        description=str(record.get("description") or ""),
        amount=to_float(record.get("amount")),
    )


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(to_float(value))
