"""Food catalog and meal log domain models."""

from dataclasses import dataclass, field
from enum import StrEnum


class MealSlot(StrEnum):
    """Slots a day's meals are grouped into."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"


class MealKind(StrEnum):
    """Whether a meal set records what was eaten or what is planned."""

    CONSUMED = "consumed"
    PLANNED = "planned"


MEAL_SLOTS: tuple[str, ...] = tuple(slot.value for slot in MealSlot)


@dataclass(frozen=True)
class FoodItem:
    """Nutrition and cost facts for one serving of a food."""

    id: str | int
    name: str
    serving_size: str
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float = 0.0
    sodium: float = 0.0
    calcium: float = 0.0
    iron: float = 0.0
    vitamin_a: float = 0.0
    vitamin_c: float = 0.0
    cost_per_serving: float = 0.0
    category: str | None = None


@dataclass(frozen=True)
class MealEntry:
    """A food logged against a meal slot."""

    food_id: str | int
    servings: float = 1.0
    notes: str = ""
    timestamp: int = 0
    status: MealKind | None = None
    updated_at: int | None = None
    from_plan: bool = False
    consumed_at: int | None = None


@dataclass(frozen=True)
class DayMealSet:
    """Entries for one person on one date, per meal slot."""

    breakfast: tuple[MealEntry, ...] = ()
    lunch: tuple[MealEntry, ...] = ()
    dinner: tuple[MealEntry, ...] = ()
    snacks: tuple[MealEntry, ...] = ()

    def slot(self, name: str) -> tuple[MealEntry, ...]:
        """Return the entries for a slot name, empty when unknown."""
        entries = getattr(self, name, ()) if name in MEAL_SLOTS else ()
        return entries if isinstance(entries, tuple | list) else ()

    def is_empty(self) -> bool:
        """Return True when no slot has entries."""
        return not any(self.slot(name) for name in MEAL_SLOTS)


@dataclass(frozen=True)
class StoredDayMealSet:
    """A meal set together with the key it was stored under."""

    day: str
    person_id: str
    meals: DayMealSet = field(default_factory=DayMealSet)


@dataclass(frozen=True)
class FdcFoodSummary:
    """A FoodData Central search hit that can be imported."""

    fdc_id: int
    description: str
    brand_owner: str | None = None
    data_type: str | None = None
