"""Nutrition totals domain models."""

from dataclasses import dataclass, fields

from meal_budget.numbers import to_float

NUTRIENT_FIELDS: tuple[str, ...] = (
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
)

TOTAL_FIELDS: tuple[str, ...] = (*NUTRIENT_FIELDS, "cost")


@dataclass(frozen=True)
class NutritionTotals:
    """Summed nutrients and cost for a set of meal entries."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sodium: float = 0.0
    calcium: float = 0.0
    iron: float = 0.0
    vitamin_a: float = 0.0
    vitamin_c: float = 0.0
    cost: float = 0.0

    def as_dict(self) -> dict[str, float]:
        """Return the totals keyed by field name."""
        return {item.name: getattr(self, item.name) for item in fields(self)}

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "NutritionTotals":
        """Rebuild totals from a mapping.

        Unknown keys are ignored; missing or malformed values become zero.
        """
        return cls(**{name: to_float(payload.get(name)) for name in TOTAL_FIELDS})


@dataclass(frozen=True)
class Percentages:
    """Totals expressed as whole percentages of daily targets."""

    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0
    fiber: int = 0
    sodium: int = 0
    calcium: int = 0
    iron: int = 0
    vitamin_a: int = 0
    vitamin_c: int = 0


@dataclass(frozen=True)
class DaySummary:
    """Totals for a day with percentages against a calorie target."""

    day: str
    person_id: str
    kind: str
    totals: NutritionTotals
    percentages: Percentages
    calorie_target: int
