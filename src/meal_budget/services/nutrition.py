"""Nutrient and cost aggregation over meal entries."""

import logging
import math
from collections.abc import Iterable

from meal_budget.domain.catalog import MEAL_SLOTS, DayMealSet, FoodItem, MealEntry
from meal_budget.domain.errors import CalculationError
from meal_budget.domain.nutrition import (
    NUTRIENT_FIELDS,
    TOTAL_FIELDS,
    NutritionTotals,
    Percentages,
)
from meal_budget.numbers import round_half_up, round_int, to_float
from meal_budget.services.catalog import FoodCatalog
from meal_budget.services.energy import DEFAULT_CALORIE_TARGET

CALORIES_PER_GRAM = {"protein": 4, "carbs": 4, "fat": 9}
MACRO_CALORIE_SHARE = {"protein": 0.15, "carbs": 0.55, "fat": 0.30}
MICRO_DAILY_VALUES = {
    "fiber": 25,
    "sodium": 2300,
    "calcium": 1000,
    "iron": 18,
    "vitamin_a": 900,
    "vitamin_c": 90,
}

_logger = logging.getLogger(__name__)


def resolve_servings(value: object) -> float:
    """Return a positive serving multiplier, 1 when absent or invalid."""
    servings = to_float(value)
    return servings if servings > 0 else 1.0


def aggregate_entries(
    entries: Iterable[MealEntry], catalog: FoodCatalog | Iterable[FoodItem]
) -> NutritionTotals:
    """Sum nutrients and cost for entries, skipping unknown foods.

    Values are rounded to one decimal once, after accumulation.
    """
    try:
        return _rounded(_sum_entries(entries or (), _as_catalog(catalog)))
    except (CalculationError, TypeError, ValueError, AttributeError) as exc:
        _logger.error("Error calculating meal nutrition: %s", exc)
        return NutritionTotals()


def aggregate_day(
    meals: DayMealSet | None, catalog: FoodCatalog | Iterable[FoodItem]
) -> NutritionTotals:
    """Sum the per-slot totals of a day's meal set."""
    try:
        resolved = _as_catalog(catalog)
        totals = dict.fromkeys(TOTAL_FIELDS, 0.0)
        if meals is not None:
            for slot in MEAL_SLOTS:
                slot_totals = aggregate_entries(meals.slot(slot), resolved)
                for name in TOTAL_FIELDS:
                    totals[name] += getattr(slot_totals, name)
        return _rounded(totals)
    except (CalculationError, TypeError, ValueError, AttributeError) as exc:
        _logger.error("Error calculating daily nutrition totals: %s", exc)
        return NutritionTotals()


def sum_totals(items: Iterable[NutritionTotals]) -> NutritionTotals:
    """Add totals field by field, keeping one-decimal precision."""
    totals = dict.fromkeys(TOTAL_FIELDS, 0.0)
    for item in items:
        for name in TOTAL_FIELDS:
            totals[name] += getattr(item, name)
    return _rounded(totals)


def percentages_of(
    totals: NutritionTotals, calorie_target: float | None = None
) -> Percentages:
    """Express totals as percentages of the daily targets for a calorie goal."""
    calories = calorie_target or DEFAULT_CALORIE_TARGET
    targets: dict[str, float] = {"calories": calories}
    for macro, share in MACRO_CALORIE_SHARE.items():
        targets[macro] = calories * share / CALORIES_PER_GRAM[macro]
    targets.update(MICRO_DAILY_VALUES)
    try:
        return Percentages(
            **{
                name: round_int(getattr(totals, name) / targets[name] * 100)
                for name in NUTRIENT_FIELDS
            }
        )
    except (TypeError, ValueError, OverflowError, ZeroDivisionError) as exc:
        _logger.error("Error calculating nutrition percentages: %s", exc)
        return Percentages()


def _as_catalog(catalog: FoodCatalog | Iterable[FoodItem]) -> FoodCatalog:
    if isinstance(catalog, FoodCatalog):
        return catalog
    return FoodCatalog.from_items(catalog or ())


def _sum_entries(
    entries: Iterable[MealEntry], catalog: FoodCatalog
) -> dict[str, float]:
    totals = dict.fromkeys(TOTAL_FIELDS, 0.0)
    for entry in entries:
        food = catalog.find(getattr(entry, "food_id", None))
        if food is None:
            _logger.debug("Skipping entry with unknown food id %r", entry)
            continue
        servings = resolve_servings(entry.servings)
        for name in NUTRIENT_FIELDS:
            totals[name] += getattr(food, name) * servings
        totals["cost"] += food.cost_per_serving * servings
    return totals


def _rounded(totals: dict[str, float]) -> NutritionTotals:
    for name, value in totals.items():
        if not math.isfinite(value) or value < 0:
            raise CalculationError(f"Invalid total for {name}: {value}")
    return NutritionTotals(
        **{name: round_half_up(value, 1) for name, value in totals.items()}
    )
