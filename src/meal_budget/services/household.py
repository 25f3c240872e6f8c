"""Persistence interface shared by the tracker services."""

from typing import Protocol

from meal_budget.domain.budget import Budget, Expense
from meal_budget.domain.catalog import DayMealSet, FoodItem, MealKind, StoredDayMealSet
from meal_budget.domain.people import Person


class HouseholdRepository(Protocol):
    """Storage for the catalog, meal logs, people, expenses and budget."""

    def get_food_catalog(self) -> list[FoodItem]:
        """Return every food in the catalog."""

    def save_food_catalog(self, foods: list[FoodItem]) -> None:
        """Replace the stored catalog."""

    def get_day_meal_set(self, day: str, person_id: str, kind: MealKind) -> DayMealSet:
        """Return the meal set for a date and person, empty when absent."""

    def save_day_meal_set(
        self, day: str, person_id: str, kind: MealKind, meals: DayMealSet
    ) -> None:
        """Store the meal set for a date and person."""

    def list_day_meal_sets(self, kind: MealKind) -> list[StoredDayMealSet]:
        """Return every stored meal set of a kind."""

    def get_people(self) -> list[Person]:
        """Return all household members."""

    def save_people(self, people: list[Person]) -> None:
        """Replace the stored household members."""

    def get_expenses(self) -> list[Expense]:
        """Return all manual expenses."""

    def save_expenses(self, expenses: list[Expense]) -> None:
        """Replace the stored expenses."""

    def get_budget(self) -> Budget:
        """Return the monthly budget."""

    def save_budget(self, budget: Budget) -> None:
        """Store the monthly budget."""

    def reset(self) -> None:
        """Remove all stored data and re-seed the defaults."""
