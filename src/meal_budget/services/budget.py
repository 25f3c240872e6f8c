"""Budget tracking and month-end spend projection."""

import calendar
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from uuid import uuid4

from meal_budget.config import parse_month
from meal_budget.domain.budget import (
    Budget,
    BudgetSummary,
    Expense,
    MealCost,
    MemberCost,
)
from meal_budget.domain.catalog import MEAL_SLOTS, MealKind, StoredDayMealSet
from meal_budget.domain.errors import ErrorCode, TrackerError
from meal_budget.numbers import to_float
from meal_budget.services.catalog import FoodCatalog
from meal_budget.services.errors import ErrorReporter
from meal_budget.services.household import HouseholdRepository
from meal_budget.services.nutrition import resolve_servings

_logger = logging.getLogger(__name__)

_RECOVERABLE = (TrackerError, TypeError, ValueError, ZeroDivisionError, OverflowError)


def month_bounds(month: str) -> tuple[date, date]:
    """Return the first and last date of a ``YYYY-MM`` month."""
    year, month_number = parse_month(month)
    last_day = calendar.monthrange(year, month_number)[1]
    return date(year, month_number, 1), date(year, month_number, last_day)


def is_current_month(month: str, today: date) -> bool:
    """Return True when the selector names the month containing ``today``."""
    year, month_number = parse_month(month)
    return (year, month_number) == (today.year, today.month)


def elapsed_days(month: str, today: date) -> int:
    """Return days elapsed in the month; past and future months count fully."""
    if is_current_month(month, today):
        return today.day
    _, last = month_bounds(month)
    return last.day


def monthly_expense_total(expenses: Iterable[Expense], month: str) -> float:
    """Sum manual expenses dated within the month."""
    return sum(
        to_float(expense.amount)
        for expense in expenses
        if expense.date.startswith(month)
    )


def daily_average(spend: float, month: str, today: date) -> float:
    """Return spend per elapsed day of the month."""
    return spend / elapsed_days(month, today)


def estimated_month_end_total(spend: float, month: str, today: date) -> float:
    """Extrapolate spend to month end; other months return spend unchanged."""
    if not is_current_month(month, today):
        return spend
    _, last = month_bounds(month)
    days_passed = today.day
    return spend + daily_average(spend, month, today) * (last.day - days_passed)


def spend_percentage(spend: float, budget: float) -> float:
    """Return spend as a percentage of budget, capped at 100."""
    if budget == 0:
        return 0.0 if spend == 0 else 100.0
    return min(spend / budget * 100, 100.0)


def meal_costs_for_range(
    meal_sets: Iterable[StoredDayMealSet],
    catalog: FoodCatalog,
    start: date,
    end: date,
    person_id: str | None = None,
) -> list[MealCost]:
    """Return per-person, per-day meal costs for stored sets within a range."""
    start_label, end_label = start.isoformat(), end.isoformat()
    costs: list[MealCost] = []
    for stored in meal_sets:
        if not start_label <= stored.day <= end_label:
            continue
        if person_id and stored.person_id != person_id:
            continue
        day_cost = 0.0
        for slot in MEAL_SLOTS:
            for entry in stored.meals.slot(slot):
                food = catalog.find(entry.food_id)
                if food is not None and food.cost_per_serving:
                    day_cost += food.cost_per_serving * resolve_servings(entry.servings)
        costs.append(
            MealCost(date=stored.day, person_id=stored.person_id, cost=day_cost)
        )
    return costs


@dataclass
class BudgetService:
    """Service for expenses, the monthly budget and spend projections."""

    repository: HouseholdRepository
    errors: ErrorReporter
    today: Callable[[], date]

    def summary(self, month: str) -> BudgetSummary:
        """Return spend and projections for a month."""
        today = self.today()
        budget = self.repository.get_budget().monthly
        manual = self._guarded(
            lambda: monthly_expense_total(self.repository.get_expenses(), month),
            "Failed to calculate monthly expenses",
        )
        meals = self._guarded(
            lambda: sum(cost.cost for cost in self.meal_costs(month)),
            "Failed to calculate monthly meal costs",
        )
        combined = manual + meals
        average = self._guarded(
            lambda: daily_average(combined, month, today),
            "Failed to calculate daily average",
        )
        estimated = self._guarded(
            lambda: estimated_month_end_total(combined, month, today),
            "Failed to calculate estimated total",
        )
        return BudgetSummary(
            month=month,
            monthly_budget=budget,
            manual_expenses=manual,
            meal_costs=meals,
            combined_spend=combined,
            remaining=budget - combined,
            daily_average=average,
            estimated_month_end_total=estimated,
            projected_remaining=budget - estimated,
            spent_percentage=spend_percentage(combined, budget),
            projected_percentage=spend_percentage(estimated, budget),
        )

    def meal_costs(self, month: str, person_id: str | None = None) -> list[MealCost]:
        """Return consumed-meal costs for a month, optionally for one person."""
        first, last = month_bounds(month)
        catalog = FoodCatalog.from_items(self.repository.get_food_catalog())
        return meal_costs_for_range(
            self.repository.list_day_meal_sets(MealKind.CONSUMED),
            catalog,
            first,
            last,
            person_id,
        )

    def member_costs(self, month: str) -> list[MemberCost]:
        """Return each member's meal cost for the month, highest first."""
        costs = self.meal_costs(month)
        members = [
            MemberCost(
                person_id=person.id,
                name=person.name,
                cost=sum(cost.cost for cost in costs if cost.person_id == person.id),
            )
            for person in self.repository.get_people()
        ]
        return sorted(members, key=lambda member: member.cost, reverse=True)

    def month_expenses(self, month: str) -> list[Expense]:
        """Return the month's expenses, newest first."""
        expenses = [
            expense
            for expense in self.repository.get_expenses()
            if expense.date.startswith(month)
        ]
        return sorted(expenses, key=lambda expense: expense.date, reverse=True)

    def add_expense(self, day: date, description: str, amount: float) -> Expense:
        """Record a manual expense.

        Raises:
            ValueError: if the amount is not positive or the description is blank.
        """
        if amount <= 0:
            raise ValueError("Expense amount must be positive")
        if not description.strip():
            raise ValueError("Expense description is required")
        expense = Expense(
            id=uuid4().hex,
            date=day.isoformat(),
            description=description.strip(),
            amount=amount,
        )
        try:
            self.repository.save_expenses([*self.repository.get_expenses(), expense])
        except TrackerError as exc:
            self.errors.report(
                ErrorCode.BUDGET_ADD_ERROR, "Failed to add expense", str(exc)
            )
            raise
        _logger.info("Added expense %s on %s", expense.id, expense.date)
        return expense

    def delete_expense(self, expense_id: str) -> bool:
        """Delete an expense, returning False when it does not exist."""
        expenses = self.repository.get_expenses()
        remaining = [expense for expense in expenses if expense.id != expense_id]
        if len(remaining) == len(expenses):
            return False
        try:
            self.repository.save_expenses(remaining)
        except TrackerError as exc:
            self.errors.report(
                ErrorCode.BUDGET_DELETE_ERROR, "Failed to delete expense", str(exc)
            )
            raise
        return True

    def update_budget(self, amount: float) -> Budget:
        """Set the monthly budget.

        Raises:
            ValueError: if the amount is negative.
        """
        if amount < 0:
            raise ValueError("Budget must not be negative")
        budget = Budget(monthly=amount)
        try:
            self.repository.save_budget(budget)
        except TrackerError as exc:
            self.errors.report(
                ErrorCode.BUDGET_UPDATE_ERROR, "Failed to update budget", str(exc)
            )
            raise
        return budget

    def _guarded(self, compute: Callable[[], float], message: str) -> float:
        try:
            return compute()
        except _RECOVERABLE as exc:
            self.errors.report(ErrorCode.DATA_PARSE_ERROR, message, str(exc))
            return 0.0
