"""Budget and expense domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Expense:
    """A manually recorded household expense."""

    id: str
    date: str
    description: str
    amount: float


@dataclass(frozen=True)
class Budget:
    """Monthly spending limit."""

    monthly: float = 0.0


@dataclass(frozen=True)
class MealCost:
    """Cost of the consumed meals for one person on one date."""

    date: str
    person_id: str
    cost: float


@dataclass(frozen=True)
class MemberCost:
    """Month-to-date meal cost for a household member."""

    person_id: str
    name: str
    cost: float


@dataclass(frozen=True)
class BudgetSummary:
    """Spend, averages and month-end projection for a month."""

    month: str
    monthly_budget: float
    manual_expenses: float
    meal_costs: float
    combined_spend: float
    remaining: float
    daily_average: float
    estimated_month_end_total: float
    projected_remaining: float
    spent_percentage: float
    projected_percentage: float
