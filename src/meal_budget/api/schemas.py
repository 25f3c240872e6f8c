"""Pydantic request models for the HTTP API."""

import datetime
from typing import Literal

from pydantic import BaseModel, Field

from meal_budget.domain.catalog import MealKind, MealSlot
from meal_budget.domain.people import ActivityLevel


class FoodPayload(BaseModel):
    """New catalog food, values per serving."""

    name: str = Field(min_length=1)
    serving_size: str = "1 serving"
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sodium: float = Field(default=0.0, ge=0)
    calcium: float = Field(default=0.0, ge=0)
    iron: float = Field(default=0.0, ge=0)
    vitamin_a: float = Field(default=0.0, ge=0)
    vitamin_c: float = Field(default=0.0, ge=0)
    cost_per_serving: float = Field(default=0.0, ge=0)
    category: str | None = None


class FdcImportPayload(BaseModel):
    """Options for importing a FoodData Central food."""

    cost_per_serving: float = Field(default=0.0, ge=0)
    category: str | None = None


class PersonPayload(BaseModel):
    """New household member."""

    name: str = Field(min_length=1)
    gender: str | None = None
    age: int | None = Field(default=None, ge=1)
    weight: float | None = Field(default=None, gt=0)
    weight_unit: Literal["kg", "lb"] = "kg"
    height: float | None = Field(default=None, gt=0)
    height_unit: Literal["cm", "in"] = "cm"
    activity_level: ActivityLevel | None = None


class MealEntryPayload(BaseModel):
    """Entry to add to a meal slot."""

    slot: MealSlot
    food_id: str
    servings: float | None = None
    notes: str = ""
    kind: MealKind = MealKind.CONSUMED


class MealEntryUpdatePayload(BaseModel):
    """Replacement values for an existing entry."""

    food_id: str
    servings: float | None = None
    notes: str = ""
    kind: MealKind = MealKind.CONSUMED


class ExpensePayload(BaseModel):
    """Manual expense."""

    date: datetime.date
    description: str = Field(min_length=1)
    amount: float = Field(gt=0)


class BudgetPayload(BaseModel):
    """Monthly budget amount."""

    monthly: float = Field(ge=0)
