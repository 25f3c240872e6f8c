"""Household member domain models."""

from dataclasses import dataclass
from enum import StrEnum


class ActivityLevel(StrEnum):
    """Activity levels used to scale basal metabolic rate."""

    SEDENTARY = "SEDENTARY"
    LIGHT = "LIGHT"
    MODERATE = "MODERATE"
    ACTIVE = "ACTIVE"
    VERY_ACTIVE = "VERY_ACTIVE"


@dataclass(frozen=True)
class Person:
    """A household member with anthropometric data."""

    id: str
    name: str
    gender: str | None = None
    age: int | None = None
    weight: float | None = None
    weight_unit: str = "kg"
    height: float | None = None
    height_unit: str = "cm"
    activity_level: str | None = None


@dataclass(frozen=True)
class EnergyProfile:
    """Resting and total daily energy for a person."""

    person_id: str
    bmr: int | None
    tdee: int
    used_default: bool
