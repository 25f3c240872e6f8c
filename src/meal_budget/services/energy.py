"""Energy requirements using the Harris-Benedict equation.

BMR is computed from weight, height, age and gender after normalising
imperial units, then scaled by an activity multiplier to get TDEE.
"""

import logging

from meal_budget.domain.errors import MissingDataError
from meal_budget.domain.people import ActivityLevel, EnergyProfile, Person
from meal_budget.numbers import round_int

DEFAULT_CALORIE_TARGET = 2000

LB_TO_KG = 0.453592
IN_TO_CM = 2.54

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

_logger = logging.getLogger(__name__)


def weight_in_kg(weight: float, unit: str | None) -> float:
    """Return the weight in kilograms."""
    return weight * LB_TO_KG if (unit or "").lower() == "lb" else weight


def height_in_cm(height: float, unit: str | None) -> float:
    """Return the height in centimetres."""
    return height * IN_TO_CM if (unit or "").lower() == "in" else height


def compute_bmr(person: Person) -> int:
    """Return basal metabolic rate in kcal.

    Raises:
        MissingDataError: if gender, weight, height or age is missing.
    """
    if not person.gender or not person.weight or not person.height or not person.age:
        raise MissingDataError(
            f"Missing required person data for BMR calculation: {person.id}"
        )

    weight = weight_in_kg(person.weight, person.weight_unit)
    height = height_in_cm(person.height, person.height_unit)

    if person.gender.strip().lower() == "male":
        bmr = 88.362 + (13.397 * weight) + (4.799 * height) - (5.677 * person.age)
    else:
        bmr = 447.593 + (9.247 * weight) + (3.098 * height) - (4.330 * person.age)
    return round_int(bmr)


def activity_multiplier(activity_level: str | None) -> float:
    """Return the multiplier for a level, MODERATE when unknown."""
    try:
        level = ActivityLevel((activity_level or "").strip().upper())
    except ValueError:
        level = ActivityLevel.MODERATE
    return ACTIVITY_MULTIPLIERS[level]


def compute_tdee(bmr: float, activity_level: str | None) -> int:
    """Return total daily energy expenditure in kcal."""
    return round_int(bmr * activity_multiplier(activity_level))


def daily_calorie_needs(
    person: Person, default: int = DEFAULT_CALORIE_TARGET
) -> int:
    """Return a person's TDEE, or ``default`` when it cannot be computed."""
    try:
        return compute_tdee(compute_bmr(person), person.activity_level)
    except (MissingDataError, TypeError, ValueError, OverflowError) as exc:
        _logger.warning("Using default calorie target for %s: %s", person.id, exc)
        return default


def energy_profile(
    person: Person, default: int = DEFAULT_CALORIE_TARGET
) -> EnergyProfile:
    """Return BMR and TDEE, flagging when the default target was used."""
    try:
        bmr = compute_bmr(person)
    except (MissingDataError, TypeError, ValueError, OverflowError) as exc:
        _logger.warning("Using default calorie target for %s: %s", person.id, exc)
        return EnergyProfile(
            person_id=person.id, bmr=None, tdee=default, used_default=True
        )
    return EnergyProfile(
        person_id=person.id,
        bmr=bmr,
        tdee=compute_tdee(bmr, person.activity_level),
        used_default=False,
    )
