"""Tests for BMR and daily calorie needs."""

import pytest

from meal_budget.domain.errors import MissingDataError
from meal_budget.domain.people import ActivityLevel
from meal_budget.services.energy import (
    activity_multiplier,
    compute_bmr,
    compute_tdee,
    daily_calorie_needs,
    energy_profile,
)
from tests.conftest import make_person


def test_compute_bmr_male_metric() -> None:
    # 88.362 + 13.397*75 + 4.799*180 - 5.677*32 = 1775.293
    assert compute_bmr(make_person()) == 1775


def test_compute_bmr_female_metric() -> None:
    person = make_person(gender="female", age=28, weight=60.0, height=165.0)
    # 447.593 + 9.247*60 + 3.098*165 - 4.330*28 = 1392.343
    assert compute_bmr(person) == 1392


def test_compute_bmr_normalises_imperial_units() -> None:
    metric = make_person()
    imperial = make_person(
        weight=75.0 / 0.453592,
        weight_unit="lb",
        height=180.0 / 2.54,
        height_unit="in",
    )

    assert compute_bmr(imperial) == compute_bmr(metric)


def test_compute_bmr_gender_is_case_insensitive() -> None:
    assert compute_bmr(make_person(gender="Male")) == 1775


@pytest.mark.parametrize("missing", ["gender", "age", "weight", "height"])
def test_compute_bmr_requires_all_fields(missing: str) -> None:
    person = make_person(**{missing: None})

    with pytest.raises(MissingDataError):
        compute_bmr(person)


def test_daily_calorie_needs_moderate() -> None:
    assert daily_calorie_needs(make_person()) == 2751


def test_daily_calorie_needs_defaults_when_data_missing() -> None:
    assert daily_calorie_needs(make_person(weight=None)) == 2000
    assert daily_calorie_needs(make_person(age=None), default=1800) == 1800


def test_activity_multiplier_defaults_to_moderate() -> None:
    assert activity_multiplier(None) == 1.55
    assert activity_multiplier("unknown") == 1.55
    assert activity_multiplier("very_active") == 1.9
    assert activity_multiplier(ActivityLevel.SEDENTARY) == 1.2


def test_compute_tdee_rounds_half_up() -> None:
    # 1000 * 1.375 = 1375.0; 1001 * 1.375 = 1376.375
    assert compute_tdee(1000, "LIGHT") == 1375
    assert compute_tdee(1001, "LIGHT") == 1376


def test_energy_profile_flags_default() -> None:
    profile = energy_profile(make_person(height=None))

    assert profile.bmr is None
    assert profile.tdee == 2000
    assert profile.used_default is True


def test_energy_profile_with_complete_data() -> None:
    profile = energy_profile(make_person(activity_level=ActivityLevel.SEDENTARY))

    assert profile.bmr == 1775
    assert profile.tdee == 2130
    assert profile.used_default is False
