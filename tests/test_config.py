"""Tests for configuration helpers."""

import pytest

from meal_budget.config import Settings, parse_month


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("MEAL_BUDGET_STORAGE_BACKEND", "supabase")
    monkeypatch.setenv("MEAL_BUDGET_DEFAULT_CALORIE_TARGET", "1800")

    settings = Settings()

    assert settings.storage_backend == "supabase"
    assert settings.default_calorie_target == 1800


def test_parse_month() -> None:
    assert parse_month("2024-03") == (2024, 3)
    assert parse_month(" 1999-12 ") == (1999, 12)


@pytest.mark.parametrize("raw", ["2024-3", "2024-00", "2024-13", "March", "2024-03-01"])
def test_parse_month_rejects_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_month(raw)
