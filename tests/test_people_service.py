"""Tests for household member management and error reporting."""

import pytest

from meal_budget.domain.errors import ErrorCode
from meal_budget.domain.people import Person
from meal_budget.services.errors import LoggingErrorReporter
from meal_budget.services.people import PeopleService
from tests.conftest import make_person


def test_ensure_defaults_seeds_once(repository) -> None:
    service = PeopleService(repository)

    seeded = service.ensure_defaults()
    again = service.ensure_defaults()

    assert [person.name for person in seeded] == ["Parent 1", "Parent 2", "Child"]
    assert [person.id for person in again] == [person.id for person in seeded]
    assert all(person.id for person in seeded)


def test_add_person_assigns_id(repository) -> None:
    service = PeopleService(repository)

    added = service.add_person(make_person("ignored", name=" Robin "))

    assert added.id != "ignored"
    assert added.name == "Robin"
    assert service.get_person(added.id) == added


def test_add_person_validates(repository) -> None:
    service = PeopleService(repository)

    with pytest.raises(ValueError):
        service.add_person(Person(id="", name="  "))
    with pytest.raises(ValueError):
        service.add_person(Person(id="", name="Baby", age=0))


def test_calorie_needs_uses_configured_default(repository) -> None:
    service = PeopleService(repository, default_calorie_target=1900)

    assert service.calorie_needs(Person(id="x", name="Unknown")) == 1900
    assert service.calorie_needs(make_person()) == 2751


def test_error_reporter_keeps_recent_history() -> None:
    reporter = LoggingErrorReporter(max_reports=2)

    reporter.report(ErrorCode.DATA_PARSE_ERROR, "first")
    reporter.report(ErrorCode.MEAL_ADD_ERROR, "second")
    reporter.report(ErrorCode.BUDGET_ADD_ERROR, "third", "details")

    recent = reporter.recent()
    assert [error.message for error in recent] == ["third", "second"]
    assert recent[0].details == "details"
    reporter.clear()
    assert reporter.recent() == []
