"""Household member management."""

import logging
from dataclasses import dataclass, replace
from uuid import uuid4

from meal_budget.domain.people import ActivityLevel, EnergyProfile, Person
from meal_budget.services.energy import (
    DEFAULT_CALORIE_TARGET,
    daily_calorie_needs,
    energy_profile,
)
from meal_budget.services.household import HouseholdRepository

DEFAULT_PEOPLE = (
    Person(
        id="",
        name="Parent 1",
        gender="male",
        age=32,
        weight=75,
        height=180,
        activity_level=ActivityLevel.MODERATE,
    ),
    Person(
        id="",
        name="Parent 2",
        gender="female",
        age=28,
        weight=60,
        height=165,
        activity_level=ActivityLevel.LIGHT,
    ),
    Person(
        id="",
        name="Child",
        gender="female",
        age=5,
        weight=20,
        height=110,
        activity_level=ActivityLevel.ACTIVE,
    ),
)

_logger = logging.getLogger(__name__)


@dataclass
class PeopleService:
    """Service for household members and their calorie needs."""

    repository: HouseholdRepository
    default_calorie_target: int = DEFAULT_CALORIE_TARGET

    def list_people(self) -> list[Person]:
        """Return all household members."""
        return self.repository.get_people()

    def get_person(self, person_id: str) -> Person | None:
        """Return a member by id."""
        for person in self.repository.get_people():
            if person.id == person_id:
                return person
        return None

    def add_person(self, person: Person) -> Person:
        """Store a new member under a fresh id.

        Raises:
            ValueError: if the name is blank or age is below one.
        """
        if not person.name.strip():
            raise ValueError("Person name is required")
        if person.age is not None and person.age < 1:
            raise ValueError("Age must be at least 1")
        stored = replace(person, id=uuid4().hex, name=person.name.strip())
        self.repository.save_people([*self.repository.get_people(), stored])
        _logger.info("Added household member %s", stored.id)
        return stored

    def ensure_defaults(self) -> list[Person]:
        """Seed the default household when no members are stored."""
        people = self.repository.get_people()
        if people:
            return people
        seeded = [replace(person, id=uuid4().hex) for person in DEFAULT_PEOPLE]
        self.repository.save_people(seeded)
        return seeded

    def calorie_needs(self, person: Person) -> int:
        """Return the daily calorie target for a member."""
        return daily_calorie_needs(person, default=self.default_calorie_target)

    def energy(self, person: Person) -> EnergyProfile:
        """Return BMR and TDEE for a member."""
        return energy_profile(person, default=self.default_calorie_target)
