"""Planned vs. consumed nutrition reports over days, weeks and months."""

import calendar
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from meal_budget.domain.catalog import MealKind
from meal_budget.domain.errors import ErrorCode, TrackerError
from meal_budget.domain.nutrition import NutritionTotals
from meal_budget.domain.people import Person
from meal_budget.domain.reports import (
    ALL_PEOPLE,
    REPORT_METRICS,
    MetricSeries,
    Report,
    ReportType,
)
from meal_budget.services.catalog import FoodCatalog
from meal_budget.services.errors import ErrorReporter
from meal_budget.services.household import HouseholdRepository
from meal_budget.services.nutrition import aggregate_day, sum_totals

DAYS_PER_WEEK = 7

_logger = logging.getLogger(__name__)


def week_start(day: date) -> date:
    """Return the Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % DAYS_PER_WEEK)


def build_date_range(report_type: str, anchor: date, today: date) -> list[date]:
    """Return the report dates for a period, never later than ``today``.

    Raises:
        ValueError: if the report type is unknown.
    """
    kind = ReportType(report_type)
    if kind is ReportType.DAILY:
        return [anchor]
    if kind is ReportType.WEEKLY:
        days = [anchor + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]
    else:
        days_in_month = calendar.monthrange(anchor.year, anchor.month)[1]
        first = anchor.replace(day=1)
        days = [first + timedelta(days=offset) for offset in range(days_in_month)]
    return [day for day in days if day <= today]


@dataclass
class ReportService:
    """Builds report time series from stored meal sets."""

    repository: HouseholdRepository
    errors: ErrorReporter
    today: Callable[[], date]

    def generate(
        self,
        report_type: str,
        person_selector: str,
        anchor: date,
        people: list[Person] | None = None,
    ) -> Report:
        """Return the report, or an empty one if anything fails."""
        try:
            resolved_people = (
                people if people is not None else self.repository.get_people()
            )
            catalog = FoodCatalog.from_items(self.repository.get_food_catalog())
            dates = build_date_range(report_type, anchor, self.today())
            labels = [day.isoformat() for day in dates]
            days = [
                self._day_totals(label, person_selector, resolved_people, catalog)
                for label in labels
            ]
            report = Report(
                labels=tuple(labels),
                datasets={
                    metric: MetricSeries(
                        planned=tuple(getattr(planned, metric) for _, planned in days),
                        consumed=tuple(
                            getattr(consumed, metric) for consumed, _ in days
                        ),
                    )
                    for metric in REPORT_METRICS
                },
            )
        except (TrackerError, TypeError, ValueError, KeyError, AttributeError) as exc:
            self.errors.report(
                ErrorCode.NUTRITION_CALC_ERROR,
                "Error generating nutrition report",
                str(exc),
            )
            return Report()
        _logger.debug(
            "Generated %s report for %s with %s dates",
            report_type,
            person_selector,
            len(report.labels),
        )
        return report

    def _day_totals(
        self,
        day: str,
        person_selector: str,
        people: list[Person],
        catalog: FoodCatalog,
    ) -> tuple[NutritionTotals, NutritionTotals]:
        if person_selector == ALL_PEOPLE:
            person_ids = [person.id for person in people]
        else:
            person_ids = [person_selector]
        consumed = []
        planned = []
        for person_id in person_ids:
            consumed.append(
                aggregate_day(
                    self.repository.get_day_meal_set(
                        day, person_id, MealKind.CONSUMED
                    ),
                    catalog,
                )
            )
            planned.append(
                aggregate_day(
                    self.repository.get_day_meal_set(day, person_id, MealKind.PLANNED),
                    catalog,
                )
            )
        if len(person_ids) == 1:
            return consumed[0], planned[0]
        return sum_totals(consumed), sum_totals(planned)
