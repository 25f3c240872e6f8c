"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

import httpx
from fastapi import FastAPI, HTTPException, Query, Request, status

from meal_budget.api.admin import router as admin_router
from meal_budget.api.schemas import (
    BudgetPayload,
    ExpensePayload,
    FdcImportPayload,
    FoodPayload,
    MealEntryPayload,
    MealEntryUpdatePayload,
    PersonPayload,
)
from meal_budget.app_logging import configure_logging
from meal_budget.config import parse_month
from meal_budget.containers import AppContainer
from meal_budget.domain.catalog import MEAL_SLOTS, FoodItem, MealKind
from meal_budget.domain.errors import LookupMiss
from meal_budget.domain.people import Person
from meal_budget.domain.reports import ALL_PEOPLE, ReportType
from meal_budget.services.catalog import normalize_food_id
from meal_budget.services.reports import week_start


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    def _container(request: Request) -> AppContainer:
        return request.app.state.container

    @app.get("/health")
    def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods")
    def list_foods(request: Request) -> dict[str, object]:
        """Return the food catalog."""
        foods = _container(request).catalog_service.list_foods()
        return {"foods": [asdict(food) for food in foods]}

    @app.post("/foods", status_code=status.HTTP_201_CREATED)
    def add_food(payload: FoodPayload, request: Request) -> dict[str, object]:
        """Add a food to the catalog."""
        food = _container(request).catalog_service.add_food(
            FoodItem(id="", **payload.model_dump())
        )
        return asdict(food)

    @app.get("/foods/search")
    def search_foods(
        request: Request, q: str = Query(min_length=1), limit: int = 10
    ) -> dict[str, object]:
        """Search FoodData Central for importable foods."""
        service = _container(request).catalog_service
        try:
            foods = service.search_fdc(q, limit=limit)
        except RuntimeError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("FoodData Central search failed for %s", q)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="FoodData Central request failed",
            ) from exc
        return {"foods": [asdict(food) for food in foods]}

    @app.post("/foods/import/{fdc_id}", status_code=status.HTTP_201_CREATED)
    def import_food(
        fdc_id: int, payload: FdcImportPayload, request: Request
    ) -> dict[str, object]:
        """Import a FoodData Central food into the catalog."""
        service = _container(request).catalog_service
        try:
            food = service.import_from_fdc(
                fdc_id,
                cost_per_serving=payload.cost_per_serving,
                category=payload.category,
            )
        except RuntimeError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("FoodData Central import failed for %s", fdc_id)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="FoodData Central request failed",
            ) from exc
        return asdict(food)

    @app.get("/people")
    def list_people(request: Request) -> dict[str, object]:
        """Return household members."""
        people = _container(request).people_service.list_people()
        return {"people": [asdict(person) for person in people]}

    @app.post("/people", status_code=status.HTTP_201_CREATED)
    def add_person(payload: PersonPayload, request: Request) -> dict[str, object]:
        """Add a household member."""
        try:
            person = _container(request).people_service.add_person(
                Person(id="", **payload.model_dump())
            )
        except ValueError as exc:
            raise _unprocessable(exc) from exc
        return asdict(person)

    @app.get("/people/{person_id}/energy")
    def person_energy(person_id: str, request: Request) -> dict[str, object]:
        """Return BMR and daily calorie needs for a member."""
        service = _container(request).people_service
        person = service.get_person(person_id)
        if person is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return asdict(service.energy(person))

    @app.get("/meals/{day}/{person_id}")
    def day_meals(
        day: date,
        person_id: str,
        request: Request,
        kind: MealKind = MealKind.CONSUMED,
    ) -> dict[str, object]:
        """Return a day's entries with totals and target percentages."""
        service = _container(request).meal_log_service
        meals = service.get_meals(day, person_id, kind)
        summary = service.day_summary(day, person_id, kind)
        return {
            "meals": {
                slot: [asdict(entry) for entry in meals.slot(slot)]
                for slot in MEAL_SLOTS
            },
            "summary": asdict(summary),
        }

    @app.post("/meals/{day}/{person_id}", status_code=status.HTTP_201_CREATED)
    def add_meal_entry(
        day: date, person_id: str, payload: MealEntryPayload, request: Request
    ) -> dict[str, object]:
        """Add an entry to a meal slot."""
        try:
            entry = _container(request).meal_log_service.add_entry(
                day,
                person_id,
                payload.slot,
                normalize_food_id(payload.food_id),
                servings=payload.servings,
                notes=payload.notes,
                kind=payload.kind,
            )
        except (ValueError, LookupMiss) as exc:
            raise _unprocessable(exc) from exc
        return asdict(entry)

    @app.put("/meals/{day}/{person_id}/{slot}/{index}")
    def update_meal_entry(  # noqa: PLR0913
        day: date,
        person_id: str,
        slot: str,
        index: int,
        payload: MealEntryUpdatePayload,
        request: Request,
    ) -> dict[str, object]:
        """Replace an existing entry."""
        try:
            entry = _container(request).meal_log_service.update_entry(
                day,
                person_id,
                slot,
                index,
                normalize_food_id(payload.food_id),
                servings=payload.servings,
                notes=payload.notes,
                kind=payload.kind,
            )
        except (ValueError, LookupMiss) as exc:
            raise _unprocessable(exc) from exc
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return asdict(entry)

    @app.delete("/meals/{day}/{person_id}/{slot}/{index}")
    def delete_meal_entry(  # noqa: PLR0913
        day: date,
        person_id: str,
        slot: str,
        index: int,
        request: Request,
        kind: MealKind = MealKind.CONSUMED,
    ) -> dict[str, str]:
        """Remove an entry."""
        try:
            deleted = _container(request).meal_log_service.delete_entry(
                day, person_id, slot, index, kind
            )
        except ValueError as exc:
            raise _unprocessable(exc) from exc
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "ok"}

    @app.post("/meals/{day}/{person_id}/{slot}/{index}/consume")
    def consume_planned_entry(
        day: date, person_id: str, slot: str, index: int, request: Request
    ) -> dict[str, object]:
        """Mark a planned entry as consumed."""
        try:
            entry = _container(request).meal_log_service.consume_planned(
                day, person_id, slot, index
            )
        except ValueError as exc:
            raise _unprocessable(exc) from exc
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return asdict(entry)

    @app.get("/reports/{report_type}")
    def nutrition_report(
        report_type: ReportType,
        request: Request,
        person: str = ALL_PEOPLE,
        anchor: date | None = None,
    ) -> dict[str, object]:
        """Return planned vs. consumed series for a period."""
        state_container = _container(request)
        if anchor is None:
            anchor = state_container.today()
            if report_type is ReportType.WEEKLY:
                anchor = week_start(anchor)
        report = state_container.report_service.generate(report_type, person, anchor)
        return report.to_dict()

    @app.get("/budget/{month}")
    def budget_summary(month: str, request: Request) -> dict[str, object]:
        """Return spend, expenses and projections for a ``YYYY-MM`` month."""
        try:
            parse_month(month)
        except ValueError as exc:
            raise _unprocessable(exc) from exc
        service = _container(request).budget_service
        return {
            "summary": asdict(service.summary(month)),
            "expenses": [
                asdict(expense) for expense in service.month_expenses(month)
            ],
            "member_costs": [asdict(cost) for cost in service.member_costs(month)],
        }

    @app.put("/budget")
    def update_budget(payload: BudgetPayload, request: Request) -> dict[str, object]:
        """Set the monthly budget."""
        budget = _container(request).budget_service.update_budget(payload.monthly)
        return asdict(budget)

    @app.post("/expenses", status_code=status.HTTP_201_CREATED)
    def add_expense(payload: ExpensePayload, request: Request) -> dict[str, object]:
        """Record a manual expense."""
        try:
            expense = _container(request).budget_service.add_expense(
                payload.date, payload.description, payload.amount
            )
        except ValueError as exc:
            raise _unprocessable(exc) from exc
        return asdict(expense)

    @app.delete("/expenses/{expense_id}")
    def delete_expense(expense_id: str, request: Request) -> dict[str, str]:
        """Delete a manual expense."""
        if not _container(request).budget_service.delete_expense(expense_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "ok"}

    return app


def _unprocessable(exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
    )
