"""Tests for admin endpoints."""

from fastapi.testclient import TestClient

from meal_budget.api.app import create_app
from meal_budget.domain.errors import ErrorCode


def test_admin_requires_token(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/admin/errors").status_code == 401
    assert (
        client.get("/admin/errors", headers={"X-Admin-Token": "wrong"}).status_code
        == 401
    )


def test_admin_errors_endpoint(container) -> None:
    client = TestClient(create_app(container))
    container.error_reporter.report(
        ErrorCode.NUTRITION_CALC_ERROR, "Error generating nutrition report", "boom"
    )

    response = client.get("/admin/errors", headers={"X-Admin-Token": "admin-token"})

    assert response.status_code == 200
    error = response.json()["errors"][0]
    assert error["code"] == 5001
    assert error["name"] == "NUTRITION_CALC_ERROR"
    assert error["details"] == "boom"


def test_admin_reset_endpoint(container) -> None:
    client = TestClient(create_app(container))
    client.put("/budget", json={"monthly": 250})
    client.post("/people", json={"name": "Guest"})

    response = client.post("/admin/reset", headers={"X-Admin-Token": "admin-token"})

    assert response.status_code == 200
    assert client.get("/budget/2024-03").json()["summary"]["monthly_budget"] == 0.0
    assert len(client.get("/people").json()["people"]) == 3
