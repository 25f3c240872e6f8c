"""ASGI entrypoint for the meal budget API."""

from meal_budget.api.app import create_app
from meal_budget.containers import build_container

app = create_app(build_container())
