"""Tests for the food catalog service."""

import pytest

from meal_budget.domain.errors import LookupMiss
from meal_budget.services.catalog import (
    CatalogService,
    FoodCatalog,
    food_from_fdc,
    normalize_food_id,
)
from tests.conftest import FakeFdcClient, make_food


def test_normalize_food_id() -> None:
    assert normalize_food_id(1) == "1"
    assert normalize_food_id(1.0) == "1"
    assert normalize_food_id(" 1 ") == "1"
    assert normalize_food_id(1.5) == "1.5"


def test_food_catalog_lookup_is_tolerant() -> None:
    catalog = FoodCatalog.from_items([make_food(7), make_food("abc")])

    assert catalog.find("7") is not None
    assert catalog.find(7.0) is not None
    assert catalog.find(None) is None
    assert "abc" in catalog
    assert len(catalog) == 2
    with pytest.raises(LookupMiss):
        catalog.require("missing")


def test_food_catalog_keeps_first_duplicate() -> None:
    catalog = FoodCatalog.from_items(
        [make_food(1, name="First"), make_food("1", name="Second")]
    )

    assert catalog.require(1).name == "First"


def test_list_foods_returns_seeded_catalog(repository) -> None:
    service = CatalogService(repository)

    names = [food.name for food in service.list_foods()]

    assert names == ["Oatmeal", "Chicken Breast", "Broccoli"]
    assert service.find_food("2").cost_per_serving == 1.2


def test_add_food_assigns_id_on_collision(repository) -> None:
    service = CatalogService(repository)

    added = service.add_food(make_food(1, name="Rice"))
    blank = service.add_food(make_food("", name="Beans"))

    assert added.id != 1
    assert blank.id
    assert service.find_food(added.id).name == "Rice"
    assert len(service.list_foods()) == 5


def test_add_food_keeps_free_id(repository) -> None:
    service = CatalogService(repository)

    added = service.add_food(make_food("rice-1", name="Rice"))

    assert added.id == "rice-1"


def test_food_from_fdc_scales_to_serving() -> None:
    food = food_from_fdc(FakeFdcClient().food_payload, cost_per_serving=1.1)

    assert food.id == "fdc-171077"
    assert food.serving_size == "85 g"
    assert food.calories == pytest.approx(140.25)
    assert food.protein == pytest.approx(26.35)
    assert food.sodium == pytest.approx(62.9)
    assert food.cost_per_serving == 1.1


def test_food_from_fdc_without_serving_uses_100g() -> None:
    payload = {
        "fdcId": 5,
        "description": "Apple",
        "foodNutrients": [{"nutrientId": 2047, "amount": 52}],
    }

    food = food_from_fdc(payload)

    assert food.serving_size == "100 g"
    assert food.calories == 52


def test_import_from_fdc_adds_food(repository) -> None:
    fdc_client = FakeFdcClient()
    service = CatalogService(repository, fdc_client=fdc_client)

    food = service.import_from_fdc(171077, cost_per_serving=0.9, category="protein")

    assert fdc_client.requested == [171077]
    assert food.category == "protein"
    assert service.find_food("fdc-171077") is not None


def test_import_from_fdc_requires_client(repository) -> None:
    with pytest.raises(RuntimeError):
        CatalogService(repository).import_from_fdc(1)
