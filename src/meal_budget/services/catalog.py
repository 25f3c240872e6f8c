"""Food catalog lookups and management."""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from uuid import uuid4

from meal_budget.adapters.fdc_client import FdcClient
from meal_budget.domain.catalog import FdcFoodSummary, FoodItem
from meal_budget.domain.errors import LookupMiss
from meal_budget.numbers import non_negative
from meal_budget.services.household import HouseholdRepository

# FoodData Central nutrient ids, amounts per 100 g.
_FDC_NUTRIENT_IDS = {
    "calories": (1008, 2047, 2048),
    "protein": (1003,),
    "carbs": (1005,),
    "fat": (1004,),
    "fiber": (1079,),
    "sodium": (1093,),
    "calcium": (1087,),
    "iron": (1089,),
    "vitamin_a": (1106,),
    "vitamin_c": (1162,),
}
_GRAM_UNITS = {"g", "grm", "ml", "mlt"}

_logger = logging.getLogger(__name__)


def normalize_food_id(value: object) -> str:
    """Return the comparable form of a food id.

    Ids are stored as either strings or numbers, so ``1``, ``1.0`` and
    ``"1"`` all normalise to ``"1"``.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


@dataclass(frozen=True)
class FoodCatalog:
    """Read-only food lookup keyed by normalised id."""

    foods: tuple[FoodItem, ...] = ()
    _index: dict[str, FoodItem] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        index: dict[str, FoodItem] = {}
        for food in self.foods:
            index.setdefault(normalize_food_id(food.id), food)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_items(cls, foods: Iterable[FoodItem]) -> "FoodCatalog":
        """Build a catalog from any iterable of foods."""
        return cls(foods=tuple(foods))

    def find(self, food_id: object) -> FoodItem | None:
        """Return the food for an id, or None when it is unknown."""
        if food_id is None:
            return None
        return self._index.get(normalize_food_id(food_id))

    def require(self, food_id: object) -> FoodItem:
        """Return the food for an id.

        Raises:
            LookupMiss: if the id is not in the catalog.
        """
        food = self.find(food_id)
        if food is None:
            raise LookupMiss(f"Unknown food id: {food_id}")
        return food

    def __contains__(self, food_id: object) -> bool:
        return self.find(food_id) is not None

    def __iter__(self) -> Iterator[FoodItem]:
        return iter(self.foods)

    def __len__(self) -> int:
        return len(self.foods)


@dataclass
class CatalogService:
    """Service for reading and extending the food catalog."""

    repository: HouseholdRepository
    fdc_client: FdcClient | None = None

    def catalog(self) -> FoodCatalog:
        """Return a snapshot of the stored catalog."""
        return FoodCatalog.from_items(self.repository.get_food_catalog())

    def list_foods(self) -> list[FoodItem]:
        """Return all foods in storage order."""
        return self.repository.get_food_catalog()

    def find_food(self, food_id: object) -> FoodItem | None:
        """Return a food by id using tolerant id matching."""
        return self.catalog().find(food_id)

    def add_food(self, food: FoodItem) -> FoodItem:
        """Store a food, assigning a fresh id when it collides or is blank."""
        foods = self.repository.get_food_catalog()
        catalog = FoodCatalog.from_items(foods)
        if not normalize_food_id(food.id) or food.id in catalog:
            food = replace(food, id=uuid4().hex)
        self.repository.save_food_catalog([*foods, food])
        _logger.info("Added food %s (%s)", food.id, food.name)
        return food

    def search_fdc(self, query: str, limit: int = 10) -> list[FdcFoodSummary]:
        """Search FoodData Central for foods to import.

        Raises:
            RuntimeError: if no FoodData Central client is configured.
        """
        if self.fdc_client is None:
            raise RuntimeError("FoodData Central import is not configured")
        payload = self.fdc_client.search_foods(query, page_size=limit)
        foods = [
            FdcFoodSummary(
                fdc_id=int(food["fdcId"]),
                description=str(food.get("description") or ""),
                brand_owner=food.get("brandOwner"),
                data_type=food.get("dataType"),
            )
            for food in payload.get("foods", [])
            if food.get("fdcId") is not None
        ]
        _logger.info("FDC search: query=%s results=%s", query, len(foods))
        return foods

    def import_from_fdc(
        self,
        fdc_id: int,
        cost_per_serving: float = 0.0,
        category: str | None = None,
    ) -> FoodItem:
        """Fetch a food from FoodData Central and add it to the catalog.

        Raises:
            RuntimeError: if no FoodData Central client is configured.
        """
        if self.fdc_client is None:
            raise RuntimeError("FoodData Central import is not configured")
        payload = self.fdc_client.get_food(fdc_id)
        food = food_from_fdc(payload, cost_per_serving=cost_per_serving)
        if category:
            food = replace(food, category=category)
        return self.add_food(food)


def food_from_fdc(
    payload: dict[str, object], cost_per_serving: float = 0.0
) -> FoodItem:
    """Map a FoodData Central food payload to a per-serving FoodItem."""
    per_100g = _extract_nutrients(payload.get("foodNutrients") or [])
    serving_size = non_negative(payload.get("servingSize"))
    unit = str(payload.get("servingSizeUnit") or "").lower()
    if serving_size > 0 and unit in _GRAM_UNITS:
        factor = serving_size / 100.0
        serving_label = f"{serving_size:g} {unit}"
    else:
        factor = 1.0
        serving_label = "100 g"
    scaled = {name: round(amount * factor, 3) for name, amount in per_100g.items()}
    return FoodItem(
        id=f"fdc-{payload.get('fdcId')}",
        name=str(payload.get("description") or "Unnamed food"),
        serving_size=serving_label,
        cost_per_serving=non_negative(cost_per_serving),
        **scaled,
    )


def _extract_nutrients(food_nutrients: list[dict[str, object]]) -> dict[str, float]:
    values = dict.fromkeys(_FDC_NUTRIENT_IDS, 0.0)
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount", nutrient.get("value"))
        if amount is None:
            continue
        for name, ids in _FDC_NUTRIENT_IDS.items():
            if nutrient_id in ids and not values[name]:
                values[name] = non_negative(amount)
    return values
