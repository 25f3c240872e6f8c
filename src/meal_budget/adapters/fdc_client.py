"""USDA FoodData Central API client used to import catalog foods."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class FdcClient(Protocol):
    """Interface for FoodData Central lookups."""

    def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search foods by query and return raw API data."""

    def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """Blocking HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.Client
    timeout_seconds: float = 15.0

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        """Create a client that owns its HTTP connection pool."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.Client(),
        )

    def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search foods by query, restricted to the foods we can map."""
        response = self.http_client.post(
            f"{self.base_url}/foods/search",
            params={"api_key": self.api_key},
            json={
                "query": query,
                "pageSize": page_size,
                "dataType": ["Foundation", "SR Legacy", "Branded"],
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a single food with its full nutrient list."""
        response = self.http_client.get(
            f"{self.base_url}/food/{fdc_id}",
            params={"api_key": self.api_key, "format": "full"},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self.http_client.close()
