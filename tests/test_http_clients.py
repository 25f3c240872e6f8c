"""Tests for HTTP-based adapters."""

import json

import httpx
import pytest

from meal_budget.adapters.fdc_client import HttpxFdcClient


def test_fdc_client_search_and_get() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/foods/search"):
            return httpx.Response(200, json={"foods": []})
        return httpx.Response(200, json={"fdcId": 1, "foodNutrients": []})

    client = HttpxFdcClient(
        api_key="key",
        base_url="https://api.test",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )

    search = client.search_foods("rice", page_size=5)
    food = client.get_food(1)

    assert search == {"foods": []}
    assert food["fdcId"] == 1
    search_body = json.loads(seen[0].content.decode())
    assert search_body["query"] == "rice"
    assert search_body["pageSize"] == 5
    assert seen[0].url.params["api_key"] == "key"
    assert seen[1].url.path == "/food/1"
    assert seen[1].url.params["format"] == "full"


def test_fdc_client_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "not found"})

    client = HttpxFdcClient(
        api_key="key",
        base_url="https://api.test",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(httpx.HTTPStatusError):
        client.get_food(999)


def test_fdc_client_create_strips_trailing_slash() -> None:
    client = HttpxFdcClient.create(api_key="key", base_url="https://api.test/fdc/v1/")
    try:
        assert client.base_url == "https://api.test/fdc/v1"
    finally:
        client.close()
