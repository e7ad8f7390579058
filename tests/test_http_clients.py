"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from diet_planner.adapters.optimization_client import HttpxOptimizationClient


def test_optimization_client_posts_payload_with_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": None})

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxOptimizationClient(
        url="https://example.test/functions/v1/optimize-meal",
        http_client=async_client,
    )

    result = asyncio.run(client.optimize({"meal_name": "Lunch"}, access_token="jwt"))

    assert result == {"success": True, "data": None}
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/functions/v1/optimize-meal"
    assert request.headers["Authorization"] == "Bearer jwt"
    assert json.loads(request.content.decode()) == {"meal_name": "Lunch"}


def test_optimization_client_omits_missing_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert "Authorization" not in request.headers
        return httpx.Response(200, json={"success": True})

    transport = httpx.MockTransport(handler)
    client = HttpxOptimizationClient(
        url="https://example.test/optimize",
        http_client=httpx.AsyncClient(transport=transport),
    )

    assert asyncio.run(client.optimize({})) == {"success": True}


def test_optimization_client_raises_for_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": {"message": "busy"}})

    transport = httpx.MockTransport(handler)
    client = HttpxOptimizationClient(
        url="https://example.test/optimize",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        asyncio.run(client.optimize({}))

    assert excinfo.value.response.status_code == 503


def test_optimization_client_create_and_close() -> None:
    client = HttpxOptimizationClient.create(
        url="https://example.test/optimize", timeout_seconds=5
    )

    assert client.timeout_seconds == 5
    asyncio.run(client.close())
    assert client.http_client.is_closed
