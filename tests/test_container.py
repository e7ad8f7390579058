"""Tests for container wiring."""

import asyncio

from diet_planner.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.optimization_service.retry_attempts == 2
    assert container.product_service.ttl_seconds == 3600
    assert container.meal_nutrition_service.product_service is (
        container.product_service
    )
    asyncio.run(container.close_resources())
