"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diet_planner.adapters.optimization_client import HttpxOptimizationClient
from diet_planner.adapters.supabase_product_repository import (
    SupabaseProductRepository,
)
from diet_planner.config import Settings
from diet_planner.services.day_plans import DayPlanTargetService
from diet_planner.services.meals import MealNutritionService
from diet_planner.services.optimization import OptimizationService
from diet_planner.services.products import ProductService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    product_service: ProductService
    meal_nutrition_service: MealNutritionService
    day_plan_target_service: DayPlanTargetService
    optimization_service: OptimizationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    product_service = ProductService(
        repository=SupabaseProductRepository(supabase_client),
        ttl_seconds=resolved_settings.product_cache_ttl_seconds,
    )
    optimization_client = HttpxOptimizationClient.create(
        url=resolved_settings.optimization_url,
        timeout_seconds=resolved_settings.optimization_timeout_seconds,
    )
    optimization_service = OptimizationService(
        client=optimization_client,
        product_service=product_service,
        retry_attempts=resolved_settings.optimization_retry_attempts,
        retry_base_delay_seconds=(
            resolved_settings.optimization_retry_base_delay_seconds
        ),
    )

    async def close_resources() -> None:
        await optimization_client.close()

    return AppContainer(
        settings=resolved_settings,
        product_service=product_service,
        meal_nutrition_service=MealNutritionService(product_service),
        day_plan_target_service=DayPlanTargetService(),
        optimization_service=optimization_service,
        close_resources=close_resources,
    )
