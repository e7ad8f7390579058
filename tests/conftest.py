"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from diet_planner.adapters.optimization_client import OptimizationClient
from diet_planner.config import Settings
from diet_planner.containers import AppContainer
from diet_planner.domain.nutrition import NutrientProfile, Product
from diet_planner.services.day_plans import DayPlanTargetService
from diet_planner.services.meals import MealNutritionService
from diet_planner.services.optimization import OptimizationService
from diet_planner.services.products import ProductRepository, ProductService

RICE = Product(
    id="rice",
    name="White rice",
    unit="gramy",
    unit_weight=100.0,
    profile=NutrientProfile(
        calories=130, protein_g=2.7, fat_g=0.3, carbs_g=28, fiber_g=0.4
    ),
)
MILK = Product(
    id="milk",
    name="Milk 2%",
    unit="ml",
    unit_weight=103.0,
    profile=NutrientProfile(calories=64, protein_g=3.3, fat_g=3.6, carbs_g=4.8),
)
EGG = Product(
    id="egg",
    name="Egg",
    unit="sztuka",
    unit_weight=50.0,
    profile=NutrientProfile(calories=143, protein_g=12.6, fat_g=9.5, carbs_g=0.7),
)
OATS = Product(
    id="oats",
    name="Rolled oats",
    unit="gramy",
    unit_weight=100.0,
    profile=NutrientProfile(
        calories=379, protein_g=13.2, fat_g=6.5, carbs_g=67.7, fiber_g=10.1
    ),
)


@dataclass
class InMemoryProductRepository(ProductRepository):
    """In-memory product catalog for tests."""

    products: dict[str, Product] = field(default_factory=dict)
    calls: list[list[str]] = field(default_factory=list)

    def get_products(self, product_ids: list[str]) -> list[Product]:
        self.calls.append(list(product_ids))
        return [self.products[pid] for pid in product_ids if pid in self.products]


@dataclass
class FakeOptimizationClient(OptimizationClient):
    """Fake optimization client replaying queued responses or errors."""

    responses: list[object] = field(default_factory=list)
    payloads: list[dict[str, object]] = field(default_factory=list)
    tokens: list[str | None] = field(default_factory=list)

    async def optimize(
        self, payload: dict[str, object], access_token: str | None = None
    ) -> dict[str, object]:
        self.payloads.append(payload)
        self.tokens.append(access_token)
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result  # type: ignore[return-value]


@dataclass
class RecordingSleep:
    """Records backoff delays instead of sleeping."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def success_payload(
    ingredients: list[dict[str, object]],
    comment: str = "Looks balanced",
    achievability: dict[str, object] | None = None,
) -> dict[str, object]:
    return {
        "success": True,
        "data": {
            "optimized_ingredients": ingredients,
            "ai_comment": comment,
            "achievability": achievability,
        },
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        optimization_url="https://example.supabase.co/functions/v1/optimize-meal",
    )


@pytest.fixture
def product_repository() -> InMemoryProductRepository:
    return InMemoryProductRepository(
        products={product.id: product for product in (RICE, MILK, EGG, OATS)}
    )


@pytest.fixture
def product_service(product_repository: InMemoryProductRepository) -> ProductService:
    return ProductService(product_repository)


@pytest.fixture
def optimization_client() -> FakeOptimizationClient:
    return FakeOptimizationClient()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def optimization_service(
    optimization_client: FakeOptimizationClient,
    product_service: ProductService,
    sleep: RecordingSleep,
) -> OptimizationService:
    return OptimizationService(
        client=optimization_client,
        product_service=product_service,
        sleep=sleep,
    )


@pytest.fixture
def container(
    settings: Settings,
    product_service: ProductService,
    optimization_service: OptimizationService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        product_service=product_service,
        meal_nutrition_service=MealNutritionService(product_service),
        day_plan_target_service=DayPlanTargetService(),
        optimization_service=optimization_service,
        close_resources=close_resources,
    )
