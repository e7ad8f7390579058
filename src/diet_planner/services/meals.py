"""Meal and day nutrition totals."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from diet_planner.domain.aggregation import aggregate, sum_totals
from diet_planner.domain.ingredients import IngredientLine, StandardLine
from diet_planner.domain.nutrition import MacroTotals
from diet_planner.services.products import ProductService


@dataclass(frozen=True)
class DayNutrition:
    """Totals per meal and for the whole day."""

    meals: dict[str, MacroTotals]
    total: MacroTotals


@dataclass
class MealNutritionService:
    """Aggregates meal lines against the product catalog."""

    product_service: ProductService

    def meal_totals(self, lines: Sequence[IngredientLine]) -> MacroTotals:
        """Return totals for one meal."""
        products = self.product_service.get_many(
            line.product_id for line in lines if isinstance(line, StandardLine)
        )
        return aggregate(lines, products)

    def day_totals(self, meals: Mapping[str, Sequence[IngredientLine]]) -> DayNutrition:
        """Return per-meal totals and their sum for a day-plan."""
        per_meal = {name: self.meal_totals(lines) for name, lines in meals.items()}
        return DayNutrition(meals=per_meal, total=sum_totals(per_meal.values()))
