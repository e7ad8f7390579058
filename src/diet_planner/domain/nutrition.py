"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutrientProfile:
    """Nutrient values per 100 g of a product."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float
    fiber_g: float = 0.0


@dataclass(frozen=True)
class Product:
    """Catalog product with its default unit and unit weight."""

    id: str
    name: str
    unit: str
    unit_weight: float | None
    profile: NutrientProfile


@dataclass(frozen=True)
class MacroTotals:
    """Absolute macro amounts for a line, meal or day."""

    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0
    fiber: float = 0.0

    def is_meaningful(self) -> bool:
        """Return True when at least one field is nonzero."""
        return any((self.calories, self.protein, self.fat, self.carbs, self.fiber))


ZERO_TOTALS = MacroTotals()
