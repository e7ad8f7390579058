"""Macro aggregation over ingredient lines."""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from diet_planner.domain.ingredients import IngredientLine, PrecomputedLine
from diet_planner.domain.nutrition import ZERO_TOTALS, MacroTotals, Product
from diet_planner.domain.precision import multiply, round_half_up, to_decimal
from diet_planner.domain.units import grams_for_decimal

_logger = logging.getLogger(__name__)

_FIELDS = ("calories", "protein", "fat", "carbs", "fiber")


def line_macros(line: IngredientLine, product: Product | None) -> MacroTotals:
    """Return the macros contributed by a single line."""
    if isinstance(line, PrecomputedLine):
        return line.macros
    if product is None:
        _logger.warning(
            "Product %s not found for line %s, skipping", line.product_id, line.id
        )
        return ZERO_TOTALS
    unit_weight = (
        line.unit_weight if line.unit_weight is not None else product.unit_weight
    )
    grams = grams_for_decimal(line.quantity, line.unit, unit_weight)
    multiplier = grams / 100
    profile = product.profile
    return MacroTotals(
        calories=multiply(profile.calories, multiplier),
        protein=multiply(profile.protein_g, multiplier),
        fat=multiply(profile.fat_g, multiplier),
        carbs=multiply(profile.carbs_g, multiplier),
        fiber=multiply(profile.fiber_g, multiplier),
    )


def sum_totals(totals: Iterable[MacroTotals]) -> MacroTotals:
    """Sum macro totals with decimal addition."""
    sums = dict.fromkeys(_FIELDS, Decimal(0))
    for item in totals:
        for field in _FIELDS:
            sums[field] += to_decimal(getattr(item, field))
    return MacroTotals(**{field: round_half_up(sums[field], 1) for field in _FIELDS})


def aggregate(
    lines: Iterable[IngredientLine], products: Mapping[str, Product]
) -> MacroTotals:
    """Aggregate macros for a set of lines using the given product catalog."""
    return sum_totals(
        line_macros(line, products.get(line.product_id)) for line in lines
    )
