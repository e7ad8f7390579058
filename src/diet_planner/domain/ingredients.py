"""Ingredient lines of a meal."""

from dataclasses import dataclass
from uuid import uuid4

from diet_planner.domain.nutrition import MacroTotals


@dataclass(frozen=True)
class StandardLine:
    """Ingredient whose macros are derived from its product profile."""

    id: str
    product_id: str
    quantity: float
    unit: str
    unit_weight: float | None = None
    name: str | None = None


@dataclass(frozen=True)
class PrecomputedLine:
    """Ingredient carrying authoritative macros computed elsewhere."""

    id: str
    product_id: str
    quantity: float
    unit: str
    macros: MacroTotals
    unit_weight: float | None = None
    name: str | None = None


IngredientLine = StandardLine | PrecomputedLine


def new_line_id() -> str:
    """Return a fresh line identity."""
    return str(uuid4())


def make_line(  # noqa: PLR0913
    product_id: str,
    quantity: float,
    unit: str,
    unit_weight: float | None = None,
    *,
    name: str | None = None,
    macros: MacroTotals | None = None,
    line_id: str | None = None,
) -> IngredientLine:
    """Build a line, keeping precomputed macros only when they are meaningful."""
    resolved_id = line_id or new_line_id()
    if macros is not None and macros.is_meaningful():
        return PrecomputedLine(
            id=resolved_id,
            product_id=product_id,
            quantity=quantity,
            unit=unit,
            macros=macros,
            unit_weight=unit_weight,
            name=name,
        )
    return StandardLine(
        id=resolved_id,
        product_id=product_id,
        quantity=quantity,
        unit=unit,
        unit_weight=unit_weight,
        name=name,
    )
