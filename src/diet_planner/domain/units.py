"""Unit conversion from recipe quantities to grams."""

from decimal import Decimal
from enum import Enum

from diet_planner.domain.precision import Number, to_decimal


class UnitKind(str, Enum):
    """Conversion family of a measurement unit."""

    GRAMS = "grams"
    MILLILITERS = "milliliters"
    PIECE = "piece"


_GRAM_ALIASES = frozenset({"g", "gram", "grams", "gramy", "gramów"})
_MILLILITER_ALIASES = frozenset(
    {"ml", "milliliter", "milliliters", "millilitre", "mililitr", "mililitry"}
)


class MissingUnitWeightError(ValueError):
    """Raised when a non-gram unit has no unit weight to convert with."""

    def __init__(self, unit: str) -> None:
        super().__init__(f"unit_weight is required to convert unit {unit!r} to grams")
        self.unit = unit


def normalize_unit(unit: str | None) -> UnitKind:
    """Map a unit label to its conversion family."""
    label = (unit or "").strip().lower()
    if label in _GRAM_ALIASES:
        return UnitKind.GRAMS
    if label in _MILLILITER_ALIASES:
        return UnitKind.MILLILITERS
    return UnitKind.PIECE


def grams_for(quantity: Number, unit: str | None, unit_weight: Number) -> float:
    """Convert a quantity in ``unit`` to grams.

    For milliliters ``unit_weight`` is grams per 100 ml of the product; for
    every other non-gram unit it is grams per single unit.
    """
    return float(grams_for_decimal(quantity, unit, unit_weight))


def grams_for_decimal(
    quantity: Number, unit: str | None, unit_weight: Number
) -> Decimal:
    """Convert a quantity to grams without leaving Decimal precision."""
    kind = normalize_unit(unit)
    amount = to_decimal(quantity)
    if kind is UnitKind.GRAMS:
        return amount
    if unit_weight is None or unit_weight == "":
        raise MissingUnitWeightError(unit or "")
    weight = to_decimal(unit_weight)
    if kind is UnitKind.MILLILITERS:
        return amount / 100 * weight
    return amount * weight
