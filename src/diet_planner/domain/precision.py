"""Fixed-precision arithmetic for nutrition values.

Every calculation that scales quantities or sums macros goes through
``decimal.Decimal`` with half-up rounding, so that e.g. 150 g scaled by a
ratio stays 150 g instead of drifting to 149.9.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Protocol, TypeVar

_logger = logging.getLogger(__name__)

_NUMBER_PATTERN = re.compile(r"^-?\d*[,.]?\d*$")

Number = int | float | str | Decimal | None


def to_decimal(value: Number) -> Decimal:
    """Convert a loose numeric value to Decimal, defaulting to zero."""
    if value is None or value == "":
        return Decimal(0)
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            _logger.warning("Invalid number value: %s, defaulting to 0", value)
            return Decimal(0)
        return Decimal(repr(value))
    if isinstance(value, str):
        try:
            parsed = Decimal(value.strip().replace(",", ".", 1))
        except InvalidOperation:
            _logger.warning("Invalid number format: %r, defaulting to 0", value)
            return Decimal(0)
        if not parsed.is_finite():
            _logger.warning("Invalid number format: %r, defaulting to 0", value)
            return Decimal(0)
        return parsed
    _logger.warning("Unsupported number type: %s, defaulting to 0", type(value))
    return Decimal(0)


def _quantize(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def round_half_up(value: Number, places: int = 0) -> float:
    """Round half away from zero to ``places`` decimals."""
    return float(_quantize(to_decimal(value), places))


def multiply(a: Number, b: Number, places: int = 1) -> float:
    """Multiply two values and round the product."""
    return float(_quantize(to_decimal(a) * to_decimal(b), places))


def divide(a: Number, b: Number, places: int = 1) -> float:
    """Divide two values and round the quotient; division by zero yields 0."""
    divisor = to_decimal(b)
    if divisor.is_zero():
        _logger.warning("Division by zero: %s / %s, returning 0", a, b)
        return 0.0
    return float(_quantize(to_decimal(a) / divisor, places))


def add(a: Number, b: Number, places: int = 1) -> float:
    """Add two values and round the sum."""
    return float(_quantize(to_decimal(a) + to_decimal(b), places))


def parse_number(value: Number, default: float = 0.0) -> float:
    """Parse user input with a comma or dot separator, falling back to default."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float | Decimal):
        number = float(value)
        if number != number or number in (float("inf"), float("-inf")):
            return default
        return number
    if not isinstance(value, str):
        return default

    trimmed = value.strip()
    if not trimmed:
        return default
    if trimmed.count(",") > 1 or trimmed.count(".") > 1:
        _logger.warning("Invalid number format (multiple separators): %r", value)
        return default
    if not _NUMBER_PATTERN.match(trimmed):
        _logger.warning("Invalid number format (non-numeric chars): %r", value)
        return default
    try:
        return float(trimmed.replace(",", "."))
    except ValueError:
        _logger.warning("Failed to parse number: %r", value)
        return default


@dataclass(frozen=True)
class QuantityCheck:
    """Result of validating a quantity input."""

    is_valid: bool
    value: float
    error: str | None = None


def validate_quantity(
    value: Number, minimum: float = 0.1, maximum: float = 9999
) -> QuantityCheck:
    """Validate a quantity, clamping it into ``[minimum, maximum]``."""
    parsed = parse_number(value)
    if parsed < minimum:
        return QuantityCheck(False, minimum, f"Value must be at least {minimum}")
    if parsed > maximum:
        return QuantityCheck(False, maximum, f"Value must not exceed {maximum}")
    return QuantityCheck(True, parsed)


def format_number(value: Number, places: int = 1) -> str:
    """Format a number for display with a comma decimal separator."""
    rounded = _quantize(to_decimal(parse_number(value)), places)
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return f"{rounded.normalize():f}".replace(".", ",")


class _HasQuantity(Protocol):
    quantity: float


QuantityT = TypeVar("QuantityT", bound=_HasQuantity)


def scale_quantities(
    items: Sequence[QuantityT], target: Number, current: Number
) -> list[QuantityT]:
    """Scale item quantities by ``target / current``, rounded to 1 decimal.

    Items must be dataclasses. A zero target or current leaves the items
    untouched.
    """
    target_value = to_decimal(target)
    current_value = to_decimal(current)
    if target_value.is_zero() or current_value.is_zero():
        _logger.warning(
            "Invalid scaling: target=%s current=%s", target_value, current_value
        )
        return list(items)
    ratio = target_value / current_value
    return [
        replace(  # type: ignore[type-var]
            item,
            quantity=float(_quantize(to_decimal(item.quantity) * ratio, 1)),
        )
        for item in items
    ]
