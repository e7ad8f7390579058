"""Macro targets kept consistent across percentages, grams and calories.

Grams are the source of truth. Percentages are derived from grams whenever
calories or grams change; a percentage edit derives grams once and both
fields are stored together. Every transition returns a new MacroTarget.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum

from diet_planner.domain.precision import Number, divide, round_half_up, to_decimal

_logger = logging.getLogger(__name__)


class Macro(str, Enum):
    """Caloric macronutrient."""

    PROTEIN = "protein"
    FAT = "fat"
    CARBS = "carbs"


KCAL_PER_GRAM = {
    Macro.PROTEIN: 4,
    Macro.FAT: 9,
    Macro.CARBS: 4,
}


@dataclass(frozen=True)
class MacroTarget:
    """Calorie and macro targets of a single day-plan."""

    calories: float = 0.0
    protein_pct: float = 0.0
    protein_g: float = 0.0
    fat_pct: float = 0.0
    fat_g: float = 0.0
    carbs_pct: float = 0.0
    carbs_g: float = 0.0
    fiber_g: float = 0.0

    def grams(self, macro: Macro) -> float:
        """Return the gram target of a macro."""
        return getattr(self, f"{macro.value}_g")

    def percentage(self, macro: Macro) -> float:
        """Return the percentage target of a macro."""
        return getattr(self, f"{macro.value}_pct")


@dataclass(frozen=True)
class MacroTargetChange:
    """Committed edit of a day-plan's targets."""

    day_plan_id: str
    before: MacroTarget
    after: MacroTarget

    @property
    def changed(self) -> bool:
        return self.before != self.after


def _non_negative(value: Number, label: str) -> Decimal:
    number = to_decimal(value)
    if number < 0:
        _logger.warning("Negative %s %s rejected, using 0", label, number)
        return Decimal(0)
    return number


def percentage_from_grams(grams: Number, calories: Number, macro: Macro) -> float:
    """Share of calories supplied by ``grams`` of a macro, to 1 decimal."""
    calorie_value = to_decimal(calories)
    gram_value = to_decimal(grams)
    if calorie_value <= 0 or gram_value <= 0:
        return 0.0
    return divide(gram_value * KCAL_PER_GRAM[macro] * 100, calorie_value, 1)


def grams_from_percentage(percentage: Number, calories: Number, macro: Macro) -> float:
    """Whole grams of a macro supplying ``percentage`` of calories."""
    calorie_value = to_decimal(calories)
    percentage_value = to_decimal(percentage)
    if calorie_value <= 0 or percentage_value <= 0:
        return 0.0
    return divide(percentage_value * calorie_value / 100, KCAL_PER_GRAM[macro], 0)


def set_calories(target: MacroTarget, calories: Number) -> MacroTarget:
    """Change the calorie target and re-derive percentages from stored grams."""
    calorie_value = _non_negative(calories, "calories")
    updates: dict[str, float] = {"calories": float(calorie_value)}
    for macro in Macro:
        updates[f"{macro.value}_pct"] = percentage_from_grams(
            target.grams(macro), calorie_value, macro
        )
    return replace(target, **updates)


def set_macro_percentage(
    target: MacroTarget, macro: Macro, percentage: Number
) -> MacroTarget:
    """Set a macro by percentage, deriving and storing its grams."""
    if target.calories <= 0:
        _logger.warning(
            "Cannot derive %s grams from a percentage without calories", macro.value
        )
        return replace(
            target,
            **{
                f"{macro.value}_pct": percentage_from_grams(
                    target.grams(macro), target.calories, macro
                )
            },
        )
    percentage_value = round_half_up(_non_negative(percentage, "percentage"), 1)
    grams = grams_from_percentage(percentage_value, target.calories, macro)
    return replace(
        target,
        **{f"{macro.value}_pct": percentage_value, f"{macro.value}_g": grams},
    )


def set_macro_grams(target: MacroTarget, macro: Macro, grams: Number) -> MacroTarget:
    """Set a macro by grams, deriving and storing its percentage."""
    gram_value = round_half_up(_non_negative(grams, "grams"))
    return replace(
        target,
        **{
            f"{macro.value}_g": gram_value,
            f"{macro.value}_pct": percentage_from_grams(
                gram_value, target.calories, macro
            ),
        },
    )


def set_fiber_grams(target: MacroTarget, grams: Number) -> MacroTarget:
    """Set the fiber target; fiber has no calorie share."""
    return replace(target, fiber_g=round_half_up(_non_negative(grams, "grams")))


def seed_from_calories(calories: Number) -> MacroTarget:
    """Return a zeroed target with only the calorie goal set."""
    return set_calories(MacroTarget(), calories)
