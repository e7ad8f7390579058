"""Calorie deficit/surplus suggestions for macro targets."""

from dataclasses import dataclass
from decimal import Decimal

from diet_planner.domain.precision import Number, divide, round_half_up, to_decimal
from diet_planner.domain.targets import (
    KCAL_PER_GRAM,
    Macro,
    MacroTarget,
    set_macro_grams,
)


@dataclass(frozen=True)
class MacroSuggestion:
    """Grams of one macro that close the calorie gap on their own."""

    macro: Macro
    grams: float
    missing_calories: float

    @property
    def is_deficit(self) -> bool:
        return self.missing_calories > 0

    @property
    def message(self) -> str:
        if self.is_deficit:
            return f"Add the missing daily calories: {abs(self.grams):g} g"
        return f"Remove the calorie surplus: {abs(self.grams):g} g"


def macro_calories(target: MacroTarget) -> float:
    """Calories supplied by the gram targets of protein, fat and carbs."""
    total = sum(
        (to_decimal(target.grams(macro)) * KCAL_PER_GRAM[macro] for macro in Macro),
        Decimal(0),
    )
    return round_half_up(total, 1)


def missing_calories(target: MacroTarget) -> float:
    """Calorie target minus macro calories; negative means a surplus."""
    return round_half_up(
        to_decimal(target.calories) - to_decimal(macro_calories(target)), 1
    )


def suggest_gram_delta(missing: Number, macro: Macro) -> float:
    """Whole grams of ``macro`` to add (or remove, if negative) to close the gap."""
    if to_decimal(missing).is_zero():
        return 0.0
    return divide(missing, KCAL_PER_GRAM[macro], 0)


def suggestions(target: MacroTarget) -> list[MacroSuggestion]:
    """Return one suggestion per macro while a calorie gap remains."""
    if target.calories <= 0:
        return []
    missing = missing_calories(target)
    if missing == 0:
        return []
    return [
        MacroSuggestion(
            macro=macro,
            grams=suggest_gram_delta(missing, macro),
            missing_calories=missing,
        )
        for macro in Macro
    ]


def apply_suggestion(target: MacroTarget, macro: Macro, delta: Number) -> MacroTarget:
    """Apply a gram delta to a macro without going below zero."""
    new_grams = max(Decimal(0), to_decimal(target.grams(macro)) + to_decimal(delta))
    return set_macro_grams(target, macro, new_grams)
