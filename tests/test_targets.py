"""Tests for macro target synchronization."""

import pytest

from diet_planner.domain.targets import (
    Macro,
    MacroTarget,
    grams_from_percentage,
    percentage_from_grams,
    seed_from_calories,
    set_calories,
    set_fiber_grams,
    set_macro_grams,
    set_macro_percentage,
)


def _target_with_grams(
    calories: float, protein: float, fat: float, carbs: float
) -> MacroTarget:
    target = MacroTarget()
    target = set_macro_grams(target, Macro.PROTEIN, protein)
    target = set_macro_grams(target, Macro.FAT, fat)
    target = set_macro_grams(target, Macro.CARBS, carbs)
    return set_calories(target, calories)


def test_percentages_follow_sticky_grams() -> None:
    target = _target_with_grams(2000, protein=100, fat=200, carbs=60)

    assert target.protein_pct == 20.0
    assert target.fat_pct == 90.0
    assert target.carbs_pct == 12.0
    assert (target.protein_g, target.fat_g, target.carbs_g) == (100.0, 200.0, 60.0)


def test_set_calories_keeps_grams() -> None:
    target = set_calories(MacroTarget(), 2000)
    target = set_macro_percentage(target, Macro.PROTEIN, 25)
    target = set_macro_percentage(target, Macro.FAT, 30)

    assert target.protein_g == 125.0
    assert target.fat_g == 67.0
    assert target.fat_pct == 30.0

    updated = set_calories(target, 2500)

    assert updated.protein_g == 125.0
    assert updated.fat_g == 67.0
    assert updated.protein_pct == 20.0
    assert updated.fat_pct == 24.1
    assert updated.carbs_pct == 0.0


def test_entry_order_does_not_matter() -> None:
    grams_first = set_macro_grams(MacroTarget(), Macro.PROTEIN, 150)
    assert grams_first.protein_pct == 0.0
    grams_first = set_calories(grams_first, 2000)

    calories_first = set_calories(MacroTarget(), 2000)
    calories_first = set_macro_grams(calories_first, Macro.PROTEIN, 150)

    assert grams_first == calories_first
    assert grams_first.protein_pct == 30.0


def test_percentage_without_calories_keeps_grams() -> None:
    target = set_macro_grams(MacroTarget(), Macro.CARBS, 200)

    updated = set_macro_percentage(target, Macro.CARBS, 50)

    assert updated.carbs_g == 200.0
    assert updated.carbs_pct == 0.0


def test_user_grams_round_to_whole_and_percentages_to_tenths() -> None:
    target = set_calories(MacroTarget(), 1800)

    updated = set_macro_grams(target, Macro.FAT, 55.6)

    assert updated.fat_g == 56.0
    assert updated.fat_pct == 28.0
    assert set_macro_percentage(target, Macro.PROTEIN, 22.26).protein_pct == 22.3


def test_negative_inputs_are_clamped() -> None:
    target = set_calories(MacroTarget(), -100)
    assert target.calories == 0.0

    target = set_calories(target, 2000)
    assert set_macro_grams(target, Macro.PROTEIN, -20).protein_g == 0.0
    assert set_macro_percentage(target, Macro.FAT, -5).fat_g == 0.0
    assert set_fiber_grams(target, -1).fiber_g == 0.0


def test_fiber_has_no_calorie_share() -> None:
    target = set_fiber_grams(set_calories(MacroTarget(), 2000), 30.4)

    assert target.fiber_g == 30.0
    assert set_calories(target, 1500).fiber_g == 30.0


@pytest.mark.parametrize("grams", [0, 35, 60, 100, 150, 240])
def test_zero_calorie_guard(grams: int) -> None:
    for macro in Macro:
        assert percentage_from_grams(grams, 0, macro) == 0.0


@pytest.mark.parametrize(
    ("percentage", "calories", "macro"),
    [
        (20, 2000, Macro.PROTEIN),
        (27, 2000, Macro.FAT),
        (50, 2400, Macro.CARBS),
        (35, 1600, Macro.PROTEIN),
    ],
)
def test_percentage_round_trip(
    percentage: float, calories: float, macro: Macro
) -> None:
    grams = grams_from_percentage(percentage, calories, macro)

    assert abs(percentage_from_grams(grams, calories, macro) - percentage) <= 0.1


@pytest.mark.parametrize("macro", list(Macro))
def test_gram_round_trip(macro: Macro) -> None:
    for grams in range(0, 301, 7):
        percentage = percentage_from_grams(grams, 2000, macro)
        assert grams_from_percentage(percentage, 2000, macro) == grams


def test_seed_from_calories() -> None:
    target = seed_from_calories(2006)

    assert target == MacroTarget(calories=2006.0)
