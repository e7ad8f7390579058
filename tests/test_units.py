"""Tests for unit conversion."""

import pytest

from diet_planner.domain.units import (
    MissingUnitWeightError,
    UnitKind,
    grams_for,
    normalize_unit,
)


def test_milliliters_use_per_100_basis() -> None:
    assert grams_for(200, "ml", 103) == 206.0
    assert grams_for(50, "mililitry", 100) == 50.0


def test_piece_units_use_per_unit_basis() -> None:
    assert grams_for(2, "piece", 180) == 360.0
    assert grams_for(3, "łyżka", 15) == 45.0
    assert grams_for("1,5", "szklanka", 250) == 375.0


def test_grams_ignore_unit_weight() -> None:
    assert grams_for(150, "gramy", 100) == 150.0
    assert grams_for(150, "g", None) == 150.0


def test_missing_unit_weight_is_an_error() -> None:
    with pytest.raises(MissingUnitWeightError) as excinfo:
        grams_for(1, "tablespoon", None)

    assert excinfo.value.unit == "tablespoon"

    with pytest.raises(MissingUnitWeightError):
        grams_for(100, "ml", "")


def test_normalize_unit() -> None:
    assert normalize_unit(" Gramy ") is UnitKind.GRAMS
    assert normalize_unit("ML") is UnitKind.MILLILITERS
    assert normalize_unit("handful") is UnitKind.PIECE
    assert normalize_unit(None) is UnitKind.PIECE


@pytest.mark.parametrize(
    "unit", ["teaspoon", "cup", "mug", "slice", "łyżeczka", "garść", "kawałek"]
)
def test_catalog_labels_are_piece_units(unit: str) -> None:
    assert normalize_unit(unit) is UnitKind.PIECE
    assert grams_for(2, unit, 12.5) == 25.0
