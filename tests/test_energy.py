"""Tests for BMR/TDEE estimation."""

import pytest

from diet_planner.domain.energy import (
    ACTIVITY_LEVELS,
    EnergyProfile,
    EnergyResult,
    Sex,
    clamp_activity_factor,
    compute_energy,
    compute_energy_for,
    parse_sex,
)


def test_male_energy_is_deterministic() -> None:
    first = compute_energy(70, 170, 30, Sex.MALE)
    second = compute_energy(70, 170, 30, Sex.MALE)

    assert first == second == EnergyResult(bmr=1672.0, tdee=2006.0)


def test_female_energy_with_continuous_factor() -> None:
    result = compute_energy(60, 165, 25, "female", 1.55)

    assert result == EnergyResult(bmr=1405.0, tdee=2178.0)


def test_half_kcal_rounds_up() -> None:
    # BMR is exactly 2592.5 and TDEE exactly 3629.5 kcal.
    result = compute_energy(149, 165, 50, "male", 1.4)

    assert result == EnergyResult(bmr=2593.0, tdee=3630.0)


def test_activity_factor_is_clamped() -> None:
    assert clamp_activity_factor(3.0) == 2.4
    assert clamp_activity_factor(1.0) == 1.2
    assert clamp_activity_factor(1.75) == 1.75
    assert compute_energy(70, 170, 30, "male", 3.0).tdee == 4012.0


def test_energy_profile_helper() -> None:
    profile = EnergyProfile(
        weight_kg=70, height_cm=170, age_years=30, sex=Sex.MALE, activity_factor=1.2
    )

    assert compute_energy_for(profile) == compute_energy(70, 170, 30, "m", 1.2)


def test_parse_sex_aliases() -> None:
    assert parse_sex("Kobieta") is Sex.FEMALE
    assert parse_sex(" mężczyzna ") is Sex.MALE
    assert parse_sex(Sex.FEMALE) is Sex.FEMALE

    with pytest.raises(ValueError):
        parse_sex("unknown")


def test_activity_anchors_stay_in_range() -> None:
    factors = [level.factor for level in ACTIVITY_LEVELS]

    assert factors == sorted(factors)
    assert all(1.2 <= factor <= 2.4 for factor in factors)
