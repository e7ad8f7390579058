"""Energy expenditure (BMR/TDEE) from body metrics."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from diet_planner.domain.precision import round_half_up, to_decimal

_logger = logging.getLogger(__name__)

MIN_ACTIVITY_FACTOR = 1.2
MAX_ACTIVITY_FACTOR = 2.4


class Sex(str, Enum):
    """Biological sex used by the Harris-Benedict equations."""

    MALE = "male"
    FEMALE = "female"


_SEX_ALIASES = {
    "male": Sex.MALE,
    "m": Sex.MALE,
    "man": Sex.MALE,
    "mężczyzna": Sex.MALE,
    "female": Sex.FEMALE,
    "f": Sex.FEMALE,
    "woman": Sex.FEMALE,
    "kobieta": Sex.FEMALE,
}


@dataclass(frozen=True)
class ActivityLevel:
    """Labeled activity factor anchor shown as a UI hint."""

    factor: float
    label: str
    description: str


ACTIVITY_LEVELS = (
    ActivityLevel(1.2, "1.2 - 1.3", "Bedridden or sedentary work, no activity"),
    ActivityLevel(1.4, "1.4", "Low physical activity"),
    ActivityLevel(1.6, "1.6", "Moderate physical activity"),
    ActivityLevel(1.75, "1.75", "Active lifestyle"),
    ActivityLevel(2.0, "2.0", "Very active lifestyle"),
    ActivityLevel(2.2, "2.2 - 2.4", "Competitive sport"),
)


@dataclass(frozen=True)
class EnergyProfile:
    """Body metrics needed for an energy estimate."""

    weight_kg: float
    height_cm: float
    age_years: float
    sex: Sex
    activity_factor: float = MIN_ACTIVITY_FACTOR


@dataclass(frozen=True)
class EnergyResult:
    """Basal and total daily energy expenditure in kcal."""

    bmr: float
    tdee: float


def parse_sex(value: str | Sex) -> Sex:
    """Parse a sex label, accepting English and Polish names."""
    if isinstance(value, Sex):
        return value
    try:
        return _SEX_ALIASES[value.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown sex: {value!r}") from None


def basal_metabolic_rate(
    weight_kg: float, height_cm: float, age_years: float, sex: Sex
) -> Decimal:
    """Return the unrounded Harris-Benedict BMR as an exact decimal."""
    weight, height, age = (to_decimal(v) for v in (weight_kg, height_cm, age_years))
    if sex is Sex.MALE:
        return (
            Decimal("88.362")
            + Decimal("13.397") * weight
            + Decimal("4.799") * height
            - Decimal("5.677") * age
        )
    return (
        Decimal("447.593")
        + Decimal("9.247") * weight
        + Decimal("3.098") * height
        - Decimal("4.330") * age
    )


def clamp_activity_factor(factor: float) -> float:
    """Clamp an activity factor into the supported range."""
    if factor < MIN_ACTIVITY_FACTOR or factor > MAX_ACTIVITY_FACTOR:
        clamped = min(max(factor, MIN_ACTIVITY_FACTOR), MAX_ACTIVITY_FACTOR)
        _logger.warning("Activity factor %s out of range, using %s", factor, clamped)
        return clamped
    return factor


def compute_energy(  # noqa: PLR0913
    weight_kg: float,
    height_cm: float,
    age_years: float,
    sex: Sex | str,
    activity_factor: float = MIN_ACTIVITY_FACTOR,
) -> EnergyResult:
    """Compute BMR and TDEE, both rounded to whole kcal."""
    bmr = basal_metabolic_rate(weight_kg, height_cm, age_years, parse_sex(sex))
    factor = clamp_activity_factor(activity_factor)
    tdee = bmr * to_decimal(factor)
    return EnergyResult(bmr=round_half_up(bmr), tdee=round_half_up(tdee))


def compute_energy_for(profile: EnergyProfile) -> EnergyResult:
    """Compute BMR and TDEE for an EnergyProfile."""
    return compute_energy(
        profile.weight_kg,
        profile.height_cm,
        profile.age_years,
        profile.sex,
        profile.activity_factor,
    )
