"""Body profile and exercise routine models."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from nutriplan.domain.errors import ValidationError


class Sex(StrEnum):
    """Biological sex used by the BMR equation and RDA tables."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Goal(StrEnum):
    """Diet goal driving the calorie adjustment."""

    LOSE_WEIGHT = "LOSE_WEIGHT"
    MAINTAIN = "MAINTAIN"
    GAIN_MUSCLE = "GAIN_MUSCLE"
    HEALTH = "HEALTH"


class Intensity(StrEnum):
    """Self-reported exercise intensity."""

    LIGHT = "LIGHT"
    MODERATE = "MODERATE"
    INTENSE = "INTENSE"


@dataclass(frozen=True)
class ExerciseRoutine:
    """A recurring weekly exercise."""

    name: str
    met: float
    days_per_week: int
    duration_minutes: float
    intensity: Intensity = Intensity.MODERATE


@dataclass(frozen=True)
class BodyProfile:
    """Anthropometric data needed for energy targets."""

    weight_kg: float
    height_cm: float
    birth_date: date
    sex: Sex
    goal: Goal = Goal.MAINTAIN


@dataclass(frozen=True)
class EnergyTargets:
    """BMR, weekly-average TDEE and the goal-adjusted daily target."""

    bmr: float
    tdee: float
    target_calories: float


def parse_sex(value: Sex | str) -> Sex:
    """Return the Sex for a case-insensitive name."""
    try:
        return Sex(str(value).lower())
    except ValueError:
        raise ValidationError(f"Unknown sex {value!r}") from None


def parse_goal(value: Goal | str) -> Goal:
    """Return the Goal for a case-insensitive name."""
    try:
        return Goal(str(value).upper())
    except ValueError:
        raise ValidationError(f"Unknown goal {value!r}") from None


def parse_intensity(value: Intensity | str) -> Intensity:
    """Return the Intensity for a case-insensitive name."""
    try:
        return Intensity(str(value).upper())
    except ValueError:
        raise ValidationError(f"Unknown intensity {value!r}") from None
