"""Energy expenditure and calorie targets.

BMR uses Mifflin-St Jeor:

    male:   10 * weight + 6.25 * height - 5 * age + 5
    female: 10 * weight + 6.25 * height - 5 * age - 161

TDEE is ``BMR * 1.2`` (resting activity) plus exercise calories, where one
exercise burns ``MET * 3.5 * weight / 200`` kcal per minute.
"""

from collections.abc import Iterable
from datetime import date

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.profile import (
    BodyProfile,
    EnergyTargets,
    ExerciseRoutine,
    Goal,
    Intensity,
    Sex,
    parse_goal,
    parse_intensity,
    parse_sex,
)
from nutriplan.numbers import round_half_up

BASAL_ACTIVITY_FACTOR = 1.2
DAYS_PER_WEEK = 7

_INTENSITY_MULTIPLIERS = {
    Intensity.LIGHT: 0.75,
    Intensity.MODERATE: 1.0,
    Intensity.INTENSE: 1.25,
}

_GOAL_MULTIPLIERS = {
    Goal.LOSE_WEIGHT: 0.80,
    Goal.MAINTAIN: 1.0,
    Goal.GAIN_MUSCLE: 1.15,
    Goal.HEALTH: 1.0,
}


def calculate_bmr(
    weight_kg: float, height_cm: float, age: int, sex: Sex | str
) -> float:
    """Basal metabolic rate in kcal/day."""
    _require_positive(weight_kg=weight_kg, height_cm=height_cm)
    if age < 0:
        raise ValidationError(f"Negative age {age}")
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if parse_sex(sex) is Sex.MALE:
        return base + 5
    return base - 161


def calculate_exercise_calories(
    met: float,
    duration_minutes: float,
    weight_kg: float,
    intensity: Intensity | str = Intensity.MODERATE,
) -> float:
    """Calories burned by one exercise session."""
    _require_positive(weight_kg=weight_kg)
    if met < 0 or duration_minutes < 0:
        raise ValidationError(
            f"Invalid exercise: met={met} duration_minutes={duration_minutes}"
        )
    multiplier = _INTENSITY_MULTIPLIERS[parse_intensity(intensity)]
    return met * multiplier * 3.5 * weight_kg / 200 * duration_minutes


def calculate_daily_tdee(bmr: float, exercise_calories_today: float) -> float:
    return bmr * BASAL_ACTIVITY_FACTOR + exercise_calories_today


def calculate_weekly_avg_tdee(
    bmr: float, routines: Iterable[ExerciseRoutine], weight_kg: float
) -> float:
    """TDEE with recurring exercise averaged over the week."""
    weekly_exercise = 0.0
    for routine in routines:
        if not 0 <= routine.days_per_week <= DAYS_PER_WEEK:
            raise ValidationError(
                f"Routine {routine.name!r} has {routine.days_per_week} days per week"
            )
        per_session = calculate_exercise_calories(
            routine.met, routine.duration_minutes, weight_kg, routine.intensity
        )
        weekly_exercise += per_session * routine.days_per_week
    return calculate_daily_tdee(bmr, weekly_exercise / DAYS_PER_WEEK)


def adjust_for_goal(tdee: float, goal: Goal | str) -> float:
    """Goal-adjusted daily calories, rounded to whole kcal."""
    return round_half_up(tdee * _GOAL_MULTIPLIERS[parse_goal(goal)])


def age_on(birth_date: date, day: date) -> int:
    """Age in whole years on ``day``."""
    had_birthday = (day.month, day.day) >= (birth_date.month, birth_date.day)
    return day.year - birth_date.year - (0 if had_birthday else 1)


def calculate_energy_targets(
    profile: BodyProfile, routines: Iterable[ExerciseRoutine], today: date
) -> EnergyTargets:
    """BMR, weekly-average TDEE and goal target for a profile."""
    bmr = calculate_bmr(
        profile.weight_kg,
        profile.height_cm,
        age_on(profile.birth_date, today),
        profile.sex,
    )
    tdee = calculate_weekly_avg_tdee(bmr, routines, profile.weight_kg)
    return EnergyTargets(
        bmr=round_half_up(bmr),
        tdee=round_half_up(tdee),
        target_calories=adjust_for_goal(tdee, profile.goal),
    )


def _require_positive(**values: float) -> None:
    for name, value in values.items():
        if value <= 0:
            raise ValidationError(f"{name} must be positive, got {value}")
