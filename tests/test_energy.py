"""Tests for BMR, TDEE and goal adjustments."""

from datetime import date

import pytest

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.profile import BodyProfile, ExerciseRoutine, Goal, Intensity, Sex
from nutriplan.services.energy import (
    adjust_for_goal,
    age_on,
    calculate_bmr,
    calculate_daily_tdee,
    calculate_energy_targets,
    calculate_exercise_calories,
    calculate_weekly_avg_tdee,
)


def test_bmr_reference_values() -> None:
    assert calculate_bmr(70, 175, 30, "male") == 1648.75
    assert calculate_bmr(70, 175, 30, Sex.FEMALE) == 1482.75
    assert calculate_bmr(70, 175, 30, "OTHER") == 1482.75


def test_bmr_rejects_invalid_inputs() -> None:
    with pytest.raises(ValidationError):
        calculate_bmr(0, 175, 30, "male")
    with pytest.raises(ValidationError):
        calculate_bmr(70, 175, -1, "male")
    with pytest.raises(ValidationError):
        calculate_bmr(70, 175, 30, "robot")


def test_exercise_calories() -> None:
    assert calculate_exercise_calories(8, 60, 70) == pytest.approx(588)
    assert calculate_exercise_calories(8, 60, 70, "intense") == pytest.approx(735)
    assert calculate_exercise_calories(8, 60, 70, Intensity.LIGHT) == pytest.approx(441)


def test_daily_and_weekly_tdee() -> None:
    bmr = calculate_bmr(70, 175, 30, "male")
    routine = ExerciseRoutine(name="Corrida", met=8, days_per_week=3, duration_minutes=60)

    assert calculate_daily_tdee(bmr, 588) == pytest.approx(2566.5)
    assert calculate_weekly_avg_tdee(bmr, [routine], 70) == pytest.approx(2230.5)
    assert calculate_weekly_avg_tdee(bmr, [], 70) == pytest.approx(1978.5)


def test_weekly_tdee_rejects_impossible_routine() -> None:
    routine = ExerciseRoutine(name="Natação", met=6, days_per_week=8, duration_minutes=30)
    with pytest.raises(ValidationError):
        calculate_weekly_avg_tdee(1600, [routine], 70)


@pytest.mark.parametrize(
    ("goal", "expected"),
    [
        (Goal.LOSE_WEIGHT, 1600),
        (Goal.MAINTAIN, 2000),
        (Goal.GAIN_MUSCLE, 2300),
        ("health", 2000),
    ],
)
def test_adjust_for_goal(goal: Goal | str, expected: float) -> None:
    assert adjust_for_goal(2000, goal) == expected


def test_age_on_birthday_boundary() -> None:
    born = date(1995, 6, 15)
    assert age_on(born, date(2025, 6, 14)) == 29
    assert age_on(born, date(2025, 6, 15)) == 30


def test_calculate_energy_targets() -> None:
    profile = BodyProfile(
        weight_kg=70,
        height_cm=175,
        birth_date=date(1995, 1, 1),
        sex=Sex.MALE,
        goal=Goal.LOSE_WEIGHT,
    )
    targets = calculate_energy_targets(profile, [], date(2025, 6, 1))

    assert targets.bmr == 1649
    assert targets.tdee == 1979
    assert targets.target_calories == 1583
