"""Tests for the check-in service."""

from datetime import date, datetime
from uuid import uuid4

import pytest

from nutriplan.domain.checkins import CheckIn, ExerciseInput, MealCheckIn
from nutriplan.domain.errors import NotFoundError, ValidationError
from nutriplan.services.checkins import (
    CheckInService,
    calculate_adherence,
    normalize_day,
)
from tests.conftest import (
    InMemoryCheckInRepository,
    InMemoryDietRepository,
    swap_diet,
)

TODAY = date(2026, 3, 10)


def _check_in(user_id, day: date, adherence: int) -> CheckIn:
    return CheckIn(
        user_id=user_id,
        diet_id=uuid4(),
        day=day,
        meals=(MealCheckIn(meal_name="Almoço", completed=adherence > 0),),
        adherence_rate=adherence,
    )


def test_record_computes_adherence_and_exercise(
    check_in_service: CheckInService,
    diet_repository: InMemoryDietRepository,
) -> None:
    diet = diet_repository.add(swap_diet())

    saved = check_in_service.record(
        diet.user_id,
        diet.id,
        [
            MealCheckIn(meal_name="Café da manhã", completed=True),
            MealCheckIn(meal_name="Almoço", completed=True),
            MealCheckIn(meal_name="Jantar", completed=False),
        ],
        exercises=[
            ExerciseInput(
                exercise_name="Corrida", category="cardio", met=8, duration_minutes=30
            )
        ],
        day=TODAY,
    )

    assert saved.adherence_rate == 67
    assert saved.day == TODAY
    assert saved.meals[0].completed_at is not None
    assert saved.meals[2].completed_at is None
    assert saved.exercises[0].calories_burned == pytest.approx(294)
    assert saved.total_calories_burned == pytest.approx(294)


def test_record_uses_given_weight(
    check_in_service: CheckInService,
    diet_repository: InMemoryDietRepository,
) -> None:
    diet = diet_repository.add(swap_diet())

    saved = check_in_service.record(
        diet.user_id,
        diet.id,
        [],
        exercises=[
            ExerciseInput(
                exercise_name="Corrida", category="cardio", met=8, duration_minutes=30
            )
        ],
        weight_kg=80,
        day=TODAY,
    )

    assert saved.adherence_rate == 0
    assert saved.total_calories_burned == pytest.approx(336)


def test_record_replaces_same_day(
    check_in_service: CheckInService,
    diet_repository: InMemoryDietRepository,
    check_in_repository: InMemoryCheckInRepository,
) -> None:
    diet = diet_repository.add(swap_diet())
    meals = [MealCheckIn(meal_name="Almoço", completed=False)]

    check_in_service.record(diet.user_id, diet.id, meals, day="2026-03-10T08:00:00")
    check_in_service.record(
        diet.user_id,
        diet.id,
        [MealCheckIn(meal_name="Almoço", completed=True)],
        day=datetime(2026, 3, 10, 21, 30),
    )

    assert len(check_in_repository.check_ins) == 1
    stored = check_in_service.get_by_date(diet.user_id, TODAY)
    assert stored is not None
    assert stored.adherence_rate == 100


def test_record_requires_owned_diet(
    check_in_service: CheckInService,
    diet_repository: InMemoryDietRepository,
) -> None:
    diet = diet_repository.add(swap_diet())

    with pytest.raises(NotFoundError):
        check_in_service.record(uuid4(), diet.id, [], day=TODAY)
    with pytest.raises(NotFoundError):
        check_in_service.record(diet.user_id, uuid4(), [], day=TODAY)


def test_weekly_stats_and_streak(
    check_in_service: CheckInService,
    check_in_repository: InMemoryCheckInRepository,
) -> None:
    user_id = uuid4()
    for day, adherence in [
        (date(2026, 3, 10), 100),
        (date(2026, 3, 9), 75),
        (date(2026, 3, 8), 40),
        (date(2026, 3, 1), 100),
    ]:
        check_in_repository.upsert_check_in(_check_in(user_id, day, adherence))

    stats = check_in_service.weekly_stats(user_id, today=TODAY)

    assert [stat.day for stat in stats.days] == [
        date(2026, 3, 10),
        date(2026, 3, 9),
        date(2026, 3, 8),
    ]
    assert stats.average_adherence == 72
    assert stats.streak == 2


def test_streak_breaks_on_gap_or_missing_today(
    check_in_service: CheckInService,
    check_in_repository: InMemoryCheckInRepository,
) -> None:
    user_id = uuid4()
    check_in_repository.upsert_check_in(_check_in(user_id, date(2026, 3, 10), 80))
    check_in_repository.upsert_check_in(_check_in(user_id, date(2026, 3, 8), 80))

    assert check_in_service.streak(user_id, today=TODAY) == 1
    assert check_in_service.streak(user_id, today=date(2026, 3, 11)) == 0


def test_weekly_stats_empty(check_in_service: CheckInService) -> None:
    stats = check_in_service.weekly_stats(uuid4(), today=TODAY)
    assert stats.days == ()
    assert stats.average_adherence == 0
    assert stats.streak == 0


def test_calculate_adherence_rounds_half_up() -> None:
    meals = [MealCheckIn(meal_name=str(index), completed=index < 1) for index in range(8)]
    assert calculate_adherence(meals) == 13
    assert calculate_adherence([]) == 0


def test_normalize_day() -> None:
    assert normalize_day("2026-02-15T14:30:00") == date(2026, 2, 15)
    assert normalize_day(datetime(2026, 2, 15, 8, 0)) == date(2026, 2, 15)
    assert normalize_day(date(2026, 2, 15)) == date(2026, 2, 15)
    with pytest.raises(ValidationError):
        normalize_day("ontem")
