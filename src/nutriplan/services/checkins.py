"""Daily check-in service: adherence, exercise calories and streaks."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from nutriplan.domain.checkins import (
    CheckIn,
    ExerciseInput,
    ExerciseLog,
    MealCheckIn,
    WeeklyDayStat,
    WeeklyStats,
)
from nutriplan.domain.errors import NotFoundError, ValidationError
from nutriplan.numbers import round_half_up
from nutriplan.services.diets import DietRepository
from nutriplan.services.energy import calculate_exercise_calories

DEFAULT_WEIGHT_KG = 70.0
STREAK_MIN_ADHERENCE = 50
WEEK_DAYS = 7

_logger = logging.getLogger(__name__)


class CheckInRepository(Protocol):
    """Persistence interface for check-ins, one per user and day."""

    def upsert_check_in(self, check_in: CheckIn) -> CheckIn:
        """Insert or replace the check-in for (user_id, day)."""

    def get_check_in(self, user_id: UUID, day: date) -> CheckIn | None:
        """Return the check-in of a day, if any."""

    def list_check_ins(self, user_id: UUID, since: date | None = None) -> list[CheckIn]:
        """Return check-ins newest first, optionally from ``since`` on."""


@dataclass
class CheckInService:
    """Service that records daily check-ins and derives adherence stats."""

    repository: CheckInRepository
    diet_repository: DietRepository
    default_weight_kg: float = DEFAULT_WEIGHT_KG

    def record(
        self,
        user_id: UUID,
        diet_id: UUID,
        meals: Iterable[MealCheckIn],
        exercises: Iterable[ExerciseInput] = (),
        weight_kg: float | None = None,
        day: date | datetime | str | None = None,
    ) -> CheckIn:
        """Create or replace the check-in for a day (today by default)."""
        diet = self.diet_repository.get_diet(diet_id)
        if diet is None or diet.user_id != user_id:
            raise NotFoundError(f"Diet {diet_id} not found", diet_id=diet_id)

        now = datetime.now(tz=UTC)
        meal_list = tuple(
            replace(meal, completed_at=meal.completed_at or now)
            if meal.completed
            else meal
            for meal in meals
        )
        weight = weight_kg or self.default_weight_kg
        exercise_logs = tuple(
            ExerciseLog(
                exercise_name=exercise.exercise_name,
                category=exercise.category,
                duration_minutes=exercise.duration_minutes,
                calories_burned=calculate_exercise_calories(
                    exercise.met,
                    exercise.duration_minutes,
                    weight,
                    exercise.intensity,
                ),
                is_extra=exercise.is_extra,
            )
            for exercise in exercises
        )
        check_in = CheckIn(
            user_id=user_id,
            diet_id=diet_id,
            day=normalize_day(day),
            meals=meal_list,
            adherence_rate=calculate_adherence(meal_list),
            exercises=exercise_logs,
            total_calories_burned=sum(log.calories_burned for log in exercise_logs),
        )
        saved = self.repository.upsert_check_in(check_in)
        _logger.info(
            "Check-in saved: user=%s day=%s adherence=%s",
            user_id,
            saved.day,
            saved.adherence_rate,
        )
        return saved

    def get_by_date(
        self, user_id: UUID, day: date | datetime | str | None = None
    ) -> CheckIn | None:
        """Return the check-in for a day (today by default)."""
        return self.repository.get_check_in(user_id, normalize_day(day))

    def weekly_stats(self, user_id: UUID, today: date | None = None) -> WeeklyStats:
        """Return adherence for the last seven days and the current streak."""
        resolved_today = today or normalize_day(None)
        since = resolved_today - timedelta(days=WEEK_DAYS)
        check_ins = self.repository.list_check_ins(user_id, since)
        days = tuple(
            WeeklyDayStat(
                day=check_in.day,
                adherence_rate=check_in.adherence_rate,
                meals_completed=check_in.meals_completed,
                meals_total=len(check_in.meals),
            )
            for check_in in sorted(check_ins, key=lambda item: item.day, reverse=True)
        )
        average = 0
        if days:
            average = int(
                round_half_up(sum(stat.adherence_rate for stat in days) / len(days))
            )
        return WeeklyStats(
            days=days,
            streak=self.streak(user_id, resolved_today),
            average_adherence=average,
        )

    def streak(self, user_id: UUID, today: date | None = None) -> int:
        """Count consecutive days back from today with adherence above 50%."""
        expected = today or normalize_day(None)
        count = 0
        check_ins = sorted(
            self.repository.list_check_ins(user_id),
            key=lambda item: item.day,
            reverse=True,
        )
        for check_in in check_ins:
            if check_in.day != expected:
                break
            if check_in.adherence_rate <= STREAK_MIN_ADHERENCE:
                break
            count += 1
            expected -= timedelta(days=1)
        return count


def calculate_adherence(meals: Iterable[MealCheckIn]) -> int:
    """Percentage of completed meals, rounded to a whole number."""
    meal_list = list(meals)
    if not meal_list:
        return 0
    completed = sum(1 for meal in meal_list if meal.completed)
    return int(round_half_up(completed / len(meal_list) * 100))


def normalize_day(value: date | datetime | str | None) -> date:
    """Reduce a timestamp, ISO string or date to its calendar day."""
    if value is None:
        return datetime.now(tz=UTC).date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise ValidationError(f"Invalid check-in date {value!r}") from None
