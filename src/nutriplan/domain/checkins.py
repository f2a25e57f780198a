"""Domain models for daily check-ins."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from nutriplan.domain.profile import Intensity


@dataclass(frozen=True)
class MealCheckIn:
    """Whether one meal of the diet was eaten."""

    meal_name: str
    completed: bool
    completed_at: datetime | None = None
    notes: str | None = None


@dataclass(frozen=True)
class ExerciseInput:
    """An exercise reported with a check-in."""

    exercise_name: str
    category: str
    met: float
    duration_minutes: float
    intensity: Intensity = Intensity.MODERATE
    is_extra: bool = False


@dataclass(frozen=True)
class ExerciseLog:
    """A stored exercise with its burned calories."""

    exercise_name: str
    category: str
    duration_minutes: float
    calories_burned: float
    is_extra: bool = False


@dataclass(frozen=True)
class CheckIn:
    """One user's record of a day following a diet."""

    user_id: UUID
    diet_id: UUID
    day: date
    meals: tuple[MealCheckIn, ...]
    adherence_rate: int
    exercises: tuple[ExerciseLog, ...] = field(default_factory=tuple)
    total_calories_burned: float = 0.0
    id: UUID | None = None

    @property
    def meals_completed(self) -> int:
        return sum(1 for meal in self.meals if meal.completed)


@dataclass(frozen=True)
class WeeklyDayStat:
    """Adherence for a single day."""

    day: date
    adherence_rate: int
    meals_completed: int
    meals_total: int


@dataclass(frozen=True)
class WeeklyStats:
    """Adherence over the last week, newest day first."""

    days: tuple[WeeklyDayStat, ...]
    streak: int
    average_adherence: int
