"""Redistribution of the day's calories after skipped meals or extra exercise.

When a meal is skipped its calories are spread over the meals still to be
eaten, proportionally to their original size. Meals are walked in time
order: a meal completed before any skip was eaten as planned, a meal
completed after a skip was eaten at the scale shown at that moment, and all
pending meals share the final scale factor.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum

from nutriplan.domain.diets import ZERO_MACROS, EffectiveMeal, MacroVector
from nutriplan.domain.errors import ValidationError
from nutriplan.numbers import round_half_up
from nutriplan.services.quantities import scale_quantity

ADAPTATION_TOLERANCE = 0.02


class MealStatus(StrEnum):
    """Check-in status of a meal."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    PENDING = "pending"


@dataclass(frozen=True)
class AdaptedEntry:
    """A food line with its scaled quantity."""

    food_id: str
    food_name: str
    quantity: str
    original_quantity: str
    macros: MacroVector
    original_calories: float


@dataclass(frozen=True)
class AdaptedMeal:
    """A meal scaled to fit the remaining daily budget."""

    meal_index: int
    name: str
    time: str
    status: MealStatus
    adapted: bool
    scale_factor: float
    entries: tuple[AdaptedEntry, ...]
    totals: MacroVector
    original_calories: float


@dataclass(frozen=True)
class DaySummary:
    """Consumed and remaining macros against the exercise-adjusted target."""

    consumed: MacroVector
    remaining: MacroVector
    daily_target: MacroVector
    exercise_bonus: float


@dataclass(frozen=True)
class DayAdaptation:
    """Adapted meals in diet order plus the day summary."""

    meals: tuple[AdaptedMeal, ...]
    summary: DaySummary


def adapt_day(
    meals: Sequence[EffectiveMeal],
    statuses: Mapping[str, MealStatus | str],
    daily_target: MacroVector,
    extra_calories_burned: float = 0.0,
) -> DayAdaptation:
    """Scale the remaining meals so the day still lands on target.

    ``statuses`` is keyed by meal name; meals without a status are pending.
    """
    target = replace(
        daily_target, calories=daily_target.calories + extra_calories_burned
    )
    ordered = sorted(meals, key=lambda meal: meal.time)
    status_by_index = {
        meal.meal_index: _parse_status(statuses.get(meal.name, MealStatus.PENDING))
        for meal in meals
    }
    eaten_pool = [
        meal for meal in ordered if status_by_index[meal.meal_index] != MealStatus.SKIPPED
    ]

    consumed = ZERO_MACROS
    adapted: dict[int, AdaptedMeal] = {}
    had_skip = False
    for meal in ordered:
        status = status_by_index[meal.meal_index]
        if status is MealStatus.SKIPPED:
            adapted[meal.meal_index] = _skipped_meal(meal)
            had_skip = True
        elif status is MealStatus.COMPLETED:
            if had_skip:
                budget = target.calories - consumed.calories
                pool = _pool_calories(eaten_pool, adapted)
                result = _scaled_meal(meal, status, _scale_factor(budget, pool))
            else:
                result = _scaled_meal(meal, status, 1.0)
            consumed = consumed + result.totals
            adapted[meal.meal_index] = result

    remaining = MacroVector(
        calories=target.calories - consumed.calories,
        protein_g=target.protein_g - consumed.protein_g,
        carbs_g=target.carbs_g - consumed.carbs_g,
        fat_g=target.fat_g - consumed.fat_g,
        fiber_g=target.fiber_g - consumed.fiber_g,
    )
    pending = [meal for meal in ordered if meal.meal_index not in adapted]
    factor = _scale_factor(remaining.calories, _pool_calories(pending, adapted))
    for meal in pending:
        adapted[meal.meal_index] = _scaled_meal(meal, MealStatus.PENDING, factor)

    return DayAdaptation(
        meals=tuple(adapted[meal.meal_index] for meal in meals),
        summary=DaySummary(
            consumed=consumed,
            remaining=remaining,
            daily_target=target,
            exercise_bonus=extra_calories_burned,
        ),
    )


def _parse_status(value: MealStatus | str) -> MealStatus:
    try:
        return MealStatus(str(value).lower())
    except ValueError:
        raise ValidationError(f"Unknown meal status {value!r}") from None


def _pool_calories(
    meals: Sequence[EffectiveMeal], adapted: Mapping[int, AdaptedMeal]
) -> float:
    return sum(
        meal.totals.calories for meal in meals if meal.meal_index not in adapted
    )


def _scale_factor(budget: float, pool: float) -> float:
    if pool <= 0:
        return 1.0
    return max(budget / pool, 0.0)


def _scaled_meal(
    meal: EffectiveMeal, status: MealStatus, factor: float
) -> AdaptedMeal:
    is_adapted = abs(factor - 1) >= ADAPTATION_TOLERANCE
    if not is_adapted:
        factor = 1.0
    entries = tuple(
        AdaptedEntry(
            food_id=entry.food_id,
            food_name=entry.food_name,
            quantity=(
                scale_quantity(entry.quantity, factor) if is_adapted else entry.quantity
            ),
            original_quantity=entry.quantity,
            macros=_scale_macros(entry.macros, factor),
            original_calories=entry.macros.calories,
        )
        for entry in meal.entries
    )
    return AdaptedMeal(
        meal_index=meal.meal_index,
        name=meal.name,
        time=meal.time,
        status=status,
        adapted=is_adapted,
        scale_factor=round_half_up(factor, 3),
        entries=entries,
        totals=_scale_macros(meal.totals, factor),
        original_calories=meal.totals.calories,
    )


def _skipped_meal(meal: EffectiveMeal) -> AdaptedMeal:
    entries = tuple(
        AdaptedEntry(
            food_id=entry.food_id,
            food_name=entry.food_name,
            quantity="0",
            original_quantity=entry.quantity,
            macros=ZERO_MACROS,
            original_calories=entry.macros.calories,
        )
        for entry in meal.entries
    )
    return AdaptedMeal(
        meal_index=meal.meal_index,
        name=meal.name,
        time=meal.time,
        status=MealStatus.SKIPPED,
        adapted=False,
        scale_factor=0.0,
        entries=entries,
        totals=ZERO_MACROS,
        original_calories=meal.totals.calories,
    )


def _scale_macros(macros: MacroVector, factor: float) -> MacroVector:
    """Calories to whole kcal, grams to one decimal."""
    return MacroVector(
        calories=round_half_up(macros.calories * factor),
        protein_g=round_half_up(macros.protein_g * factor, 1),
        carbs_g=round_half_up(macros.carbs_g * factor, 1),
        fat_g=round_half_up(macros.fat_g * factor, 1),
        fiber_g=round_half_up(macros.fiber_g * factor, 1),
    )
