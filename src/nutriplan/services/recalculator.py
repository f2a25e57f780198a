"""Recalculation of a diet's effective meals and totals."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from nutriplan.domain.diets import (
    ZERO_MACROS,
    Diet,
    EffectiveEntry,
    EffectiveMeal,
    MacroVector,
    Meal,
    MealFoodEntry,
    RecalculationResult,
)
from nutriplan.domain.errors import NotFoundError, ParseError, ValidationError
from nutriplan.domain.foods import Food
from nutriplan.domain.nutrients import ZERO_MICRONUTRIENTS, MicronutrientVector
from nutriplan.domain.overrides import FoodOverride, MealOverride
from nutriplan.services.overrides import (
    apply_food_overrides,
    apply_meal_overrides,
    latest_meal_overrides,
)
from nutriplan.services.quantities import (
    format_quantity,
    parse_quantity,
    quantity_to_grams,
)
from nutriplan.services.vectors import (
    scale_food_macros,
    scale_food_micronutrients,
    sum_micronutrients,
)


class FoodLookup(Protocol):
    """Resolves food ids to catalog foods."""

    def get_food(self, food_id: str) -> Food | None:
        """Return the food for an id, if present."""


@dataclass
class FoodCatalog(FoodLookup):
    """In-memory food lookup."""

    foods: dict[str, Food] = field(default_factory=dict)

    @classmethod
    def of(cls, foods: Iterable[Food]) -> "FoodCatalog":
        return cls({food.id: food for food in foods})

    def get_food(self, food_id: str) -> Food | None:
        return self.foods.get(food_id)


@dataclass(frozen=True)
class _Contribution:
    entry: EffectiveEntry
    macros: MacroVector
    micronutrients: MicronutrientVector


def recalculate_meals(
    diet: Diet,
    food_overrides: Iterable[FoodOverride],
    meal_overrides: Iterable[MealOverride],
    foods: FoodLookup,
) -> RecalculationResult:
    """Compute the effective version of every meal and the diet totals.

    Per meal: food overrides, then the meal override, then each active
    entry's contribution. Totals are summed unrounded and rounded once per
    meal and once for the diet. The input diet is never modified.
    """
    swaps = list(food_overrides)
    edits = list(meal_overrides)
    _check_diet_ids(diet, swaps, edits)
    edits_by_meal = latest_meal_overrides(edits)

    effective_meals: list[EffectiveMeal] = []
    diet_macros = ZERO_MACROS
    diet_micros = ZERO_MICRONUTRIENTS
    for meal_index, meal in enumerate(diet.meals):
        resolved = apply_food_overrides(meal, swaps, meal_index=meal_index)
        resolved = apply_meal_overrides(
            resolved, edits_by_meal.get(meal_index), meal_index=meal_index
        )
        effective, meal_macros, meal_micros = _effective_meal(
            resolved, meal_index, foods
        )
        effective_meals.append(effective)
        diet_macros = diet_macros + meal_macros
        diet_micros = sum_micronutrients(diet_micros, meal_micros)

    return RecalculationResult(
        meals=tuple(effective_meals),
        totals=diet_macros.rounded(),
        micronutrients=diet_micros.rounded(),
    )


def entry_grams(entry: MealFoodEntry, food: Food) -> float:
    """Grams of an entry: fixed by a swap, otherwise derived from the quantity."""
    if entry.grams is not None:
        return entry.grams
    return quantity_to_grams(parse_quantity(entry.quantity), food)


def _effective_meal(
    meal: Meal, meal_index: int, foods: FoodLookup
) -> tuple[EffectiveMeal, MacroVector, MicronutrientVector]:
    contributions = [
        _contribution(entry, meal_index, food_index, foods)
        for food_index, entry in enumerate(meal.entries)
        if entry.active
    ]
    macros = ZERO_MACROS
    micros = ZERO_MICRONUTRIENTS
    for contribution in contributions:
        macros = macros + contribution.macros
        micros = sum_micronutrients(micros, contribution.micronutrients)
    effective = EffectiveMeal(
        meal_index=meal_index,
        name=meal.name,
        time=meal.time,
        entries=tuple(contribution.entry for contribution in contributions),
        totals=macros.rounded(),
        micronutrients=micros.rounded(),
    )
    return effective, macros, micros


def _contribution(
    entry: MealFoodEntry, meal_index: int, food_index: int, foods: FoodLookup
) -> _Contribution:
    food = foods.get_food(entry.food_id)
    if food is None:
        raise NotFoundError(
            f"Food {entry.food_id} not found",
            food_id=entry.food_id,
            meal_index=meal_index,
            food_index=food_index,
        )
    try:
        grams = entry_grams(entry, food)
    except (ParseError, ValidationError) as exc:
        exc.meal_index = meal_index
        exc.food_index = food_index
        raise
    macros = scale_food_macros(food, grams)
    micros = scale_food_micronutrients(food, grams)
    effective = EffectiveEntry(
        food_index=food_index,
        food_id=food.id,
        food_name=food.name,
        quantity=entry.quantity,
        grams=grams,
        portion_label=format_quantity(grams, food),
        macros=macros.rounded(),
        micronutrients=micros.rounded(),
        swapped=entry.swapped_from is not None,
        added=entry.added,
    )
    return _Contribution(entry=effective, macros=macros, micronutrients=micros)


def _check_diet_ids(
    diet: Diet, swaps: list[FoodOverride], edits: list[MealOverride]
) -> None:
    for override in [*swaps, *edits]:
        if override.diet_id != diet.id:
            raise ValidationError(
                f"Override for diet {override.diet_id} applied to diet {diet.id}",
                diet_id=override.diet_id,
                meal_index=override.meal_index,
            )
