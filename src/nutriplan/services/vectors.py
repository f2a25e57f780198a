"""Macro and micronutrient vector math."""

from collections.abc import Iterable

from nutriplan.domain.diets import ZERO_MACROS, MacroVector
from nutriplan.domain.errors import ValidationError
from nutriplan.domain.foods import Food
from nutriplan.domain.nutrients import MicronutrientVector
from nutriplan.numbers import round_half_up


def scale_food_macros(food: Food, grams: float) -> MacroVector:
    """Return unrounded macros of ``grams`` of ``food``."""
    factor = _factor(food, grams)
    return MacroVector(
        calories=food.calories_per_100g * factor,
        protein_g=food.protein_per_100g * factor,
        carbs_g=food.carbs_per_100g * factor,
        fat_g=food.fat_per_100g * factor,
        fiber_g=food.fiber_per_100g * factor,
    )


def calculate_food_macros(food: Food, grams: float) -> MacroVector:
    """Return display macros of ``grams`` of ``food``, rounded to whole units."""
    return scale_food_macros(food, grams).rounded()


def scale_food_micronutrients(food: Food, grams: float) -> MicronutrientVector:
    """Return unrounded micronutrients of ``grams`` of ``food``."""
    return food.micronutrients_per_100g.scale(_factor(food, grams))


def calculate_equivalent_grams(
    original_food: Food, original_grams: float, new_food: Food
) -> float:
    """Grams of ``new_food`` matching the calories of the original portion."""
    if new_food.calories_per_100g <= 0:
        raise ValidationError(
            f"Food {new_food.id} has no calories; cannot compute equivalent grams",
            food_id=new_food.id,
        )
    original_calories = scale_food_macros(original_food, original_grams).calories
    return round_half_up(original_calories * 100 / new_food.calories_per_100g, 1)


def sum_macros(vectors: Iterable[MacroVector]) -> MacroVector:
    """Sum macro vectors field-wise."""
    total = ZERO_MACROS
    for vector in vectors:
        total = total + vector
    return total


def sum_micronutrients(
    first: MicronutrientVector, second: MicronutrientVector
) -> MicronutrientVector:
    """Sum two micronutrient vectors key-wise."""
    return MicronutrientVector(
        tuple(a + b for a, b in zip(first.values, second.values, strict=True))
    )


def _factor(food: Food, grams: float) -> float:
    if grams < 0:
        raise ValidationError(
            f"Negative grams {grams} for food {food.id}", food_id=food.id
        )
    return grams / 100.0
