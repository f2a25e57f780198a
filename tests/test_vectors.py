"""Tests for macro and micronutrient vector math."""

import pytest

from nutriplan.domain.diets import MacroVector
from nutriplan.domain.errors import ValidationError
from nutriplan.domain.nutrients import (
    ZERO_MICRONUTRIENTS,
    MicronutrientVector,
    NutrientKey,
)
from nutriplan.services.vectors import (
    calculate_equivalent_grams,
    calculate_food_macros,
    scale_food_micronutrients,
    sum_macros,
    sum_micronutrients,
)
from tests.conftest import EGG, FOOD_A, FOOD_C, RICE, WATER


def test_calculate_food_macros_scales_per_100g() -> None:
    macros = calculate_food_macros(FOOD_A, 100)
    assert macros == MacroVector(200, 10, 30, 4, 0)


@pytest.mark.parametrize("grams", [0, 33, 160, 257.5])
def test_calculate_food_macros_rounds_calories(grams: float) -> None:
    expected = int(RICE.calories_per_100g * grams / 100 + 0.5)
    assert calculate_food_macros(RICE, grams).calories == expected


def test_calculate_food_macros_rejects_negative_grams() -> None:
    with pytest.raises(ValidationError):
        calculate_food_macros(RICE, -1)


def test_equivalent_grams_preserves_calories() -> None:
    assert calculate_equivalent_grams(FOOD_A, 100, FOOD_C) == 80.0

    grams = calculate_equivalent_grams(RICE, 160, EGG)
    assert grams == 140.3
    assert (
        calculate_food_macros(EGG, grams).calories
        == calculate_food_macros(RICE, 160).calories
    )


def test_equivalent_grams_rejects_zero_calorie_food() -> None:
    with pytest.raises(ValidationError) as exc_info:
        calculate_equivalent_grams(RICE, 100, WATER)
    assert exc_info.value.food_id == "water"


def test_sum_macros() -> None:
    total = sum_macros([MacroVector(100, 1, 2, 3, 4), MacroVector(50, 1, 1, 1, 1)])
    assert total == MacroVector(150, 2, 3, 4, 5)


def test_sum_with_zero_vector_is_identity() -> None:
    vector = MicronutrientVector.from_mapping({"vitaminC": 12.5, "iron": 3})
    assert sum_micronutrients(ZERO_MICRONUTRIENTS, vector) == vector
    assert sum_micronutrients(vector, ZERO_MICRONUTRIENTS) == vector


def test_scale_food_micronutrients() -> None:
    micros = scale_food_micronutrients(FOOD_A, 50)
    assert micros[NutrientKey.VITAMIN_C] == 5
    assert micros["iron"] == 1
    assert micros[NutrientKey.SODIUM] == 0


def test_micronutrient_vector_rejects_unknown_and_negative() -> None:
    with pytest.raises(ValidationError):
        MicronutrientVector.from_mapping({"vitaminX": 1})
    with pytest.raises(ValidationError):
        MicronutrientVector.from_mapping({"iron": -1})


def test_micronutrient_vector_is_total() -> None:
    vector = MicronutrientVector.from_mapping({"zinc": 2})
    as_dict = vector.as_dict()
    assert len(as_dict) == len(NutrientKey)
    assert as_dict["zinc"] == 2
    assert as_dict["selenium"] == 0
