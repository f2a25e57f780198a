"""Food reference data."""

from dataclasses import dataclass
from enum import StrEnum

from nutriplan.domain.nutrients import ZERO_MICRONUTRIENTS, MicronutrientVector


class FoodCategory(StrEnum):
    """Catalog category of a food."""

    GRAINS = "grains"
    PROTEINS = "proteins"
    DAIRY = "dairy"
    FRUITS = "fruits"
    VEGETABLES = "vegetables"
    LEGUMES = "legumes"
    FATS = "fats"
    BEVERAGES = "beverages"
    SWEETS = "sweets"
    OTHERS = "others"


@dataclass(frozen=True)
class CommonPortion:
    """Household measure for a food, e.g. "1 xícara" = 160 g."""

    name: str
    grams: float


@dataclass(frozen=True)
class Food:
    """Catalog food with nutrient values per 100 g."""

    id: str
    name: str
    category: FoodCategory
    calories_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float
    fiber_per_100g: float = 0.0
    micronutrients_per_100g: MicronutrientVector = ZERO_MICRONUTRIENTS
    common_portions: tuple[CommonPortion, ...] = ()
