"""Domain models for diets, meals and recalculated results."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from nutriplan.domain.nutrients import MicronutrientVector
from nutriplan.domain.profile import Goal
from nutriplan.numbers import round_half_up


@dataclass(frozen=True)
class MacroVector:
    """Energy and macronutrient amounts."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float = 0.0

    def __add__(self, other: "MacroVector") -> "MacroVector":
        return MacroVector(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
            fiber_g=self.fiber_g + other.fiber_g,
        )

    def rounded(self) -> "MacroVector":
        """Round every field to whole units for display."""
        return MacroVector(
            calories=round_half_up(self.calories),
            protein_g=round_half_up(self.protein_g),
            carbs_g=round_half_up(self.carbs_g),
            fat_g=round_half_up(self.fat_g),
            fiber_g=round_half_up(self.fiber_g),
        )


ZERO_MACROS = MacroVector(0.0, 0.0, 0.0, 0.0, 0.0)


class DietStatus(StrEnum):
    """Lifecycle of a diet."""

    ACTIVE = "active"
    SUPERSEDED = "superseded"


@dataclass(frozen=True)
class MealFoodEntry:
    """A food line inside a meal.

    ``grams`` is only set when the override layer fixes the weight (a swap);
    otherwise grams are derived from ``quantity`` on every recalculation.
    """

    food_id: str
    quantity: str
    grams: float | None = None
    active: bool = True
    swapped_from: str | None = None
    added: bool = False


@dataclass(frozen=True)
class Meal:
    """A named time slot with its food entries."""

    name: str
    time: str
    entries: tuple[MealFoodEntry, ...]
    totals: MacroVector | None = None


@dataclass(frozen=True)
class Diet:
    """A user's diet plan snapshot."""

    id: UUID
    user_id: UUID
    title: str
    meals: tuple[Meal, ...]
    goal: Goal = Goal.MAINTAIN
    status: DietStatus = DietStatus.ACTIVE
    created_at: datetime | None = None
    totals: MacroVector | None = None


@dataclass(frozen=True)
class EffectiveEntry:
    """A food line after overrides, with its display contribution."""

    food_index: int
    food_id: str
    food_name: str
    quantity: str
    grams: float
    portion_label: str
    macros: MacroVector
    micronutrients: MicronutrientVector
    swapped: bool = False
    added: bool = False


@dataclass(frozen=True)
class EffectiveMeal:
    """A meal after overrides with totals rebuilt from its entries."""

    meal_index: int
    name: str
    time: str
    entries: tuple[EffectiveEntry, ...]
    totals: MacroVector
    micronutrients: MicronutrientVector


@dataclass(frozen=True)
class RecalculationResult:
    """Effective meals and diet-level totals."""

    meals: tuple[EffectiveMeal, ...]
    totals: MacroVector
    micronutrients: MicronutrientVector
