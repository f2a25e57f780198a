"""Override records applied on top of a diet at read time."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


@dataclass(frozen=True)
class FoodOverride:
    """Swap of the food at (meal_index, food_index) for a calorie-equivalent one."""

    diet_id: UUID
    meal_index: int
    food_index: int
    original_food_id: str
    new_food_id: str
    grams: float
    created_at: datetime | None = None

    @property
    def key(self) -> tuple[int, int]:
        return (self.meal_index, self.food_index)


class EditKind(StrEnum):
    """Structural edit applied to a meal."""

    ADD = "add"
    REMOVE = "remove"
    MODIFY = "modify"


@dataclass(frozen=True)
class MealEdit:
    """Single meal edit; ``kind`` is validated when the edit is applied."""

    kind: str
    food_index: int | None = None
    food_id: str | None = None
    quantity: str | None = None


@dataclass(frozen=True)
class MealOverride:
    """Manual edits to one meal of a diet."""

    diet_id: UUID
    meal_index: int
    edits: tuple[MealEdit, ...]
    created_at: datetime | None = None
