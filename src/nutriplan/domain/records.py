"""Row models for persisted diets, foods, overrides and check-ins.

Rows read from storage are validated here before they reach the engine;
malformed rows raise the engine's ``ValidationError``.
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import TypeVar
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from nutriplan.domain.checkins import CheckIn, ExerciseLog, MealCheckIn
from nutriplan.domain.diets import Diet, DietStatus, MacroVector, Meal, MealFoodEntry
from nutriplan.domain.errors import ValidationError
from nutriplan.domain.foods import CommonPortion, Food, FoodCategory
from nutriplan.domain.nutrients import MicronutrientVector
from nutriplan.domain.overrides import FoodOverride, MealEdit, MealOverride
from nutriplan.domain.profile import Goal

RecordT = TypeVar("RecordT", bound=BaseModel)


def parse_record(model: type[RecordT], row: Mapping[str, object]) -> RecordT:
    """Validate a storage row, raising ValidationError when it is malformed."""
    try:
        return model.model_validate(row)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Malformed {model.__name__}: {exc.error_count()} invalid field(s)"
        ) from exc


class MacroRecord(BaseModel):
    """Cached macro totals stored with a diet snapshot."""

    calories: float = Field(ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    fiber_g: float = Field(default=0.0, ge=0)

    def to_domain(self) -> MacroVector:
        return MacroVector(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
            fiber_g=self.fiber_g,
        )


class CommonPortionRecord(BaseModel):
    name: str
    grams: float = Field(gt=0)


class FoodRecord(BaseModel):
    """Row of the ``foods`` table."""

    id: str
    name: str
    category: FoodCategory = FoodCategory.OTHERS
    calories_per_100g: float = Field(ge=0)
    protein_per_100g: float = Field(default=0.0, ge=0)
    carbs_per_100g: float = Field(default=0.0, ge=0)
    fat_per_100g: float = Field(default=0.0, ge=0)
    fiber_per_100g: float = Field(default=0.0, ge=0)
    micronutrients: dict[str, float] = Field(default_factory=dict)
    common_portions: list[CommonPortionRecord] = Field(default_factory=list)

    def to_domain(self) -> Food:
        return Food(
            id=self.id,
            name=self.name,
            category=self.category,
            calories_per_100g=self.calories_per_100g,
            protein_per_100g=self.protein_per_100g,
            carbs_per_100g=self.carbs_per_100g,
            fat_per_100g=self.fat_per_100g,
            fiber_per_100g=self.fiber_per_100g,
            micronutrients_per_100g=MicronutrientVector.from_mapping(
                self.micronutrients
            ),
            common_portions=tuple(
                CommonPortion(name=portion.name, grams=portion.grams)
                for portion in self.common_portions
            ),
        )


class MealFoodRecord(BaseModel):
    food_id: str
    quantity: str = Field(min_length=1)


class MealRecord(BaseModel):
    name: str
    time: str = ""
    foods: list[MealFoodRecord] = Field(default_factory=list)
    totals: MacroRecord | None = None

    def to_domain(self) -> Meal:
        return Meal(
            name=self.name,
            time=self.time,
            entries=tuple(
                MealFoodEntry(food_id=food.food_id, quantity=food.quantity)
                for food in self.foods
            ),
            totals=self.totals.to_domain() if self.totals else None,
        )


class DietRecord(BaseModel):
    """Row of the ``diets`` table; meals are stored as a JSON document."""

    id: UUID
    user_id: UUID
    title: str = ""
    goal: Goal = Goal.MAINTAIN
    status: DietStatus = DietStatus.ACTIVE
    created_at: datetime | None = None
    meals: list[MealRecord] = Field(default_factory=list)
    totals: MacroRecord | None = None

    def to_domain(self) -> Diet:
        return Diet(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            meals=tuple(meal.to_domain() for meal in self.meals),
            goal=self.goal,
            status=self.status,
            created_at=self.created_at,
            totals=self.totals.to_domain() if self.totals else None,
        )


class FoodOverrideRecord(BaseModel):
    """Row of the ``food_overrides`` table."""

    diet_id: UUID
    meal_index: int = Field(ge=0)
    food_index: int = Field(ge=0)
    original_food_id: str
    new_food_id: str
    grams: float = Field(gt=0)
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, override: FoodOverride) -> "FoodOverrideRecord":
        return cls(
            diet_id=override.diet_id,
            meal_index=override.meal_index,
            food_index=override.food_index,
            original_food_id=override.original_food_id,
            new_food_id=override.new_food_id,
            grams=override.grams,
            created_at=override.created_at,
        )

    def to_domain(self) -> FoodOverride:
        return FoodOverride(
            diet_id=self.diet_id,
            meal_index=self.meal_index,
            food_index=self.food_index,
            original_food_id=self.original_food_id,
            new_food_id=self.new_food_id,
            grams=self.grams,
            created_at=self.created_at,
        )


class MealEditRecord(BaseModel):
    kind: str
    food_index: int | None = Field(default=None, ge=0)
    food_id: str | None = None
    quantity: str | None = None


class MealOverrideRecord(BaseModel):
    """Row of the ``meal_overrides`` table; edits are a JSON list."""

    diet_id: UUID
    meal_index: int = Field(ge=0)
    edits: list[MealEditRecord] = Field(default_factory=list)
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, override: MealOverride) -> "MealOverrideRecord":
        return cls(
            diet_id=override.diet_id,
            meal_index=override.meal_index,
            edits=[
                MealEditRecord(
                    kind=str(edit.kind),
                    food_index=edit.food_index,
                    food_id=edit.food_id,
                    quantity=edit.quantity,
                )
                for edit in override.edits
            ],
            created_at=override.created_at,
        )

    def to_domain(self) -> MealOverride:
        return MealOverride(
            diet_id=self.diet_id,
            meal_index=self.meal_index,
            edits=tuple(
                MealEdit(
                    kind=edit.kind,
                    food_index=edit.food_index,
                    food_id=edit.food_id,
                    quantity=edit.quantity,
                )
                for edit in self.edits
            ),
            created_at=self.created_at,
        )


class MealCheckInRecord(BaseModel):
    meal_name: str
    completed: bool = False
    completed_at: datetime | None = None
    notes: str | None = Field(default=None, max_length=500)


class ExerciseLogRecord(BaseModel):
    exercise_name: str
    category: str = ""
    duration_minutes: float = Field(ge=0)
    calories_burned: float = Field(default=0.0, ge=0)
    is_extra: bool = False


class CheckInRecord(BaseModel):
    """Row of the ``check_ins`` table, unique per (user_id, day)."""

    id: UUID | None = None
    user_id: UUID
    diet_id: UUID
    day: date
    meals: list[MealCheckInRecord] = Field(default_factory=list)
    exercises: list[ExerciseLogRecord] = Field(default_factory=list)
    adherence_rate: int = Field(ge=0, le=100)
    total_calories_burned: float = Field(default=0.0, ge=0)

    @classmethod
    def from_domain(cls, check_in: CheckIn) -> "CheckInRecord":
        return cls(
            id=check_in.id,
            user_id=check_in.user_id,
            diet_id=check_in.diet_id,
            day=check_in.day,
            meals=[
                MealCheckInRecord(
                    meal_name=meal.meal_name,
                    completed=meal.completed,
                    completed_at=meal.completed_at,
                    notes=meal.notes,
                )
                for meal in check_in.meals
            ],
            exercises=[
                ExerciseLogRecord(
                    exercise_name=log.exercise_name,
                    category=log.category,
                    duration_minutes=log.duration_minutes,
                    calories_burned=log.calories_burned,
                    is_extra=log.is_extra,
                )
                for log in check_in.exercises
            ],
            adherence_rate=check_in.adherence_rate,
            total_calories_burned=check_in.total_calories_burned,
        )

    def to_domain(self) -> CheckIn:
        return CheckIn(
            id=self.id,
            user_id=self.user_id,
            diet_id=self.diet_id,
            day=self.day,
            meals=tuple(
                MealCheckIn(
                    meal_name=meal.meal_name,
                    completed=meal.completed,
                    completed_at=meal.completed_at,
                    notes=meal.notes,
                )
                for meal in self.meals
            ),
            exercises=tuple(
                ExerciseLog(
                    exercise_name=log.exercise_name,
                    category=log.category,
                    duration_minutes=log.duration_minutes,
                    calories_burned=log.calories_burned,
                    is_extra=log.is_extra,
                )
                for log in self.exercises
            ),
            adherence_rate=self.adherence_rate,
            total_calories_burned=self.total_calories_burned,
        )
