"""Shared test fixtures."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID, uuid4

import pytest

from nutriplan.config import Settings
from nutriplan.domain.checkins import CheckIn
from nutriplan.domain.diets import Diet, Meal, MealFoodEntry
from nutriplan.domain.foods import CommonPortion, Food, FoodCategory
from nutriplan.domain.nutrients import MicronutrientVector
from nutriplan.domain.overrides import FoodOverride, MealOverride
from nutriplan.services.checkins import CheckInRepository, CheckInService
from nutriplan.services.diets import (
    DietRepository,
    DietService,
    FoodRepository,
    OverrideRepository,
)
from nutriplan.services.recalculator import FoodCatalog

FOOD_A = Food(
    id="food-a",
    name="Food A",
    category=FoodCategory.GRAINS,
    calories_per_100g=200,
    protein_per_100g=10,
    carbs_per_100g=30,
    fat_per_100g=4,
    micronutrients_per_100g=MicronutrientVector.from_mapping(
        {"vitaminC": 10, "iron": 2}
    ),
)
FOOD_B = Food(
    id="food-b",
    name="Food B",
    category=FoodCategory.PROTEINS,
    calories_per_100g=150,
    protein_per_100g=20,
    carbs_per_100g=0,
    fat_per_100g=8,
    micronutrients_per_100g=MicronutrientVector.from_mapping({"iron": 4}),
)
FOOD_C = Food(
    id="food-c",
    name="Food C",
    category=FoodCategory.GRAINS,
    calories_per_100g=250,
    protein_per_100g=5,
    carbs_per_100g=50,
    fat_per_100g=2,
)
RICE = Food(
    id="rice",
    name="Arroz branco cozido",
    category=FoodCategory.GRAINS,
    calories_per_100g=128,
    protein_per_100g=2.5,
    carbs_per_100g=28,
    fat_per_100g=0.2,
    fiber_per_100g=1.6,
    common_portions=(CommonPortion("1 xícara", 160),),
)
EGG = Food(
    id="egg",
    name="Ovo cozido",
    category=FoodCategory.PROTEINS,
    calories_per_100g=146,
    protein_per_100g=13.3,
    carbs_per_100g=0.6,
    fat_per_100g=9.5,
    micronutrients_per_100g=MicronutrientVector.from_mapping(
        {"cholesterol": 397, "vitaminB12": 1}
    ),
    common_portions=(CommonPortion("1 unidade", 50),),
)
WATER = Food(
    id="water",
    name="Água",
    category=FoodCategory.BEVERAGES,
    calories_per_100g=0,
    protein_per_100g=0,
    carbs_per_100g=0,
    fat_per_100g=0,
)

ALL_FOODS = (FOOD_A, FOOD_B, FOOD_C, RICE, EGG, WATER)


def make_diet(*meals: Meal, user_id: UUID | None = None) -> Diet:
    return Diet(
        id=uuid4(),
        user_id=user_id or uuid4(),
        title="Plano teste",
        meals=meals,
    )


def swap_diet() -> Diet:
    """Two meals: A+B at breakfast (275 kcal), rice and eggs at lunch."""
    return make_diet(
        Meal(
            name="Café da manhã",
            time="07:00",
            entries=(
                MealFoodEntry(food_id="food-a", quantity="100g"),
                MealFoodEntry(food_id="food-b", quantity="50g"),
            ),
        ),
        Meal(
            name="Almoço",
            time="12:00",
            entries=(
                MealFoodEntry(food_id="rice", quantity="1 xícara"),
                MealFoodEntry(food_id="egg", quantity="2 unidades"),
            ),
        ),
    )


@pytest.fixture
def catalog() -> FoodCatalog:
    return FoodCatalog.of(ALL_FOODS)


@dataclass
class InMemoryDietRepository(DietRepository):
    """In-memory diet repository for tests."""

    diets: dict[UUID, Diet] = field(default_factory=dict)

    def add(self, diet: Diet) -> Diet:
        self.diets[diet.id] = diet
        return diet

    def get_diet(self, diet_id: UUID) -> Diet | None:
        return self.diets.get(diet_id)


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food catalog for tests."""

    foods: dict[str, Food] = field(
        default_factory=lambda: {food.id: food for food in ALL_FOODS}
    )
    requested: list[list[str]] = field(default_factory=list)

    def get_foods(self, food_ids: Iterable[str]) -> list[Food]:
        ids = list(food_ids)
        self.requested.append(ids)
        return [self.foods[food_id] for food_id in ids if food_id in self.foods]


@dataclass
class InMemoryOverrideRepository(OverrideRepository):
    """In-memory override store keeping one row per position."""

    food_overrides: list[FoodOverride] = field(default_factory=list)
    meal_overrides: list[MealOverride] = field(default_factory=list)

    def list_food_overrides(self, diet_id: UUID) -> list[FoodOverride]:
        return [item for item in self.food_overrides if item.diet_id == diet_id]

    def list_meal_overrides(self, diet_id: UUID) -> list[MealOverride]:
        return [item for item in self.meal_overrides if item.diet_id == diet_id]

    def save_food_override(self, override: FoodOverride) -> FoodOverride:
        self.food_overrides = [
            item
            for item in self.food_overrides
            if (item.diet_id, item.key) != (override.diet_id, override.key)
        ]
        self.food_overrides.append(override)
        return override

    def save_meal_override(self, override: MealOverride) -> MealOverride:
        self.meal_overrides = [
            item
            for item in self.meal_overrides
            if (item.diet_id, item.meal_index)
            != (override.diet_id, override.meal_index)
        ]
        self.meal_overrides.append(override)
        return override


@dataclass
class InMemoryCheckInRepository(CheckInRepository):
    """In-memory check-in store keyed by (user_id, day)."""

    check_ins: dict[tuple[UUID, date], CheckIn] = field(default_factory=dict)

    def upsert_check_in(self, check_in: CheckIn) -> CheckIn:
        self.check_ins[(check_in.user_id, check_in.day)] = check_in
        return check_in

    def get_check_in(self, user_id: UUID, day: date) -> CheckIn | None:
        return self.check_ins.get((user_id, day))

    def list_check_ins(self, user_id: UUID, since: date | None = None) -> list[CheckIn]:
        rows = [
            check_in
            for (owner, day), check_in in self.check_ins.items()
            if owner == user_id and (since is None or day >= since)
        ]
        return sorted(rows, key=lambda item: item.day, reverse=True)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
    )


@pytest.fixture
def diet_repository() -> InMemoryDietRepository:
    return InMemoryDietRepository()


@pytest.fixture
def override_repository() -> InMemoryOverrideRepository:
    return InMemoryOverrideRepository()


@pytest.fixture
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture
def diet_service(
    diet_repository: InMemoryDietRepository,
    override_repository: InMemoryOverrideRepository,
    food_repository: InMemoryFoodRepository,
) -> DietService:
    return DietService(
        diets=diet_repository,
        overrides=override_repository,
        foods=food_repository,
    )


@pytest.fixture
def check_in_repository() -> InMemoryCheckInRepository:
    return InMemoryCheckInRepository()


@pytest.fixture
def check_in_service(
    check_in_repository: InMemoryCheckInRepository,
    diet_repository: InMemoryDietRepository,
) -> CheckInService:
    return CheckInService(
        repository=check_in_repository, diet_repository=diet_repository
    )
