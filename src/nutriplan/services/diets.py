"""Diet service: effective diets, swaps, meal edits and micronutrient reports."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from nutriplan.domain.diets import Diet, MacroVector, Meal, RecalculationResult
from nutriplan.domain.errors import NotFoundError, ValidationError
from nutriplan.domain.foods import Food
from nutriplan.domain.nutrients import NutrientKey
from nutriplan.domain.overrides import FoodOverride, MealEdit, MealOverride
from nutriplan.domain.profile import Sex
from nutriplan.services.adaptation import DayAdaptation, MealStatus, adapt_day
from nutriplan.services.micronutrients import (
    HIGH_ALERT_PERCENT,
    LIMIT_ALERT_PERCENT,
    LOW_ALERT_PERCENT,
    MicroAlert,
    MicroReportRow,
    build_micro_report,
    get_micro_alerts,
    rda_for_sex,
)
from nutriplan.services.overrides import latest_meal_overrides, without_quantity_edits
from nutriplan.services.recalculator import FoodCatalog, recalculate_meals
from nutriplan.services.vectors import calculate_equivalent_grams

_logger = logging.getLogger(__name__)


class DietRepository(Protocol):
    """Read access to diet snapshots."""

    def get_diet(self, diet_id: UUID) -> Diet | None:
        """Return a diet by id."""


class FoodRepository(Protocol):
    """Read access to the food catalog."""

    def get_foods(self, food_ids: Iterable[str]) -> list[Food]:
        """Return the foods found for the given ids."""


class OverrideRepository(Protocol):
    """Persistence interface for food and meal overrides."""

    def list_food_overrides(self, diet_id: UUID) -> list[FoodOverride]:
        """Return food overrides in write order."""

    def list_meal_overrides(self, diet_id: UUID) -> list[MealOverride]:
        """Return meal overrides in write order."""

    def save_food_override(self, override: FoodOverride) -> FoodOverride:
        """Store a food override, replacing one at the same position."""

    def save_meal_override(self, override: MealOverride) -> MealOverride:
        """Store a meal override, replacing the meal's previous one."""


@dataclass(frozen=True)
class MicroReport:
    """Micronutrient rows for display plus the alerts to surface."""

    rows: tuple[MicroReportRow, ...]
    alerts: tuple[MicroAlert, ...]


@dataclass
class DietService:
    """Service that applies persisted overrides to diets and records new ones."""

    diets: DietRepository
    overrides: OverrideRepository
    foods: FoodRepository
    low_alert_percent: float = LOW_ALERT_PERCENT
    high_alert_percent: float = HIGH_ALERT_PERCENT
    limit_alert_percent: float = LIMIT_ALERT_PERCENT
    rda_overrides: Mapping[NutrientKey, float] = field(default_factory=dict)

    def get_effective_diet(self, diet_id: UUID) -> RecalculationResult:
        """Return the diet with every persisted override applied."""
        return self.preview(diet_id)

    def preview(
        self,
        diet_id: UUID,
        food_overrides: Iterable[FoodOverride] = (),
        meal_overrides: Iterable[MealOverride] = (),
    ) -> RecalculationResult:
        """Recalculate with extra overrides on top of the persisted ones.

        Nothing is saved; the extra overrides win over persisted ones at the
        same position.
        """
        diet = self._require_diet(diet_id)
        swaps = [*self.overrides.list_food_overrides(diet_id), *food_overrides]
        edits = [*self.overrides.list_meal_overrides(diet_id), *meal_overrides]
        return self._recalculate(diet, swaps, edits)

    def swap_food(
        self, diet_id: UUID, meal_index: int, food_index: int, new_food_id: str
    ) -> FoodOverride:
        """Replace a planned food with a calorie-equivalent amount of another."""
        diet = self._require_diet(diet_id)
        meal = _require_meal(diet, meal_index)
        if not 0 <= food_index < len(meal.entries):
            raise ValidationError(
                f"Meal {meal_index} has no planned food at {food_index}",
                diet_id=diet_id,
                meal_index=meal_index,
                food_index=food_index,
            )

        current = self.get_effective_diet(diet_id)
        entry = next(
            (
                item
                for item in current.meals[meal_index].entries
                if item.food_index == food_index
            ),
            None,
        )
        if entry is None:
            raise ValidationError(
                f"Food at {food_index} was removed from meal {meal_index}",
                diet_id=diet_id,
                meal_index=meal_index,
                food_index=food_index,
            )
        catalog = self._catalog([entry.food_id, new_food_id])
        new_food = catalog.get_food(new_food_id)
        if new_food is None:
            raise NotFoundError(
                f"Food {new_food_id} not found",
                food_id=new_food_id,
                diet_id=diet_id,
                meal_index=meal_index,
                food_index=food_index,
            )
        original_food = catalog.get_food(entry.food_id)
        if original_food is None:
            raise NotFoundError(
                f"Food {entry.food_id} not found",
                food_id=entry.food_id,
                diet_id=diet_id,
                meal_index=meal_index,
                food_index=food_index,
            )

        now = datetime.now(tz=UTC)
        override = FoodOverride(
            diet_id=diet_id,
            meal_index=meal_index,
            food_index=food_index,
            original_food_id=entry.food_id,
            new_food_id=new_food_id,
            grams=calculate_equivalent_grams(original_food, entry.grams, new_food),
            created_at=now,
        )
        meal_override = self._meal_override_for_swap(diet_id, meal_index, food_index)
        if meal_override is not None:
            meal_override = replace(meal_override, created_at=now)
        self.preview(
            diet_id,
            food_overrides=[override],
            meal_overrides=[meal_override] if meal_override is not None else [],
        )
        saved = self.overrides.save_food_override(override)
        if meal_override is not None:
            self.overrides.save_meal_override(meal_override)
        _logger.info(
            "Food override saved: diet=%s meal=%s food=%s %s -> %s (%sg)",
            diet_id,
            meal_index,
            food_index,
            override.original_food_id,
            new_food_id,
            override.grams,
        )
        return saved

    def edit_meal(
        self, diet_id: UUID, meal_index: int, edits: Iterable[MealEdit]
    ) -> MealOverride:
        """Append edits to a meal's override after checking they apply cleanly.

        Indices in ``edits`` refer to the meal as it stands after the edits
        already stored.
        """
        diet = self._require_diet(diet_id)
        _require_meal(diet, meal_index)
        previous = latest_meal_overrides(
            self.overrides.list_meal_overrides(diet_id)
        ).get(meal_index)
        override = MealOverride(
            diet_id=diet_id,
            meal_index=meal_index,
            edits=(*(previous.edits if previous else ()), *edits),
            created_at=datetime.now(tz=UTC),
        )
        self.preview(diet_id, meal_overrides=[override])
        saved = self.overrides.save_meal_override(override)
        _logger.info(
            "Meal override saved: diet=%s meal=%s edits=%s",
            diet_id,
            meal_index,
            len(override.edits),
        )
        return saved

    def micro_report(self, diet_id: UUID, sex: Sex | str) -> MicroReport:
        """Return RDA rows and alerts for the effective diet's daily totals."""
        totals = self.get_effective_diet(diet_id).micronutrients
        rda = rda_for_sex(sex, self.rda_overrides)
        return MicroReport(
            rows=tuple(build_micro_report(totals, rda)),
            alerts=tuple(
                get_micro_alerts(
                    totals,
                    rda,
                    low_threshold=self.low_alert_percent,
                    high_threshold=self.high_alert_percent,
                    limit_threshold=self.limit_alert_percent,
                )
            ),
        )

    def adapt_day(
        self,
        diet_id: UUID,
        statuses: Mapping[str, MealStatus | str],
        daily_target: MacroVector,
        extra_calories_burned: float = 0.0,
    ) -> DayAdaptation:
        """Redistribute the effective diet over the rest of the day."""
        effective = self.get_effective_diet(diet_id)
        return adapt_day(
            effective.meals, statuses, daily_target, extra_calories_burned
        )

    def _require_diet(self, diet_id: UUID) -> Diet:
        diet = self.diets.get_diet(diet_id)
        if diet is None:
            raise NotFoundError(f"Diet {diet_id} not found", diet_id=diet_id)
        return diet

    def _meal_override_for_swap(
        self, diet_id: UUID, meal_index: int, food_index: int
    ) -> MealOverride | None:
        """Return the meal's override without quantity edits on the swapped slot.

        ``None`` when the stored override has nothing to drop.
        """
        previous = latest_meal_overrides(
            self.overrides.list_meal_overrides(diet_id)
        ).get(meal_index)
        if previous is None:
            return None
        cleaned = without_quantity_edits(previous, food_index)
        if cleaned.edits == previous.edits:
            return None
        return cleaned

    def _recalculate(
        self,
        diet: Diet,
        swaps: list[FoodOverride],
        edits: list[MealOverride],
    ) -> RecalculationResult:
        food_ids = [entry.food_id for meal in diet.meals for entry in meal.entries]
        food_ids.extend(override.new_food_id for override in swaps)
        food_ids.extend(
            edit.food_id for override in edits for edit in override.edits if edit.food_id
        )
        return recalculate_meals(diet, swaps, edits, self._catalog(food_ids))

    def _catalog(self, food_ids: Iterable[str]) -> FoodCatalog:
        unique_ids = list(dict.fromkeys(food_ids))
        return FoodCatalog.of(self.foods.get_foods(unique_ids))


def _require_meal(diet: Diet, meal_index: int) -> Meal:
    if not 0 <= meal_index < len(diet.meals):
        raise ValidationError(
            f"Diet {diet.id} has no meal {meal_index}",
            diet_id=diet.id,
            meal_index=meal_index,
        )
    return diet.meals[meal_index]
