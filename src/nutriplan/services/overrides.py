"""Resolution of food swaps and meal edits onto a meal.

Both resolvers are pure ``Meal -> Meal`` steps. Food overrides run first and
fix the food identity of each slot; meal overrides then add, deactivate or
re-quantify slots. Removal never shifts indices, so food overrides recorded
against later slots keep pointing at the same food.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from nutriplan.domain.diets import Meal, MealFoodEntry
from nutriplan.domain.errors import ValidationError
from nutriplan.domain.overrides import EditKind, FoodOverride, MealEdit, MealOverride
from nutriplan.services.quantities import parse_quantity, render_grams

_logger = logging.getLogger(__name__)


def latest_food_overrides(
    overrides: Iterable[FoodOverride],
) -> dict[tuple[int, int], FoodOverride]:
    """Index overrides by (meal_index, food_index); later ones win."""
    latest: dict[tuple[int, int], FoodOverride] = {}
    for override in overrides:
        latest[override.key] = override
    return latest


def latest_meal_overrides(
    overrides: Iterable[MealOverride],
) -> dict[int, MealOverride]:
    """Index meal overrides by meal_index; later ones win."""
    latest: dict[int, MealOverride] = {}
    for override in overrides:
        latest[override.meal_index] = override
    return latest


def apply_food_overrides(
    meal: Meal, overrides: Iterable[FoodOverride], *, meal_index: int
) -> Meal:
    """Swap foods in ``meal`` for every override keyed to this meal.

    Overrides pointing past the end of the meal are skipped: the meal may
    have been edited since the swap was recorded.
    """
    matching = latest_food_overrides(
        override for override in overrides if override.meal_index == meal_index
    )
    if not matching:
        return meal

    entries = list(meal.entries)
    for (_, food_index), override in sorted(matching.items()):
        if override.grams <= 0:
            raise ValidationError(
                f"Food override has non-positive grams {override.grams}",
                food_id=override.new_food_id,
                diet_id=override.diet_id,
                meal_index=meal_index,
                food_index=food_index,
            )
        if not 0 <= food_index < len(entries):
            _logger.debug(
                "Ignoring stale food override: meal=%s food=%s entries=%s",
                meal_index,
                food_index,
                len(entries),
            )
            continue
        entry = entries[food_index]
        entries[food_index] = replace(
            entry,
            food_id=override.new_food_id,
            quantity=render_grams(override.grams),
            grams=override.grams,
            swapped_from=entry.swapped_from or entry.food_id,
        )
    return replace(meal, entries=tuple(entries), totals=None)


def apply_meal_overrides(
    meal: Meal, override: MealOverride | None, *, meal_index: int | None = None
) -> Meal:
    """Apply structural edits to ``meal``; returns a meal without cached totals."""
    if override is None:
        return meal
    index = override.meal_index if meal_index is None else meal_index
    entries = list(meal.entries)
    for edit in override.edits:
        kind = _edit_kind(edit, index)
        if kind is EditKind.ADD:
            entries.append(_added_entry(edit, index, len(entries)))
        elif kind is EditKind.REMOVE:
            position = _active_position(edit, entries, index)
            entries[position] = replace(entries[position], active=False)
        else:
            position = _active_position(edit, entries, index)
            quantity = _required_quantity(edit, index, position)
            entries[position] = replace(entries[position], quantity=quantity, grams=None)
    return replace(meal, entries=tuple(entries), totals=None)


def _edit_kind(edit: MealEdit, meal_index: int) -> EditKind:
    try:
        return EditKind(str(edit.kind).lower())
    except ValueError:
        raise ValidationError(
            f"Unknown meal edit kind {edit.kind!r}", meal_index=meal_index
        ) from None


def _added_entry(edit: MealEdit, meal_index: int, position: int) -> MealFoodEntry:
    if not edit.food_id:
        raise ValidationError(
            "Added meal entry needs a food id",
            meal_index=meal_index,
            food_index=position,
        )
    quantity = _required_quantity(edit, meal_index, position)
    return MealFoodEntry(food_id=edit.food_id, quantity=quantity, added=True)


def _active_position(
    edit: MealEdit, entries: list[MealFoodEntry], meal_index: int
) -> int:
    position = edit.food_index
    if position is None or not 0 <= position < len(entries):
        raise ValidationError(
            f"Meal edit references missing entry {position}",
            meal_index=meal_index,
            food_index=position,
        )
    if not entries[position].active:
        raise ValidationError(
            f"Meal edit references removed entry {position}",
            food_id=entries[position].food_id,
            meal_index=meal_index,
            food_index=position,
        )
    return position


def _required_quantity(edit: MealEdit, meal_index: int, position: int) -> str:
    if not edit.quantity:
        raise ValidationError(
            "Meal edit needs a quantity",
            food_id=edit.food_id,
            meal_index=meal_index,
            food_index=position,
        )
    parse_quantity(edit.quantity)
    return edit.quantity


def without_quantity_edits(override: MealOverride, food_index: int) -> MealOverride:
    """Return ``override`` minus the MODIFY edits that target ``food_index``.

    A swap fixes the grams of its slot, and MODIFY edits run after swaps, so
    an older quantity edit on the same slot would undo the swap.
    """
    edits = tuple(
        edit
        for edit in override.edits
        if not (
            str(edit.kind).lower() == EditKind.MODIFY and edit.food_index == food_index
        )
    )
    return replace(override, edits=edits)
