"""Supabase repository for the food catalog."""

from collections.abc import Iterable
from dataclasses import dataclass

from supabase import Client

from nutriplan.domain.foods import Food
from nutriplan.domain.records import FoodRecord, parse_record
from nutriplan.services.diets import FoodRepository

_FOOD_COLUMNS = (
    "id, name, category, calories_per_100g, protein_per_100g, carbs_per_100g, "
    "fat_per_100g, fiber_per_100g, micronutrients, common_portions"
)


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for catalog foods."""

    client: Client

    def get_foods(self, food_ids: Iterable[str]) -> list[Food]:
        """Return the foods found for the given ids."""
        ids = list(dict.fromkeys(food_ids))
        if not ids:
            return []
        response = (
            self.client.table("foods").select(_FOOD_COLUMNS).in_("id", ids).execute()
        )
        return [_parse_food(row) for row in response.data or []]


def _parse_food(row: dict[str, object]) -> Food:
    return parse_record(FoodRecord, row).to_domain()
