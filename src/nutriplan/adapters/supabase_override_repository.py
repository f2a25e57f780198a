"""Supabase repository for food and meal overrides."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutriplan.domain.overrides import FoodOverride, MealOverride
from nutriplan.domain.records import FoodOverrideRecord, MealOverrideRecord, parse_record
from nutriplan.services.diets import OverrideRepository


@dataclass
class SupabaseOverrideRepository(OverrideRepository):
    """Supabase implementation for overrides, one row per position."""

    client: Client

    def list_food_overrides(self, diet_id: UUID) -> list[FoodOverride]:
        """Return food overrides oldest first."""
        response = (
            self.client.table("food_overrides")
            .select(
                "diet_id, meal_index, food_index, original_food_id, new_food_id, "
                "grams, created_at"
            )
            .eq("diet_id", str(diet_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [
            parse_record(FoodOverrideRecord, row).to_domain()
            for row in response.data or []
        ]

    def list_meal_overrides(self, diet_id: UUID) -> list[MealOverride]:
        """Return meal overrides oldest first."""
        response = (
            self.client.table("meal_overrides")
            .select("diet_id, meal_index, edits, created_at")
            .eq("diet_id", str(diet_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [
            parse_record(MealOverrideRecord, row).to_domain()
            for row in response.data or []
        ]

    def save_food_override(self, override: FoodOverride) -> FoodOverride:
        """Upsert the override for (diet_id, meal_index, food_index)."""
        payload = FoodOverrideRecord.from_domain(override).model_dump(
            mode="json", exclude_none=True
        )
        response = (
            self.client.table("food_overrides")
            .upsert(payload, on_conflict="diet_id,meal_index,food_index")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save food override")
        return parse_record(FoodOverrideRecord, response.data[0]).to_domain()

    def save_meal_override(self, override: MealOverride) -> MealOverride:
        """Upsert the override for (diet_id, meal_index)."""
        payload = MealOverrideRecord.from_domain(override).model_dump(
            mode="json", exclude_none=True
        )
        response = (
            self.client.table("meal_overrides")
            .upsert(payload, on_conflict="diet_id,meal_index")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal override")
        return parse_record(MealOverrideRecord, response.data[0]).to_domain()
