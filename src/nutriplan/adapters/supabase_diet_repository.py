"""Supabase repository for diet snapshots."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutriplan.domain.diets import Diet
from nutriplan.domain.records import DietRecord, parse_record
from nutriplan.services.diets import DietRepository


@dataclass
class SupabaseDietRepository(DietRepository):
    """Supabase implementation for diets."""

    client: Client

    def get_diet(self, diet_id: UUID) -> Diet | None:
        """Return a diet by id."""
        response = (
            self.client.table("diets")
            .select("id, user_id, title, goal, status, created_at, meals, totals")
            .eq("id", str(diet_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_record(DietRecord, response.data[0]).to_domain()
