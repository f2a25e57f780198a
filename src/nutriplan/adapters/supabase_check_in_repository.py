"""Supabase repository for daily check-ins."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from nutriplan.domain.checkins import CheckIn
from nutriplan.domain.records import CheckInRecord, parse_record
from nutriplan.services.checkins import CheckInRepository

_CHECK_IN_COLUMNS = (
    "id, user_id, diet_id, day, meals, exercises, adherence_rate, "
    "total_calories_burned"
)


@dataclass
class SupabaseCheckInRepository(CheckInRepository):
    """Supabase implementation for check-ins, unique per user and day."""

    client: Client

    def upsert_check_in(self, check_in: CheckIn) -> CheckIn:
        """Insert or replace the check-in for (user_id, day)."""
        payload = CheckInRecord.from_domain(check_in).model_dump(
            mode="json", exclude_none=True
        )
        response = (
            self.client.table("check_ins")
            .upsert(payload, on_conflict="user_id,day")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save check-in")
        return _parse_check_in(response.data[0])

    def get_check_in(self, user_id: UUID, day: date) -> CheckIn | None:
        """Return the check-in for a day."""
        response = (
            self.client.table("check_ins")
            .select(_CHECK_IN_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("day", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_check_in(response.data[0])

    def list_check_ins(self, user_id: UUID, since: date | None = None) -> list[CheckIn]:
        """Return check-ins newest first."""
        query = (
            self.client.table("check_ins")
            .select(_CHECK_IN_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if since is not None:
            query = query.gte("day", since.isoformat())
        response = query.order("day", desc=True).execute()
        return [_parse_check_in(row) for row in response.data or []]


def _parse_check_in(row: dict[str, object]) -> CheckIn:
    return parse_record(CheckInRecord, row).to_domain()
