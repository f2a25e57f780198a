"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from nutriplan.adapters.supabase_check_in_repository import SupabaseCheckInRepository
from nutriplan.adapters.supabase_diet_repository import SupabaseDietRepository
from nutriplan.adapters.supabase_food_repository import SupabaseFoodRepository
from nutriplan.adapters.supabase_override_repository import (
    SupabaseOverrideRepository,
)
from nutriplan.app_logging import configure_logging
from nutriplan.config import Settings, parse_nutrient_overrides
from nutriplan.services.checkins import CheckInService
from nutriplan.services.diets import DietService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    diet_service: DietService
    check_in_service: CheckInService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    diet_repository = SupabaseDietRepository(supabase_client)
    food_repository = SupabaseFoodRepository(supabase_client)
    override_repository = SupabaseOverrideRepository(supabase_client)
    check_in_repository = SupabaseCheckInRepository(supabase_client)
    diet_service = DietService(
        diets=diet_repository,
        overrides=override_repository,
        foods=food_repository,
        low_alert_percent=resolved_settings.micro_low_alert_percent,
        high_alert_percent=resolved_settings.micro_high_alert_percent,
        limit_alert_percent=resolved_settings.micro_limit_alert_percent,
        rda_overrides=parse_nutrient_overrides(resolved_settings.rda_overrides),
    )
    check_in_service = CheckInService(
        repository=check_in_repository,
        diet_repository=diet_repository,
        default_weight_kg=resolved_settings.default_weight_kg,
    )
    return AppContainer(
        settings=resolved_settings,
        diet_service=diet_service,
        check_in_service=check_in_service,
    )
