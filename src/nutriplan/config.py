"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.nutrients import NutrientKey, parse_nutrient_key

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    micro_low_alert_percent: float = 50.0
    micro_high_alert_percent: float = 200.0
    micro_limit_alert_percent: float = 100.0
    default_weight_kg: float = 70.0
    rda_overrides: str | None = None

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_nutrient_overrides(raw: str | None) -> dict[NutrientKey, float]:
    """Parse RDA overrides such as ``"vitaminC=100,iron=10"``."""
    if raw is None:
        return {}
    overrides: dict[NutrientKey, float] = {}
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        name, separator, amount = value.partition("=")
        if not separator:
            raise ValidationError(f"Invalid RDA override {value!r}")
        try:
            parsed = float(amount.strip())
        except ValueError:
            raise ValidationError(f"Invalid RDA amount in {value!r}") from None
        if parsed <= 0:
            raise ValidationError(f"RDA override must be positive: {value!r}")
        overrides[parse_nutrient_key(name.strip())] = parsed
    return overrides
