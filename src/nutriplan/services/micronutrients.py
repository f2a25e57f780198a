"""Micronutrient RDA percentages, alerts and report rows."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from nutriplan.domain.nutrients import (
    LIMIT_NUTRIENTS,
    NUTRIENT_INFO,
    NUTRIENT_KEYS,
    RDA_BY_SEX,
    MicronutrientVector,
    NutrientGroup,
    NutrientKey,
    parse_nutrient_key,
)
from nutriplan.domain.profile import Sex, parse_sex

LOW_ALERT_PERCENT = 50.0
HIGH_ALERT_PERCENT = 200.0
LIMIT_ALERT_PERCENT = 100.0

RdaTable = Mapping[NutrientKey, float]


class AlertSeverity(StrEnum):
    """Which threshold a nutrient crossed."""

    LOW = "low"
    HIGH = "high"


@dataclass(frozen=True)
class MicroAlert:
    """A nutrient outside its recommended range."""

    nutrient: NutrientKey
    percentage: float
    severity: AlertSeverity


@dataclass(frozen=True)
class MicroReportRow:
    """One nutrient line of the reporting view."""

    nutrient: NutrientKey
    label: str
    unit: str
    group: NutrientGroup
    amount: float
    rda: float | None
    percentage: float | None
    display_percentage: float | None


def rda_for_sex(
    sex: Sex | str, overrides: Mapping[NutrientKey, float] | None = None
) -> dict[NutrientKey, float]:
    """Default RDA table for ``sex`` with configured overrides on top.

    ``OTHER`` uses the female table, matching the BMR equation.
    """
    resolved = parse_sex(sex)
    table = dict(RDA_BY_SEX[Sex.MALE if resolved is Sex.MALE else Sex.FEMALE])
    for key, value in (overrides or {}).items():
        table[parse_nutrient_key(key)] = float(value)
    return table


def calculate_rda_percentages(
    totals: MicronutrientVector, rda: RdaTable
) -> dict[NutrientKey, float]:
    """Percentage of the RDA reached per nutrient, unclamped.

    Nutrients without a positive RDA value are left out.
    """
    percentages: dict[NutrientKey, float] = {}
    for key, amount in totals:
        rda_value = rda.get(key)
        if not rda_value or rda_value <= 0:
            continue
        percentages[key] = amount * 100 / rda_value
    return percentages


def display_percentage(percentage: float) -> float:
    """Clamp a percentage to 0-100 for progress bars."""
    return min(max(percentage, 0.0), 100.0)


def get_micro_alerts(
    totals: MicronutrientVector,
    rda: RdaTable,
    *,
    low_threshold: float = LOW_ALERT_PERCENT,
    high_threshold: float = HIGH_ALERT_PERCENT,
    limit_threshold: float = LIMIT_ALERT_PERCENT,
) -> list[MicroAlert]:
    """Flag nutrients below the low threshold or above the high one.

    Limit nutrients (sodium, cholesterol) are upper bounds: they only alert
    high, against ``limit_threshold``.
    """
    alerts: list[MicroAlert] = []
    for key, percentage in calculate_rda_percentages(totals, rda).items():
        if key in LIMIT_NUTRIENTS:
            if percentage > limit_threshold:
                alerts.append(MicroAlert(key, percentage, AlertSeverity.HIGH))
            continue
        if percentage < low_threshold:
            alerts.append(MicroAlert(key, percentage, AlertSeverity.LOW))
        elif percentage > high_threshold:
            alerts.append(MicroAlert(key, percentage, AlertSeverity.HIGH))
    return alerts


def build_micro_report(
    totals: MicronutrientVector, rda: RdaTable
) -> list[MicroReportRow]:
    """Rows for every tracked nutrient, in display order."""
    percentages = calculate_rda_percentages(totals, rda)
    rows: list[MicroReportRow] = []
    for key in NUTRIENT_KEYS:
        info = NUTRIENT_INFO[key]
        percentage = percentages.get(key)
        rows.append(
            MicroReportRow(
                nutrient=key,
                label=info.label,
                unit=info.unit,
                group=info.group,
                amount=totals[key],
                rda=rda.get(key),
                percentage=percentage,
                display_percentage=(
                    display_percentage(percentage) if percentage is not None else None
                ),
            )
        )
    return rows
