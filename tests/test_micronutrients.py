"""Tests for RDA percentages, alerts and the micronutrient report."""

import pytest

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.nutrients import (
    LIMIT_NUTRIENTS,
    RDA_BY_SEX,
    ZERO_MICRONUTRIENTS,
    MicronutrientVector,
    NutrientKey,
)
from nutriplan.domain.profile import Sex
from nutriplan.services.micronutrients import (
    AlertSeverity,
    MicroAlert,
    build_micro_report,
    calculate_rda_percentages,
    get_micro_alerts,
    rda_for_sex,
)


def test_vitamin_c_at_twenty_percent_alerts_low() -> None:
    totals = MicronutrientVector.from_mapping({"vitaminC": 18})
    alerts = get_micro_alerts(totals, {NutrientKey.VITAMIN_C: 90}, low_threshold=50)
    assert alerts == [MicroAlert(NutrientKey.VITAMIN_C, 20.0, AlertSeverity.LOW)]


def test_high_alert_above_threshold() -> None:
    totals = MicronutrientVector.from_mapping({"vitaminC": 200})
    alerts = get_micro_alerts(totals, {NutrientKey.VITAMIN_C: 90})
    assert len(alerts) == 1
    assert alerts[0].severity is AlertSeverity.HIGH
    assert alerts[0].percentage == pytest.approx(222.22, abs=0.01)


def test_limit_nutrients_alert_only_high() -> None:
    rda = {NutrientKey.SODIUM: 2300, NutrientKey.CHOLESTEROL: 300}

    assert get_micro_alerts(ZERO_MICRONUTRIENTS, rda) == []

    salty = MicronutrientVector.from_mapping({"sodium": 2500})
    alerts = get_micro_alerts(salty, rda)
    assert [(alert.nutrient, alert.severity) for alert in alerts] == [
        (NutrientKey.SODIUM, AlertSeverity.HIGH)
    ]


def test_zero_totals_alert_low_for_every_target_nutrient() -> None:
    alerts = get_micro_alerts(ZERO_MICRONUTRIENTS, rda_for_sex(Sex.MALE))
    flagged = {alert.nutrient for alert in alerts}
    assert flagged == set(NutrientKey) - LIMIT_NUTRIENTS
    assert all(alert.severity is AlertSeverity.LOW for alert in alerts)


def test_percentages_skip_missing_rda() -> None:
    totals = MicronutrientVector.from_mapping({"iron": 4, "zinc": 5})
    percentages = calculate_rda_percentages(totals, {NutrientKey.IRON: 8})
    assert percentages == {NutrientKey.IRON: 50.0}


def test_rda_for_sex_with_overrides() -> None:
    table = rda_for_sex("other", {"vitaminC": 100})
    assert table[NutrientKey.VITAMIN_C] == 100.0
    assert table[NutrientKey.IRON] == RDA_BY_SEX[Sex.FEMALE][NutrientKey.IRON]


def test_rda_for_sex_rejects_unknown_values() -> None:
    with pytest.raises(ValidationError):
        rda_for_sex("unknown")
    with pytest.raises(ValidationError):
        rda_for_sex(Sex.MALE, {"vitaminX": 1})


def test_build_micro_report_rows() -> None:
    totals = MicronutrientVector.from_mapping({"vitaminC": 200})
    rows = build_micro_report(totals, rda_for_sex(Sex.MALE))

    assert len(rows) == len(NutrientKey)
    vitamin_c = next(row for row in rows if row.nutrient is NutrientKey.VITAMIN_C)
    assert vitamin_c.label == "Vitamina C"
    assert vitamin_c.unit == "mg"
    assert vitamin_c.display_percentage == 100.0
    assert vitamin_c.percentage > 200
