"""Micronutrient keys, metadata, RDA tables and the nutrient vector."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.profile import Sex
from nutriplan.numbers import round_half_up


class NutrientKey(StrEnum):
    """Closed set of tracked micronutrients."""

    FIBER = "fiber"
    OMEGA3 = "omega3"
    CHOLESTEROL = "cholesterol"
    VITAMIN_A = "vitaminA"
    VITAMIN_B1 = "vitaminB1"
    VITAMIN_B2 = "vitaminB2"
    VITAMIN_B3 = "vitaminB3"
    VITAMIN_B5 = "vitaminB5"
    VITAMIN_B6 = "vitaminB6"
    VITAMIN_B9 = "vitaminB9"
    VITAMIN_B12 = "vitaminB12"
    VITAMIN_C = "vitaminC"
    VITAMIN_D = "vitaminD"
    VITAMIN_E = "vitaminE"
    VITAMIN_K = "vitaminK"
    CALCIUM = "calcium"
    IRON = "iron"
    MAGNESIUM = "magnesium"
    PHOSPHORUS = "phosphorus"
    POTASSIUM = "potassium"
    SODIUM = "sodium"
    ZINC = "zinc"
    COPPER = "copper"
    MANGANESE = "manganese"
    SELENIUM = "selenium"


NUTRIENT_KEYS: tuple[NutrientKey, ...] = tuple(NutrientKey)


class NutrientGroup(StrEnum):
    """Grouping used by the reporting view."""

    OTHER = "other"
    VITAMINS = "vitamins"
    MINERALS = "minerals"


@dataclass(frozen=True)
class NutrientInfo:
    """Display metadata for a nutrient."""

    label: str
    unit: str
    group: NutrientGroup


NUTRIENT_INFO: dict[NutrientKey, NutrientInfo] = {
    NutrientKey.FIBER: NutrientInfo("Fibra", "g", NutrientGroup.OTHER),
    NutrientKey.OMEGA3: NutrientInfo("Ômega-3", "g", NutrientGroup.OTHER),
    NutrientKey.CHOLESTEROL: NutrientInfo("Colesterol", "mg", NutrientGroup.OTHER),
    NutrientKey.VITAMIN_A: NutrientInfo("Vitamina A", "mcg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_B1: NutrientInfo("Vitamina B1", "mg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_B2: NutrientInfo("Vitamina B2", "mg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_B3: NutrientInfo("Vitamina B3", "mg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_B5: NutrientInfo("Vitamina B5", "mg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_B6: NutrientInfo("Vitamina B6", "mg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_B9: NutrientInfo("Folato (B9)", "mcg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_B12: NutrientInfo(
        "Vitamina B12", "mcg", NutrientGroup.VITAMINS
    ),
    NutrientKey.VITAMIN_C: NutrientInfo("Vitamina C", "mg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_D: NutrientInfo("Vitamina D", "mcg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_E: NutrientInfo("Vitamina E", "mg", NutrientGroup.VITAMINS),
    NutrientKey.VITAMIN_K: NutrientInfo("Vitamina K", "mcg", NutrientGroup.VITAMINS),
    NutrientKey.CALCIUM: NutrientInfo("Cálcio", "mg", NutrientGroup.MINERALS),
    NutrientKey.IRON: NutrientInfo("Ferro", "mg", NutrientGroup.MINERALS),
    NutrientKey.MAGNESIUM: NutrientInfo("Magnésio", "mg", NutrientGroup.MINERALS),
    NutrientKey.PHOSPHORUS: NutrientInfo("Fósforo", "mg", NutrientGroup.MINERALS),
    NutrientKey.POTASSIUM: NutrientInfo("Potássio", "mg", NutrientGroup.MINERALS),
    NutrientKey.SODIUM: NutrientInfo("Sódio", "mg", NutrientGroup.MINERALS),
    NutrientKey.ZINC: NutrientInfo("Zinco", "mg", NutrientGroup.MINERALS),
    NutrientKey.COPPER: NutrientInfo("Cobre", "mg", NutrientGroup.MINERALS),
    NutrientKey.MANGANESE: NutrientInfo("Manganês", "mg", NutrientGroup.MINERALS),
    NutrientKey.SELENIUM: NutrientInfo("Selênio", "mcg", NutrientGroup.MINERALS),
}

# Upper limits rather than targets: alerts fire when these run high.
LIMIT_NUTRIENTS = frozenset({NutrientKey.SODIUM, NutrientKey.CHOLESTEROL})

# NIH Dietary Reference Intakes, adults 19-50. Sodium and cholesterol are ULs.
RDA_BY_SEX: dict[Sex, dict[NutrientKey, float]] = {
    Sex.MALE: {
        NutrientKey.FIBER: 38,
        NutrientKey.OMEGA3: 1.6,
        NutrientKey.CHOLESTEROL: 300,
        NutrientKey.VITAMIN_A: 900,
        NutrientKey.VITAMIN_B1: 1.2,
        NutrientKey.VITAMIN_B2: 1.3,
        NutrientKey.VITAMIN_B3: 16,
        NutrientKey.VITAMIN_B5: 5,
        NutrientKey.VITAMIN_B6: 1.3,
        NutrientKey.VITAMIN_B9: 400,
        NutrientKey.VITAMIN_B12: 2.4,
        NutrientKey.VITAMIN_C: 90,
        NutrientKey.VITAMIN_D: 15,
        NutrientKey.VITAMIN_E: 15,
        NutrientKey.VITAMIN_K: 120,
        NutrientKey.CALCIUM: 1000,
        NutrientKey.IRON: 8,
        NutrientKey.MAGNESIUM: 420,
        NutrientKey.PHOSPHORUS: 700,
        NutrientKey.POTASSIUM: 3400,
        NutrientKey.SODIUM: 2300,
        NutrientKey.ZINC: 11,
        NutrientKey.COPPER: 0.9,
        NutrientKey.MANGANESE: 2.3,
        NutrientKey.SELENIUM: 55,
    },
    Sex.FEMALE: {
        NutrientKey.FIBER: 25,
        NutrientKey.OMEGA3: 1.1,
        NutrientKey.CHOLESTEROL: 300,
        NutrientKey.VITAMIN_A: 700,
        NutrientKey.VITAMIN_B1: 1.1,
        NutrientKey.VITAMIN_B2: 1.1,
        NutrientKey.VITAMIN_B3: 14,
        NutrientKey.VITAMIN_B5: 5,
        NutrientKey.VITAMIN_B6: 1.3,
        NutrientKey.VITAMIN_B9: 400,
        NutrientKey.VITAMIN_B12: 2.4,
        NutrientKey.VITAMIN_C: 75,
        NutrientKey.VITAMIN_D: 15,
        NutrientKey.VITAMIN_E: 15,
        NutrientKey.VITAMIN_K: 90,
        NutrientKey.CALCIUM: 1000,
        NutrientKey.IRON: 18,
        NutrientKey.MAGNESIUM: 320,
        NutrientKey.PHOSPHORUS: 700,
        NutrientKey.POTASSIUM: 2600,
        NutrientKey.SODIUM: 2300,
        NutrientKey.ZINC: 8,
        NutrientKey.COPPER: 0.9,
        NutrientKey.MANGANESE: 1.8,
        NutrientKey.SELENIUM: 55,
    },
}


def parse_nutrient_key(value: str | NutrientKey) -> NutrientKey:
    """Return the nutrient key for a name, raising ValidationError if unknown."""
    try:
        return NutrientKey(value)
    except ValueError:
        raise ValidationError(f"Unknown nutrient {value!r}") from None


@dataclass(frozen=True)
class MicronutrientVector:
    """Amounts for every tracked nutrient, in each nutrient's natural unit.

    Values are stored positionally in ``NUTRIENT_KEYS`` order so the vector is
    always total: a missing nutrient is a zero, never an absent key.
    """

    values: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.values) != len(NUTRIENT_KEYS):
            raise ValidationError(
                f"Expected {len(NUTRIENT_KEYS)} nutrient values, "
                f"got {len(self.values)}"
            )
        for key, value in zip(NUTRIENT_KEYS, self.values, strict=True):
            if value < 0:
                raise ValidationError(f"Negative amount for {key}: {value}")

    @classmethod
    def zero(cls) -> "MicronutrientVector":
        return cls(tuple(0.0 for _ in NUTRIENT_KEYS))

    @classmethod
    def from_mapping(
        cls, amounts: Mapping[str, float] | Mapping[NutrientKey, float]
    ) -> "MicronutrientVector":
        """Build a vector from a partial mapping, zero-filling missing keys."""
        resolved: dict[NutrientKey, float] = {}
        for name, amount in amounts.items():
            resolved[parse_nutrient_key(name)] = float(amount)
        return cls(tuple(resolved.get(key, 0.0) for key in NUTRIENT_KEYS))

    def __getitem__(self, key: NutrientKey | str) -> float:
        return self.values[NUTRIENT_KEYS.index(parse_nutrient_key(key))]

    def __iter__(self) -> Iterator[tuple[NutrientKey, float]]:
        return iter(zip(NUTRIENT_KEYS, self.values, strict=True))

    def as_dict(self) -> dict[str, float]:
        return {key.value: value for key, value in self}

    def scale(self, ratio: float) -> "MicronutrientVector":
        if ratio < 0:
            raise ValidationError(f"Negative scale ratio {ratio}")
        return MicronutrientVector(tuple(value * ratio for value in self.values))

    def rounded(self, digits: int = 1) -> "MicronutrientVector":
        return MicronutrientVector(
            tuple(round_half_up(value, digits) for value in self.values)
        )


ZERO_MICRONUTRIENTS = MicronutrientVector.zero()
