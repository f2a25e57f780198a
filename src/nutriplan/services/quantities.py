"""Parsing and rendering of free-form quantity strings."""

import re
from dataclasses import dataclass

from nutriplan.domain.errors import ParseError, ValidationError
from nutriplan.domain.foods import Food
from nutriplan.numbers import format_number

_QUANTITY_RE = re.compile(
    r"^\s*(?P<number>\d+(?:[.,]\d+)?)(?:\s*/\s*(?P<denominator>\d+))?"
    r"(?P<space>\s*)(?P<token>.*?)\s*$"
)

_UNIT_ALIASES = {
    "g": "g",
    "gr": "g",
    "grama": "g",
    "gramas": "g",
    "kg": "kg",
    "mg": "mg",
    "ml": "ml",
    "l": "l",
    "litro": "l",
    "litros": "l",
    "un": "unidade",
    "und": "unidade",
    "unidade": "unidade",
    "unidades": "unidade",
    "fatia": "fatia",
    "fatias": "fatia",
}

# Grams per unit for mass and volume units; volumes assume water density.
_GRAM_FACTORS = {"g": 1.0, "kg": 1000.0, "mg": 0.001, "ml": 1.0, "l": 1000.0}

PORTION_TOLERANCE = 0.1


@dataclass(frozen=True)
class ParsedQuantity:
    """Numeric magnitude and normalized unit of a quantity string."""

    amount: float
    unit: str
    token: str = ""
    spaced: bool = False
    decimal_comma: bool = False
    amount_text: str = ""


def parse_quantity(raw: str) -> ParsedQuantity:
    """Parse strings such as "150g", "2 unidades" or "1,5 xícara"."""
    match = _QUANTITY_RE.match(raw or "")
    if match is None:
        raise ParseError(raw)
    number = match.group("number")
    amount = float(number.replace(",", "."))
    denominator = match.group("denominator")
    if denominator is not None:
        if int(denominator) == 0:
            raise ParseError(raw)
        amount /= int(denominator)
    token = match.group("token")
    amount_end = match.end("denominator" if denominator is not None else "number")
    return ParsedQuantity(
        amount=amount,
        unit=_normalize_unit(token),
        token=token,
        spaced=bool(match.group("space")),
        decimal_comma="," in number,
        amount_text=raw[match.start("number") : amount_end],
    )


def scale_quantity(original: ParsedQuantity | str, ratio: float) -> str:
    """Render ``original`` scaled by ``ratio`` keeping its unit and formatting."""
    parsed = parse_quantity(original) if isinstance(original, str) else original
    if ratio < 0:
        raise ValidationError(f"Negative quantity ratio {ratio}")
    if ratio == 1 and parsed.amount_text:
        amount_text = parsed.amount_text
    else:
        amount_text = format_number(
            parsed.amount * ratio, 1, decimal_comma=parsed.decimal_comma
        )
    if not parsed.token:
        return f"{amount_text}g"
    separator = " " if parsed.spaced else ""
    return f"{amount_text}{separator}{parsed.token}"


def render_grams(grams: float) -> str:
    """Render a gram amount as a quantity string."""
    return f"{format_number(grams)}g"


def quantity_to_grams(parsed: ParsedQuantity, food: Food) -> float:
    """Convert a parsed quantity of ``food`` to grams."""
    factor = _GRAM_FACTORS.get(parsed.unit)
    if factor is not None:
        return parsed.amount * factor
    unit_grams = portion_unit_grams(food, parsed.unit)
    if unit_grams is None:
        raise ValidationError(
            f"No portion weight for unit {parsed.unit!r} of food {food.id}",
            food_id=food.id,
        )
    return parsed.amount * unit_grams


def portion_unit_grams(food: Food, unit: str) -> float | None:
    """Return grams per one ``unit`` from the food's common portions."""
    head = unit.split(" ", 1)[0]
    fallback: float | None = None
    for portion in food.common_portions:
        try:
            portion_quantity = parse_quantity(portion.name)
        except ParseError:
            continue
        if portion_quantity.amount <= 0:
            continue
        per_unit = portion.grams / portion_quantity.amount
        if portion_quantity.unit == unit:
            return per_unit
        if fallback is None and portion_quantity.unit.split(" ", 1)[0] == head:
            fallback = per_unit
    return fallback


def format_quantity(grams: float, food: Food) -> str:
    """Render grams, naming a common portion when within tolerance of it."""
    for portion in food.common_portions:
        if portion.grams <= 0:
            continue
        if abs(grams - portion.grams) / portion.grams <= PORTION_TOLERANCE:
            return f"{portion.name} ({render_grams(grams)})"
    return render_grams(grams)


def _normalize_unit(token: str) -> str:
    lowered = token.strip().lower()
    if not lowered:
        return "g"
    if lowered in _UNIT_ALIASES:
        return _UNIT_ALIASES[lowered]
    head, _, _rest = lowered.partition(" ")
    if head in _UNIT_ALIASES:
        return _UNIT_ALIASES[head]
    return lowered
