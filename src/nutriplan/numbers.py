"""Rounding helpers for displayed nutrition values."""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero, as nutrition labels do."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float, digits: int = 1, *, decimal_comma: bool = False) -> str:
    """Render a number with at most ``digits`` decimals and no trailing zeros."""
    rounded = round_half_up(value, digits)
    if rounded == int(rounded):
        text = str(int(rounded))
    else:
        text = f"{rounded:.{digits}f}".rstrip("0").rstrip(".")
    if decimal_comma:
        return text.replace(".", ",")
    return text
