"""Error types raised by the nutrition engine."""

from uuid import UUID


class NutriplanError(Exception):
    """Base error carrying the identifiers needed for an actionable message."""

    def __init__(  # noqa: PLR0913
        self,
        message: str,
        *,
        food_id: str | None = None,
        diet_id: UUID | None = None,
        meal_index: int | None = None,
        food_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.food_id = food_id
        self.diet_id = diet_id
        self.meal_index = meal_index
        self.food_index = food_index


class ParseError(NutriplanError):
    """A quantity string has no numeric magnitude."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"Cannot parse quantity {raw!r}")
        self.raw = raw


class ValidationError(NutriplanError):
    """Malformed input: unknown edit kind, zero-calorie divisor, bad override."""


class NotFoundError(NutriplanError):
    """A referenced record is absent from its lookup."""


class ConflictError(NutriplanError):
    """Reserved for persistence collaborators."""
