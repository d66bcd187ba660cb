"""Validation result models."""

from dataclasses import dataclass, field

from better_food_logs.domain.foods import Food


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a food candidate."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CreateFoodResult:
    """Outcome of a create-food request."""

    ok: bool
    errors: list[str] = field(default_factory=list)
    food: Food | None = None
    duplicate: bool = False
