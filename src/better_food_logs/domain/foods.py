"""Domain models for foods and food logs."""

from dataclasses import dataclass

ANONYMOUS_USER_ID = "anonymous"


@dataclass(frozen=True)
class Food:
    """Represents a reusable nutrition-per-serving record."""

    id: str
    name: str
    brand_name: str | None
    serving_description: str
    serving_mass_g: float | None
    serving_volume_ml: float | None
    calories: float
    protein_g: float = 0.0
    fat_g: float = 0.0
    carbs_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0
    cholesterol_mg: float = 0.0


@dataclass(frozen=True)
class FoodInput:
    """Unvalidated food candidate as submitted by a user."""

    name: str | None = None
    brand_name: str | None = None
    serving_description: str | None = None
    serving_mass_g: float | None = None
    serving_volume_ml: float | None = None
    calories: float | None = None
    protein_g: float | None = None
    fat_g: float | None = None
    carbs_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    cholesterol_mg: float | None = None


@dataclass(frozen=True)
class FoodLogEntry:
    """A consumption event that has not been persisted yet."""

    user_id: str
    food_id: str
    servings_consumed: float
    consumed_at_ms: int


@dataclass(frozen=True)
class FoodLog:
    """A persisted consumption event, optionally joined with its food."""

    id: str
    user_id: str
    food_id: str
    servings_consumed: float
    consumed_at_ms: int
    food: Food | None = None
