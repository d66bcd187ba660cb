"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field

from better_food_logs.domain.foods import FoodInput
from better_food_logs.domain.sync import AuthEventKind


class FoodCreateRequest(BaseModel):
    """A user-submitted food."""

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

    def to_input(self) -> FoodInput:
        return FoodInput(**self.model_dump())


class FoodLogCreateRequest(BaseModel):
    """Servings of a catalog food to log."""

    food_id: str
    servings_consumed: float = Field(gt=0)
    consumed_at_ms: int | None = None


class FoodLogUpdateRequest(BaseModel):
    servings_consumed: float = Field(gt=0)


class AuthEventRequest(BaseModel):
    """An auth provider transition."""

    kind: AuthEventKind
    user_id: str | None = None
