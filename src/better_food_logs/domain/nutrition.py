"""Nutrition domain models."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class NutritionSummary:
    """Summed nutrition totals over a set of food logs."""

    calories: float = 0.0
    protein_g: float = 0.0
    fat_g: float = 0.0
    carbs_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0
    cholesterol_mg: float = 0.0


@dataclass(frozen=True)
class DailySummary:
    """Totals for a single calendar day."""

    day: date
    totals: NutritionSummary
    meal_count: int


@dataclass(frozen=True)
class PeriodSummary:
    """Totals, per-day breakdown and averages over a trailing window."""

    days: int
    totals: NutritionSummary
    daily: list[DailySummary]
    meal_count: int
    avg_calories: float
    avg_protein_g: float
