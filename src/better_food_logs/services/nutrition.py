"""Nutrition aggregation over food logs."""

import math
from collections.abc import Iterable

from better_food_logs.domain.foods import FoodLog
from better_food_logs.domain.nutrition import NutritionSummary

NUTRIENT_FIELDS = (
    "calories",
    "protein_g",
    "fat_g",
    "carbs_g",
    "sugar_g",
    "sodium_mg",
    "cholesterol_mg",
)


def summarize(logs: Iterable[FoodLog]) -> NutritionSummary:
    """Sum nutrition totals scaled by servings consumed.

    Logs without an attached food contribute nothing. Totals are not
    rounded, and ``math.fsum`` keeps them independent of log order.
    """
    terms: dict[str, list[float]] = {name: [] for name in NUTRIENT_FIELDS}
    for log in logs:
        if log.food is None:
            continue
        for name in NUTRIENT_FIELDS:
            terms[name].append(getattr(log.food, name) * log.servings_consumed)
    return NutritionSummary(**{name: math.fsum(terms[name]) for name in terms})
