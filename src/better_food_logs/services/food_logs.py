"""Food logging operations over the active store."""

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum

from better_food_logs.domain.foods import (
    ANONYMOUS_USER_ID,
    Food,
    FoodInput,
    FoodLog,
    FoodLogEntry,
)
from better_food_logs.domain.nutrition import DailySummary, PeriodSummary
from better_food_logs.domain.validation import CreateFoodResult
from better_food_logs.services.catalog import CatalogService
from better_food_logs.services.local_store import LocalStore
from better_food_logs.services.remote_store import RemoteStore
from better_food_logs.services.stats import StatsService
from better_food_logs.services.validation import (
    format_number,
    is_duplicate,
    sanitize,
    validate_food,
)

DUPLICATE_FOOD_ERROR = "A food with the same name and brand already exists"

_NUMERIC_FIELDS = (
    "serving_mass_g",
    "serving_volume_ml",
    "calories",
    "protein_g",
    "fat_g",
    "carbs_g",
    "sugar_g",
    "sodium_mg",
    "cholesterol_mg",
)

_logger = logging.getLogger(__name__)


class ActiveStore(str, Enum):
    """The store that serves a call."""

    LOCAL = "local"
    REMOTE = "remote"

    @classmethod
    def for_user(cls, user_id: str | None) -> "ActiveStore":
        """Signed-in users use the remote store, everyone else the local one."""
        return cls.REMOTE if user_id else cls.LOCAL


@dataclass
class FoodLogService:
    """Reads and writes foods and logs against the store for the caller.

    The active store is resolved from ``user_id`` on every call. Remote
    writes that fail are retried against the local store.
    """

    local_store: LocalStore
    remote_store: RemoteStore
    catalog_service: CatalogService
    stats_service: StatsService

    def load_foods(self, user_id: str | None) -> list[Food]:
        """Return the food catalog of the active store."""
        if ActiveStore.for_user(user_id) is ActiveStore.REMOTE:
            foods = self.remote_store.get_foods()
            if foods:
                return foods
            _logger.warning("Remote foods unavailable for user %s; using local", user_id)
        self.catalog_service.ensure_local_seed()
        return self.local_store.get_foods()

    def find_food(self, food_id: str, user_id: str | None) -> Food | None:
        """Return a food from the active catalog by id."""
        for food in self.load_foods(user_id):
            if food.id == food_id:
                return food
        return None

    def search_foods(
        self, query: str | None, user_id: str | None, limit: int = 20
    ) -> list[Food]:
        """Match foods whose name or brand contains the query."""
        foods = self.load_foods(user_id)
        needle = sanitize(query or "").lower()
        if not needle:
            return foods[:limit]
        matches = [
            food
            for food in foods
            if needle in food.name.lower()
            or (food.brand_name and needle in food.brand_name.lower())
        ]
        return matches[:limit]

    def load_food_logs(self, user_id: str | None) -> list[FoodLog]:
        """Return the caller's logs with foods attached, newest first."""
        if ActiveStore.for_user(user_id) is ActiveStore.REMOTE:
            return self.remote_store.get_food_logs(user_id)
        foods = {food.id: food for food in self.local_store.get_foods()}
        joined = []
        for log in self.local_store.get_food_logs():
            food = foods.get(log.food_id)
            if food is None:
                _logger.warning(
                    "Dropping orphaned local food log: id=%s food_id=%s",
                    log.id,
                    log.food_id,
                )
                continue
            joined.append(replace(log, food=food))
        return sorted(joined, key=lambda log: log.consumed_at_ms, reverse=True)

    def create_food(self, candidate: FoodInput, user_id: str | None) -> CreateFoodResult:
        """Validate, deduplicate and store a new food."""
        cleaned = _clean_input(candidate)
        result = validate_food(cleaned)
        if not result.is_valid:
            return CreateFoodResult(ok=False, errors=result.errors)
        if is_duplicate(cleaned, self.load_foods(user_id)):
            return CreateFoodResult(
                ok=False, errors=[DUPLICATE_FOOD_ERROR], duplicate=True
            )

        food = _to_food(cleaned)
        if ActiveStore.for_user(user_id) is ActiveStore.REMOTE:
            stored = self.remote_store.add_food(food)
            if stored is not None:
                return CreateFoodResult(ok=True, food=stored)
            _logger.warning("Saving food locally after remote failure: user=%s", user_id)
        return CreateFoodResult(ok=True, food=self.local_store.add_food(food))

    def log_food(
        self,
        food: Food,
        servings: float,
        user_id: str | None,
        consumed_at_ms: int | None = None,
    ) -> FoodLog:
        """Record servings of a food as consumed."""
        entry = FoodLogEntry(
            user_id=user_id or ANONYMOUS_USER_ID,
            food_id=food.id,
            servings_consumed=_positive_servings(servings),
            consumed_at_ms=consumed_at_ms if consumed_at_ms is not None else _now_ms(),
        )
        if ActiveStore.for_user(user_id) is ActiveStore.REMOTE:
            stored = self.remote_store.add_food_log(entry)
            if stored is not None:
                return replace(stored, food=food)
            _logger.warning("Saving food log locally after remote failure: %s", entry)
        self._ensure_local_food(food)
        return replace(self.local_store.add_food_log(entry), food=food)

    def edit_log(self, log_id: str, servings: float, user_id: str | None) -> bool:
        """Change the servings of a log; False if it was not found."""
        servings_consumed = _positive_servings(servings)
        if ActiveStore.for_user(user_id) is ActiveStore.REMOTE:
            if self.remote_store.update_food_log(log_id, servings_consumed):
                return True
            _logger.warning("Updating food log %s locally after remote miss", log_id)
        return self.local_store.update_food_log(log_id, servings_consumed)

    def delete_log(self, log_id: str, user_id: str | None) -> bool:
        """Delete a log; False if it was not found."""
        if ActiveStore.for_user(user_id) is ActiveStore.REMOTE:
            if self.remote_store.delete_food_log(log_id):
                return True
            _logger.warning("Deleting food log %s locally after remote miss", log_id)
        return self.local_store.delete_food_log(log_id)

    def get_today_summary(self, user_id: str | None) -> DailySummary:
        """Return today's nutrition totals."""
        return self.stats_service.get_today(self.load_food_logs(user_id))

    def get_period_summary(self, days: int, user_id: str | None) -> PeriodSummary:
        """Return nutrition totals for the trailing number of days."""
        return self.stats_service.get_period(self.load_food_logs(user_id), days)

    def _ensure_local_food(self, food: Food) -> None:
        """Copy a food into the local store so a local log can resolve it."""
        if any(existing.id == food.id for existing in self.local_store.get_foods()):
            return
        self.local_store.add_food(food)


def _clean_input(candidate: FoodInput) -> FoodInput:
    numbers = {
        name: format_number(value)
        for name in _NUMERIC_FIELDS
        if (value := getattr(candidate, name)) is not None
    }
    brand = sanitize(candidate.brand_name or "")
    return replace(
        candidate,
        name=sanitize(candidate.name or ""),
        brand_name=brand or None,
        serving_description=sanitize(candidate.serving_description or ""),
        **numbers,
    )


def _to_food(candidate: FoodInput) -> Food:
    return Food(
        id="",
        name=candidate.name or "",
        brand_name=candidate.brand_name,
        serving_description=candidate.serving_description or "",
        serving_mass_g=candidate.serving_mass_g or None,
        serving_volume_ml=candidate.serving_volume_ml or None,
        calories=candidate.calories or 0.0,
        protein_g=candidate.protein_g or 0.0,
        fat_g=candidate.fat_g or 0.0,
        carbs_g=candidate.carbs_g or 0.0,
        sugar_g=candidate.sugar_g or 0.0,
        sodium_mg=candidate.sodium_mg or 0.0,
        cholesterol_mg=candidate.cholesterol_mg or 0.0,
    )


def _positive_servings(value: float) -> float:
    servings = format_number(value)
    if servings <= 0:
        raise ValueError("Servings must be greater than zero")
    return servings


def _now_ms() -> int:
    return time.time_ns() // 1_000_000
