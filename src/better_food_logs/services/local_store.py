"""Client-side store for anonymous foods and food logs."""

import json
import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import uuid4

from better_food_logs.domain.foods import Food, FoodLog, FoodLogEntry

FOODS_KEY = "better_food_logs_foods"
LOGS_KEY = "better_food_logs_logs"
CATALOG_VERSION_KEY = "sampleFoodsVersion"

_logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Persistent string key/value storage."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class LocalStore:
    """Food and food log lists persisted under fixed storage keys.

    Every call materializes the full list from storage; nothing is cached
    between calls, and concurrent writers resolve as last write wins.
    """

    storage: KeyValueStorage

    def get_foods(self) -> list[Food]:
        """Return all local foods."""
        foods = []
        for record in self._read_list(FOODS_KEY):
            food = food_from_record(record)
            if food is not None:
                foods.append(food)
        return foods

    def save_foods(self, foods: list[Food]) -> None:
        """Replace the local food list."""
        self._write_list(FOODS_KEY, [food_to_record(food) for food in foods])

    def add_food(self, food: Food) -> Food:
        """Append a food, assigning an id when it has none."""
        if not food.id:
            food = replace(food, id=str(uuid4()))
        foods = self.get_foods()
        foods.append(food)
        self.save_foods(foods)
        return food

    def get_food_logs(self) -> list[FoodLog]:
        """Return all local food logs without their foods attached."""
        logs = []
        for record in self._read_list(LOGS_KEY):
            log = log_from_record(record)
            if log is not None:
                logs.append(log)
        return logs

    def save_food_logs(self, logs: list[FoodLog]) -> None:
        """Replace the local food log list."""
        self._write_list(LOGS_KEY, [log_to_record(log) for log in logs])

    def add_food_log(self, entry: FoodLogEntry) -> FoodLog:
        """Append a food log with a freshly generated id."""
        log = FoodLog(
            id=str(uuid4()),
            user_id=entry.user_id,
            food_id=entry.food_id,
            servings_consumed=entry.servings_consumed,
            consumed_at_ms=entry.consumed_at_ms,
        )
        logs = self.get_food_logs()
        logs.append(log)
        self.save_food_logs(logs)
        return log

    def update_food_log(self, log_id: str, servings_consumed: float) -> bool:
        """Change the servings of a log; False if the id is unknown."""
        logs = self.get_food_logs()
        for index, log in enumerate(logs):
            if log.id == log_id:
                logs[index] = replace(log, servings_consumed=servings_consumed)
                self.save_food_logs(logs)
                return True
        _logger.info("Local food log not found for update: id=%s", log_id)
        return False

    def delete_food_log(self, log_id: str) -> bool:
        """Delete a log; False if the id is unknown."""
        logs = self.get_food_logs()
        remaining = [log for log in logs if log.id != log_id]
        if len(remaining) == len(logs):
            return False
        self.save_food_logs(remaining)
        return True

    def clear_all(self) -> None:
        """Remove both the food and food log lists."""
        self.storage.remove_item(FOODS_KEY)
        self.storage.remove_item(LOGS_KEY)

    def get_catalog_version(self) -> str | None:
        """Return the installed starter catalog version."""
        return self.storage.get_item(CATALOG_VERSION_KEY)

    def set_catalog_version(self, version: str) -> None:
        """Record the installed starter catalog version."""
        self.storage.set_item(CATALOG_VERSION_KEY, version)

    def _read_list(self, key: str) -> list[dict[str, object]]:
        raw = self.storage.get_item(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            _logger.warning("Discarding corrupt local data under %s", key)
            return []
        if not isinstance(data, list):
            _logger.warning("Discarding non-list local data under %s", key)
            return []
        return [item for item in data if isinstance(item, dict)]

    def _write_list(self, key: str, records: list[dict[str, object]]) -> None:
        self.storage.set_item(key, json.dumps(records))


def food_to_record(food: Food) -> dict[str, object]:
    """Convert a food into its local storage shape."""
    return {
        "id": food.id,
        "name": food.name,
        "brand_name": food.brand_name,
        "serving_description": food.serving_description,
        "serving_mass_g": food.serving_mass_g,
        "serving_volume_ml": food.serving_volume_ml,
        "calories": food.calories,
        "protein_g": food.protein_g,
        "fat_g": food.fat_g,
        "carbs_g": food.carbs_g,
        "sugar_g": food.sugar_g,
        "sodium_mg": food.sodium_mg,
        "cholesterol_mg": food.cholesterol_mg,
    }


def food_from_record(record: dict[str, object]) -> Food | None:
    """Parse a local food record; None if it has no usable id."""
    food_id = record.get("id")
    if food_id is None or food_id == "":
        _logger.warning("Skipping local food without id: %s", record)
        return None
    brand = record.get("brand_name")
    return Food(
        id=str(food_id),
        name=str(record.get("name") or ""),
        brand_name=str(brand) if brand else None,
        serving_description=str(record.get("serving_description") or ""),
        serving_mass_g=_to_optional_float(record.get("serving_mass_g")),
        serving_volume_ml=_to_optional_float(record.get("serving_volume_ml")),
        calories=_to_float(record.get("calories")),
        protein_g=_to_float(record.get("protein_g")),
        fat_g=_to_float(record.get("fat_g")),
        carbs_g=_to_float(record.get("carbs_g")),
        sugar_g=_to_float(record.get("sugar_g")),
        sodium_mg=_to_float(record.get("sodium_mg")),
        cholesterol_mg=_to_float(record.get("cholesterol_mg")),
    )


def log_to_record(log: FoodLog) -> dict[str, object]:
    """Convert a food log into its local storage shape."""
    return {
        "id": log.id,
        "user_id": log.user_id,
        "food_id": log.food_id,
        "servings_consumed": log.servings_consumed,
        "consumed_date": log.consumed_at_ms,
    }


def log_from_record(record: dict[str, object]) -> FoodLog | None:
    """Parse a local food log record; None if it is unusable."""
    log_id = record.get("id")
    food_id = record.get("food_id")
    consumed = record.get("consumed_date")
    if log_id is None or food_id is None or not isinstance(consumed, int | float):
        _logger.warning("Skipping malformed local food log: %s", record)
        return None
    return FoodLog(
        id=str(log_id),
        user_id=str(record.get("user_id") or ""),
        food_id=str(food_id),
        servings_consumed=_to_float(record.get("servings_consumed")),
        consumed_at_ms=int(consumed),
    )


def _to_float(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _to_optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    number = _to_float(value)
    return number or None
