"""Remote store capability surface with graceful degradation."""

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass, replace
from datetime import UTC, datetime
from typing import Protocol, TypeVar

from better_food_logs.domain.foods import Food, FoodLog, FoodLogEntry

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class FoodRepository(Protocol):
    """Persistence interface for remote foods and food logs."""

    def list_foods(self) -> list[Food]:
        """Return every remote food."""

    def list_foods_by_ids(self, food_ids: list[str]) -> list[Food]:
        """Return the remote foods with the given ids."""

    def has_foods(self) -> bool:
        """Return True if any remote food exists."""

    def insert_foods(self, foods: list[Food], keep_ids: bool = False) -> list[Food]:
        """Insert foods in one batch and return the stored rows."""

    def list_food_logs(self, user_id: str) -> list[FoodLog]:
        """Return a user's food logs without foods attached."""

    def list_log_food_refs(self, user_id: str) -> list[tuple[str, str]]:
        """Return (log id, food id) pairs for a user's logs."""

    def insert_food_logs(self, entries: list[FoodLogEntry]) -> list[FoodLog]:
        """Insert food logs in one batch and return the stored rows."""

    def update_food_log(self, log_id: str, servings_consumed: float) -> FoodLog | None:
        """Update a log's servings; None if no row matched."""

    def delete_food_log(self, log_id: str) -> bool:
        """Delete a log; False if no row matched."""

    def delete_logs_for_foods(self, user_id: str, food_ids: list[str]) -> int:
        """Delete a user's logs referencing any of the food ids."""

    def delete_all_foods(self) -> None:
        """Delete every remote food."""

    def delete_all_logs(self) -> None:
        """Delete every remote food log."""


@dataclass
class RemoteStore:
    """Remote operations that log failures instead of raising them.

    Reads degrade to empty results and writes to None or False so the
    caller can fall back to the local store.
    """

    repository: FoodRepository

    def get_foods(self) -> list[Food]:
        """Return every remote food, or [] if the store is unavailable."""
        return self._attempt("get_foods", [], self.repository.list_foods)

    def has_foods(self) -> bool | None:
        """Return whether the remote catalog is non-empty; None on failure."""
        return self._attempt("has_foods", None, self.repository.has_foods)

    def add_food(self, food: Food) -> Food | None:
        """Insert a food under a server-assigned id."""
        stored = self._attempt(
            "add_food",
            [],
            lambda: self.repository.insert_foods([food], keep_ids=False),
            payload=asdict(food),
        )
        return stored[0] if stored else None

    def add_foods(self, foods: list[Food], keep_ids: bool = False) -> list[Food]:
        """Insert foods in one batch, or [] on failure."""
        return self._attempt(
            "add_foods",
            [],
            lambda: self.repository.insert_foods(foods, keep_ids=keep_ids),
            payload={"count": len(foods), "keep_ids": keep_ids},
        )

    def get_food_logs(self, user_id: str) -> list[FoodLog]:
        """Return a user's logs joined with their foods.

        Logs whose food cannot be found are left out of the result.
        """

        def load() -> list[FoodLog]:
            logs = self.repository.list_food_logs(user_id)
            food_ids = list(dict.fromkeys(log.food_id for log in logs))
            foods = self.repository.list_foods_by_ids(food_ids)
            return attach_foods(logs, foods)

        return self._attempt("get_food_logs", [], load, user_id=user_id)

    def add_food_log(self, entry: FoodLogEntry) -> FoodLog | None:
        """Insert a single food log."""
        stored = self._attempt(
            "add_food_log",
            [],
            lambda: self.repository.insert_food_logs([entry]),
            user_id=entry.user_id,
            payload=asdict(entry),
        )
        return stored[0] if stored else None

    def update_food_log(self, log_id: str, servings_consumed: float) -> FoodLog | None:
        """Update a log's servings; None on failure or unknown id."""
        return self._attempt(
            "update_food_log",
            None,
            lambda: self.repository.update_food_log(log_id, servings_consumed),
            payload={"id": log_id, "servings_consumed": servings_consumed},
        )

    def delete_food_log(self, log_id: str) -> bool:
        """Delete a log; False on failure or unknown id."""
        return self._attempt(
            "delete_food_log",
            False,
            lambda: self.repository.delete_food_log(log_id),
            payload={"id": log_id},
        )

    def delete_all_foods(self) -> bool:
        """Delete every remote food; False on failure."""

        def run() -> bool:
            self.repository.delete_all_foods()
            return True

        return self._attempt("delete_all_foods", False, run)

    def delete_all_logs(self) -> bool:
        """Delete every remote food log; False on failure."""

        def run() -> bool:
            self.repository.delete_all_logs()
            return True

        return self._attempt("delete_all_logs", False, run)

    def _attempt(
        self,
        action: str,
        default: T,
        func: Callable[[], T],
        *,
        user_id: str | None = None,
        payload: object | None = None,
    ) -> T:
        try:
            return func()
        except Exception:
            _logger.exception(
                "Remote %s failed: user_id=%s payload=%s at=%s",
                action,
                user_id,
                payload,
                datetime.now(tz=UTC).isoformat(),
            )
            return default


def attach_foods(logs: list[FoodLog], foods: list[Food]) -> list[FoodLog]:
    """Attach each log's food, dropping logs whose food is missing."""
    lookup = {food.id: food for food in foods}
    joined: list[FoodLog] = []
    for log in logs:
        food = lookup.get(log.food_id)
        if food is None:
            _logger.warning(
                "Dropping orphaned food log: id=%s food_id=%s", log.id, log.food_id
            )
            continue
        joined.append(replace(log, food=food))
    return joined
