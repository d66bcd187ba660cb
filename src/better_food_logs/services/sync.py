"""Migration of local data into the remote store on sign-in."""

import logging
from dataclasses import dataclass

from better_food_logs.domain.errors import SyncError
from better_food_logs.domain.foods import Food, FoodLog, FoodLogEntry
from better_food_logs.domain.sync import SyncReport
from better_food_logs.services.identity import food_signature
from better_food_logs.services.local_store import LocalStore
from better_food_logs.services.remote_store import FoodRepository

_logger = logging.getLogger(__name__)

LogKey = tuple[str, int, float]


@dataclass
class SyncService:
    """Moves local foods and logs into the remote store for a user.

    Steps run strictly in order. Foods are matched by content signature
    rather than id, and logs by (food id, timestamp, servings), so a
    retry after a partial failure does not duplicate rows. Local data is
    only cleared once every step has succeeded.
    """

    local_store: LocalStore
    repository: FoodRepository

    def sync_local_to_remote(self, user_id: str) -> SyncReport:
        """Migrate all local data for the user; raises SyncError on failure."""
        local_foods = self.local_store.get_foods()
        local_logs = self.local_store.get_food_logs()
        _logger.info(
            "Starting sync for user %s: local_foods=%s local_logs=%s",
            user_id,
            len(local_foods),
            len(local_logs),
        )
        if not local_foods and not local_logs:
            _logger.info("No local data to sync")
            return SyncReport()

        valid_foods = [food for food in local_foods if _is_syncable(food)]
        step = "fetch_remote_foods"
        try:
            existing = {food_signature(food) for food in self.repository.list_foods()}

            step = "insert_foods"
            novel: dict[str, Food] = {}
            for food in valid_foods:
                signature = food_signature(food)
                if signature not in existing:
                    novel.setdefault(signature, food)
            inserted = self.repository.insert_foods(list(novel.values()))
            _logger.info("Synced %s new foods", len(inserted))

            step = "refresh_remote_foods"
            remote_ids: dict[str, str] = {}
            for food in self.repository.list_foods():
                if _is_syncable(food):
                    remote_ids.setdefault(food_signature(food), food.id)

            staged: list[FoodLogEntry] = []
            skipped = unresolved = 0
            if local_logs:
                step = "fetch_remote_logs"
                existing_logs = {
                    _log_key(log.food_id, log)
                    for log in self.repository.list_food_logs(user_id)
                }
                staged, skipped, unresolved = _stage_logs(
                    user_id, local_logs, valid_foods, remote_ids, existing_logs
                )

                step = "insert_logs"
                self.repository.insert_food_logs(staged)
                _logger.info("Synced %s new food logs", len(staged))
        except Exception as exc:
            _logger.exception(
                "Sync failed for user %s during %s; local data kept", user_id, step
            )
            raise SyncError(user_id, step) from exc

        self.local_store.clear_all()
        _logger.info("Synced local data for user %s and cleared local store", user_id)
        return SyncReport(
            local_foods=len(local_foods),
            local_logs=len(local_logs),
            invalid_foods=len(local_foods) - len(valid_foods),
            foods_inserted=len(inserted),
            logs_inserted=len(staged),
            logs_skipped_duplicate=skipped,
            logs_unresolved=unresolved,
            local_cleared=True,
        )


def _stage_logs(
    user_id: str,
    local_logs: list[FoodLog],
    valid_foods: list[Food],
    remote_ids: dict[str, str],
    existing_logs: set[LogKey],
) -> tuple[list[FoodLogEntry], int, int]:
    foods_by_id = {food.id: food for food in valid_foods}
    staged: list[FoodLogEntry] = []
    skipped = unresolved = 0
    for log in local_logs:
        food = foods_by_id.get(log.food_id)
        if food is None:
            _logger.warning("Local food not found for log %s: %s", log.id, log.food_id)
            unresolved += 1
            continue
        remote_food_id = remote_ids.get(food_signature(food))
        if remote_food_id is None:
            _logger.warning("Remote food not found for local food %s", food.id)
            unresolved += 1
            continue
        if _log_key(remote_food_id, log) in existing_logs:
            skipped += 1
            continue
        staged.append(
            FoodLogEntry(
                user_id=user_id,
                food_id=remote_food_id,
                servings_consumed=log.servings_consumed,
                consumed_at_ms=log.consumed_at_ms,
            )
        )
    return staged, skipped, unresolved


def _is_syncable(food: Food) -> bool:
    if not food.name.strip() or not food.serving_description.strip():
        _logger.warning("Skipping food with missing required fields: %s", food.id)
        return False
    return True


def _log_key(food_id: str, log: FoodLog) -> LogKey:
    return (food_id, log.consumed_at_ms, round(log.servings_consumed, 2))
