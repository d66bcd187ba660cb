"""Remote consistency checks and orphaned log repair."""

import logging
from dataclasses import dataclass

from better_food_logs.domain.foods import FoodLog
from better_food_logs.domain.sync import ConsistencyReport
from better_food_logs.services.remote_store import FoodRepository, attach_foods

_logger = logging.getLogger(__name__)


@dataclass
class ConsistencyService:
    """Checks that every remote log references an existing remote food."""

    repository: FoodRepository

    def validate(self, user_id: str) -> ConsistencyReport:
        """Find logs with missing foods and delete them.

        Remote failures are recorded in the report instead of raised.
        """
        report = ConsistencyReport()
        try:
            refs = self.repository.list_log_food_refs(user_id)
        except Exception as exc:
            _logger.exception("Failed to fetch food logs for user %s", user_id)
            report.logs_sync = False
            report.errors.append(f"Failed to fetch user logs: {exc}")
            return report
        if not refs:
            return report

        food_ids = list(dict.fromkeys(food_id for _, food_id in refs))
        try:
            existing = {food.id for food in self.repository.list_foods_by_ids(food_ids)}
        except Exception as exc:
            _logger.exception("Failed to fetch referenced foods for user %s", user_id)
            report.foods_sync = False
            report.errors.append(f"Failed to fetch foods: {exc}")
            return report

        missing = [food_id for food_id in food_ids if food_id not in existing]
        if not missing:
            return report

        report.foods_sync = False
        report.missing_food_ids = missing
        report.errors.append(f"Missing foods for IDs: {', '.join(missing)}")
        _logger.warning(
            "Removing orphaned food logs for user %s: food_ids=%s", user_id, missing
        )
        try:
            report.removed_logs = self.repository.delete_logs_for_foods(
                user_id, missing
            )
        except Exception as exc:
            _logger.exception("Failed to clean orphaned logs for user %s", user_id)
            report.errors.append(f"Failed to clean orphaned logs: {exc}")
        return report

    def refresh(self, user_id: str) -> list[FoodLog]:
        """Repair orphans, then return the user's logs joined with foods."""
        report = self.validate(user_id)
        if report.errors:
            _logger.warning("Consistency issues for user %s: %s", user_id, report.errors)
        try:
            logs = self.repository.list_food_logs(user_id)
            food_ids = list(dict.fromkeys(log.food_id for log in logs))
            foods = self.repository.list_foods_by_ids(food_ids)
        except Exception:
            _logger.exception("Failed to refresh food logs for user %s", user_id)
            return []
        return attach_foods(logs, foods)
