"""Daily and period nutrition reports by timezone."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from better_food_logs.domain.foods import FoodLog
from better_food_logs.domain.nutrition import DailySummary, PeriodSummary
from better_food_logs.services.nutrition import summarize

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass
class StatsService:
    """Service for computing nutrition reports in a timezone."""

    timezone_name: str = "UTC"

    def get_today(
        self, logs: list[FoodLog], now: datetime | None = None
    ) -> DailySummary:
        """Return today's totals in the configured timezone."""
        tz = ZoneInfo(self.timezone_name)
        today = (now or datetime.now(tz=tz)).astimezone(tz).date()
        return _aggregate_day(today, logs, tz)

    def get_period(
        self, logs: list[FoodLog], days: int, now: datetime | None = None
    ) -> PeriodSummary:
        """Return totals, a per-day breakdown and averages for the last N days."""
        if days < 1:
            raise ValueError("days must be at least 1")
        tz = ZoneInfo(self.timezone_name)
        today = (now or datetime.now(tz=tz)).astimezone(tz).date()
        start = today - timedelta(days=days - 1)
        in_period = [log for log in logs if start <= _local_day(log, tz) <= today]
        daily = [
            _aggregate_day(start + timedelta(days=offset), in_period, tz)
            for offset in range(days)
        ]
        totals = summarize(in_period)
        return PeriodSummary(
            days=days,
            totals=totals,
            daily=daily,
            meal_count=len(in_period),
            avg_calories=totals.calories / days,
            avg_protein_g=totals.protein_g / days,
        )


def _aggregate_day(day: date, logs: list[FoodLog], tz: ZoneInfo) -> DailySummary:
    day_logs = [log for log in logs if _local_day(log, tz) == day]
    return DailySummary(day=day, totals=summarize(day_logs), meal_count=len(day_logs))


def _local_day(log: FoodLog, tz: ZoneInfo) -> date:
    consumed = _EPOCH + timedelta(milliseconds=log.consumed_at_ms)
    return consumed.astimezone(tz).date()
