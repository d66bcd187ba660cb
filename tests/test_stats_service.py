"""Tests for daily and period reports."""

from datetime import UTC, date, datetime

import pytest

from better_food_logs.domain.foods import FoodLog
from better_food_logs.services.stats import StatsService
from tests.conftest import make_food

NOW = datetime(2024, 3, 10, 15, 0, tzinfo=UTC)
FOOD = make_food("f1", calories=200, protein_g=10)


def _log(log_id: str, moment: datetime, servings: float = 1.0) -> FoodLog:
    return FoodLog(
        id=log_id,
        user_id="u1",
        food_id=FOOD.id,
        servings_consumed=servings,
        consumed_at_ms=int(moment.timestamp() * 1000),
        food=FOOD,
    )


def test_today_counts_only_todays_logs() -> None:
    logs = [
        _log("a", datetime(2024, 3, 10, 8, 0, tzinfo=UTC)),
        _log("b", datetime(2024, 3, 10, 23, 59, tzinfo=UTC), servings=0.5),
        _log("c", datetime(2024, 3, 9, 23, 59, tzinfo=UTC)),
    ]

    summary = StatsService("UTC").get_today(logs, now=NOW)

    assert summary.day == date(2024, 3, 10)
    assert summary.meal_count == 2
    assert summary.totals.calories == pytest.approx(300)


def test_today_uses_configured_timezone() -> None:
    late_evening_in_new_york = _log("a", datetime(2024, 3, 10, 3, 30, tzinfo=UTC))

    summary = StatsService("America/New_York").get_today(
        [late_evening_in_new_york], now=NOW
    )

    assert summary.day == date(2024, 3, 10)
    assert summary.meal_count == 0


def test_period_breakdown_and_averages() -> None:
    logs = [
        _log("a", datetime(2024, 3, 10, 9, 0, tzinfo=UTC), servings=2),
        _log("b", datetime(2024, 3, 8, 9, 0, tzinfo=UTC)),
        _log("c", datetime(2024, 3, 4, 9, 0, tzinfo=UTC)),
        _log("d", datetime(2024, 3, 3, 23, 0, tzinfo=UTC)),
    ]

    summary = StatsService("UTC").get_period(logs, days=7, now=NOW)

    assert summary.days == 7
    assert summary.meal_count == 3
    assert [day.day for day in summary.daily][0] == date(2024, 3, 4)
    assert [day.day for day in summary.daily][-1] == date(2024, 3, 10)
    assert [day.meal_count for day in summary.daily] == [1, 0, 0, 0, 1, 0, 1]
    assert summary.totals.calories == pytest.approx(800)
    assert summary.avg_calories == pytest.approx(800 / 7)
    assert summary.avg_protein_g == pytest.approx(40 / 7)


def test_period_requires_positive_days() -> None:
    with pytest.raises(ValueError, match="days"):
        StatsService("UTC").get_period([], days=0, now=NOW)


def test_empty_period_is_zero() -> None:
    summary = StatsService("UTC").get_period([], days=30, now=NOW)

    assert len(summary.daily) == 30
    assert summary.avg_calories == 0
    assert summary.meal_count == 0
