"""Tests for remote consistency checks."""

import pytest

from better_food_logs.adapters.supabase_food_repository import (
    FOODS_TABLE,
    LOGS_TABLE,
    SupabaseFoodRepository,
)
from better_food_logs.domain.foods import FoodLogEntry
from better_food_logs.services.consistency import ConsistencyService
from tests.conftest import FakeSupabaseClient, make_food

USER_ID = "user-1"


def _entry(food_id: str, at_ms: int, user_id: str = USER_ID) -> FoodLogEntry:
    return FoodLogEntry(
        user_id=user_id,
        food_id=food_id,
        servings_consumed=1.0,
        consumed_at_ms=at_ms,
    )


@pytest.fixture
def consistency_service(repository: SupabaseFoodRepository) -> ConsistencyService:
    return ConsistencyService(repository)


def test_consistent_data_reports_clean(
    consistency_service: ConsistencyService, repository: SupabaseFoodRepository
) -> None:
    [food] = repository.insert_foods([make_food()])
    repository.insert_food_logs([_entry(food.id, 1_000)])

    report = consistency_service.validate(USER_ID)

    assert report.foods_sync is True
    assert report.logs_sync is True
    assert report.errors == []
    assert report.removed_logs == 0


def test_user_without_logs_is_clean(consistency_service: ConsistencyService) -> None:
    report = consistency_service.validate(USER_ID)

    assert report.errors == []
    assert report.foods_sync is True


def test_orphaned_logs_are_removed(
    consistency_service: ConsistencyService, repository: SupabaseFoodRepository
) -> None:
    [food] = repository.insert_foods([make_food()])
    repository.insert_food_logs(
        [
            _entry(food.id, 1_000),
            _entry("gone-1", 2_000),
            _entry("gone-1", 3_000),
            _entry("gone-2", 4_000),
            _entry("gone-1", 5_000, user_id="someone-else"),
        ]
    )

    report = consistency_service.validate(USER_ID)

    assert report.foods_sync is False
    assert report.missing_food_ids == ["gone-1", "gone-2"]
    assert report.errors == ["Missing foods for IDs: gone-1, gone-2"]
    assert report.removed_logs == 3
    assert repository.list_log_food_refs(USER_ID) == [
        (log.id, food.id) for log in repository.list_food_logs(USER_ID)
    ]
    assert len(repository.list_food_logs("someone-else")) == 1


def test_log_fetch_failure_is_reported(
    consistency_service: ConsistencyService, supabase_client: FakeSupabaseClient
) -> None:
    supabase_client.fail(LOGS_TABLE, "select")

    report = consistency_service.validate(USER_ID)

    assert report.logs_sync is False
    assert report.errors[0].startswith("Failed to fetch user logs:")


def test_food_fetch_failure_is_reported(
    consistency_service: ConsistencyService,
    repository: SupabaseFoodRepository,
    supabase_client: FakeSupabaseClient,
) -> None:
    repository.insert_food_logs([_entry("f1", 1_000)])
    supabase_client.fail(FOODS_TABLE, "select")

    report = consistency_service.validate(USER_ID)

    assert report.foods_sync is False
    assert report.logs_sync is True
    assert report.errors[0].startswith("Failed to fetch foods:")


def test_cleanup_failure_is_reported(
    consistency_service: ConsistencyService,
    repository: SupabaseFoodRepository,
    supabase_client: FakeSupabaseClient,
) -> None:
    repository.insert_food_logs([_entry("gone", 1_000)])
    supabase_client.fail(LOGS_TABLE, "delete")

    report = consistency_service.validate(USER_ID)

    assert report.missing_food_ids == ["gone"]
    assert report.removed_logs == 0
    assert report.errors[-1].startswith("Failed to clean orphaned logs:")


def test_refresh_returns_joined_logs_after_repair(
    consistency_service: ConsistencyService, repository: SupabaseFoodRepository
) -> None:
    [food] = repository.insert_foods([make_food()])
    repository.insert_food_logs([_entry(food.id, 1_000), _entry("gone", 2_000)])

    logs = consistency_service.refresh(USER_ID)

    assert [log.food for log in logs] == [food]
    assert len(repository.list_food_logs(USER_ID)) == 1
