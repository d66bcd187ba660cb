"""Dependency container wiring for the application."""

from dataclasses import dataclass
from pathlib import Path

from supabase import ClientOptions, create_client

from better_food_logs.adapters.json_file_storage import JsonFileStorage
from better_food_logs.adapters.supabase_food_repository import SupabaseFoodRepository
from better_food_logs.config import Settings, parse_timezone
from better_food_logs.services.auth import AuthSessionHandler
from better_food_logs.services.catalog import CatalogService
from better_food_logs.services.consistency import ConsistencyService
from better_food_logs.services.food_logs import FoodLogService
from better_food_logs.services.local_store import LocalStore
from better_food_logs.services.remote_store import FoodRepository, RemoteStore
from better_food_logs.services.stats import StatsService
from better_food_logs.services.sync import SyncService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    local_store: LocalStore
    remote_store: RemoteStore
    catalog_service: CatalogService
    food_log_service: FoodLogService
    auth_handler: AuthSessionHandler


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_key,
        options=ClientOptions(
            postgrest_client_timeout=resolved_settings.remote_timeout_seconds
        ),
    )
    repository = SupabaseFoodRepository(supabase_client)
    storage = JsonFileStorage(Path(resolved_settings.local_store_path))
    return assemble_container(resolved_settings, LocalStore(storage), repository)


def assemble_container(
    settings: Settings, local_store: LocalStore, repository: FoodRepository
) -> AppContainer:
    """Wire services around an already-built local store and repository."""
    remote_store = RemoteStore(repository)
    catalog_service = CatalogService(local_store, remote_store)
    stats_service = StatsService(parse_timezone(settings.timezone))
    food_log_service = FoodLogService(
        local_store=local_store,
        remote_store=remote_store,
        catalog_service=catalog_service,
        stats_service=stats_service,
    )
    auth_handler = AuthSessionHandler(
        catalog_service=catalog_service,
        sync_service=SyncService(local_store, repository),
        consistency_service=ConsistencyService(repository),
    )
    return AppContainer(
        settings=settings,
        local_store=local_store,
        remote_store=remote_store,
        catalog_service=catalog_service,
        food_log_service=food_log_service,
        auth_handler=auth_handler,
    )
