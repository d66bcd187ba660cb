"""Domain models for local-to-remote reconciliation."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class SyncReport:
    """Outcome of migrating local data into the remote store."""

    local_foods: int = 0
    local_logs: int = 0
    invalid_foods: int = 0
    foods_inserted: int = 0
    logs_inserted: int = 0
    logs_skipped_duplicate: int = 0
    logs_unresolved: int = 0
    local_cleared: bool = False


@dataclass
class ConsistencyReport:
    """Result of checking remote logs against remote foods."""

    foods_sync: bool = True
    logs_sync: bool = True
    errors: list[str] = field(default_factory=list)
    missing_food_ids: list[str] = field(default_factory=list)
    removed_logs: int = 0


class AuthEventKind(str, Enum):
    """Authentication transitions the core reacts to."""

    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"


@dataclass(frozen=True)
class AuthEvent:
    """An authentication state transition from the auth provider."""

    kind: AuthEventKind
    user_id: str | None = None


@dataclass(frozen=True)
class SignInOutcome:
    """What happened when a user signed in."""

    user_id: str
    catalog_seeded: bool
    sync_report: SyncReport | None
    sync_error: str | None
    consistency: ConsistencyReport
