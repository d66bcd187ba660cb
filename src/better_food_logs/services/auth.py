"""Reactions to sign-in and sign-out transitions."""

import logging
from dataclasses import dataclass, field

from better_food_logs.domain.errors import SyncError
from better_food_logs.domain.sync import AuthEvent, AuthEventKind, SignInOutcome
from better_food_logs.services.catalog import CatalogService
from better_food_logs.services.consistency import ConsistencyService
from better_food_logs.services.sync import SyncService

_logger = logging.getLogger(__name__)


@dataclass
class AuthSessionHandler:
    """Seeds, migrates and repairs data when users sign in or out.

    Work runs once per transition. A repeated sign-in for a user that is
    already signed in is ignored.
    """

    catalog_service: CatalogService
    sync_service: SyncService
    consistency_service: ConsistencyService
    signed_in_users: set[str] = field(default_factory=set)

    def handle(self, event: AuthEvent) -> SignInOutcome | None:
        if event.kind is AuthEventKind.SIGNED_OUT:
            self._on_signed_out(event.user_id)
            return None
        if not event.user_id:
            raise ValueError("Sign-in events require a user id")
        if event.user_id in self.signed_in_users:
            _logger.info("Ignoring repeated sign-in for user %s", event.user_id)
            return None
        self.signed_in_users.add(event.user_id)
        return self._on_signed_in(event.user_id)

    def _on_signed_in(self, user_id: str) -> SignInOutcome:
        seeded = self.catalog_service.ensure_remote_seed()

        sync_report = None
        sync_error = None
        try:
            sync_report = self.sync_service.sync_local_to_remote(user_id)
        except SyncError as exc:
            # Local data is left in place for the next sign-in.
            _logger.exception("Local data sync failed for user %s", user_id)
            sync_error = str(exc)

        consistency = self.consistency_service.validate(user_id)
        if consistency.errors:
            _logger.warning(
                "Consistency issues after sign-in for user %s: %s",
                user_id,
                consistency.errors,
            )
        return SignInOutcome(
            user_id=user_id,
            catalog_seeded=seeded,
            sync_report=sync_report,
            sync_error=sync_error,
            consistency=consistency,
        )

    def _on_signed_out(self, user_id: str | None) -> None:
        if user_id is None:
            self.signed_in_users.clear()
        else:
            self.signed_in_users.discard(user_id)
        self.catalog_service.ensure_local_seed()
        _logger.info("Signed out user %s; local catalog ready", user_id)
