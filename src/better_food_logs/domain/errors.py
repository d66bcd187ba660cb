"""Domain error types."""


class RemoteStoreError(RuntimeError):
    """Raised when the remote store rejects or drops a write."""


class SyncError(RuntimeError):
    """Raised when migrating local data to the remote store fails."""

    def __init__(self, user_id: str, step: str) -> None:
        super().__init__(f"Sync failed for user {user_id} during {step}")
        self.user_id = user_id
        self.step = step
