"""Exception hierarchy for traversal and reconciliation."""


class SyncError(Exception):
    """Base exception for sync errors."""

    pass


class ConfigurationError(SyncError):
    """Required configuration is missing or invalid. Fatal at startup."""

    pass


class AuthenticationError(SyncError):
    """Source rejected the credentials. Fatal for the current run."""

    pass


class TransientError(SyncError):
    """Retryable I/O failure; the same unit or item is retried later."""

    pass


class QuotaExceededError(TransientError):
    """Source rate limit or quota exceeded."""

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class ItemNotFoundError(SyncError):
    """Item no longer exists in the source."""

    pass


class CheckpointError(SyncError):
    """Checkpoint bytes could not be decoded."""

    pass


class StaleVersionError(SyncError):
    """Applier refused a document whose version is older than the stored one."""

    pass
