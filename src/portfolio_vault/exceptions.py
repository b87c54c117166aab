# src/portfolio_vault/exceptions.py


class VaultError(Exception):
    """Base exception for every vault accounting failure.

    ``code`` is a stable identifier callers can match on. ``retryable`` tells
    off-core tooling whether resubmitting with adjusted parameters can succeed
    (market moved, pool paused) or whether the request is invalid as posed.
    """

    code = "vault_error"
    retryable = False

    def __init__(self, message: str, index_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.index_id = index_id


class InvalidAmount(VaultError):
    """Raised when an amount is not a positive integer."""

    code = "invalid_amount"

    def __init__(self, amount: object, index_id: str | None = None):
        super().__init__(f"Amount must be a positive integer, got {amount!r}", index_id)
        self.amount = amount


class IndexNotConfigured(VaultError):
    """Raised when an operation targets an index the vault does not know."""

    code = "index_not_configured"

    def __init__(self, index_id: str):
        super().__init__(f"Index not configured: {index_id}", index_id)


class ConfigError(VaultError):
    """Raised when vault configuration cannot be loaded safely."""

    code = "config_error"
