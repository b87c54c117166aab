# src/portfolio_vault/pool/exceptions.py

from portfolio_vault.exceptions import VaultError


class PoolError(VaultError):
    """Base exception for external pool interactions."""

    code = "pool_error"


class DepositsPaused(PoolError):
    """Raised when the pool reports deposits as disabled."""

    code = "deposits_paused"
    retryable = True


class WithdrawalsPaused(PoolError):
    """Raised when the pool reports withdrawals as disabled."""

    code = "withdrawals_paused"
    retryable = True


class PoolCallError(PoolError):
    """Raised when an adapter call fails for a reason the core cannot classify."""

    code = "pool_call_failed"
    retryable = True


class InsufficientAssets(PoolError):
    """Raised when an asset transfer source cannot cover the amount."""

    code = "insufficient_assets"

    def __init__(self, holder: str, requested: int, available: int):
        super().__init__(
            f"{holder} holds {available} asset units; {requested} requested"
        )
        self.holder = holder
        self.requested = requested
        self.available = available
