# src/portfolio_vault/operations/exceptions.py

from portfolio_vault.exceptions import VaultError


class OperationError(VaultError):
    """Base exception for user-facing vault operations."""

    code = "operation_error"


class ZeroOutput(OperationError):
    """Raised when a conversion would produce nothing for a nonzero input."""

    code = "zero_output"

    def __init__(self, message: str, index_id: str | None = None, amount_in: int = 0):
        super().__init__(message, index_id)
        self.amount_in = amount_in


class SlippageExceeded(OperationError):
    """Raised when the computed output falls below the caller's floor."""

    code = "slippage_exceeded"
    retryable = True

    def __init__(self, index_id: str, minimum: int, actual: int):
        super().__init__(
            f"Output {actual} below minimum {minimum} on {index_id}", index_id
        )
        self.minimum = minimum
        self.actual = actual


class BootstrapViolation(OperationError):
    """Raised when the first deposit into an index is below its floor."""

    code = "bootstrap_violation"

    def __init__(self, index_id: str, amount: int, floor: int):
        super().__init__(
            f"Bootstrap deposit {amount} on {index_id} below floor {floor}", index_id
        )
        self.amount = amount
        self.floor = floor
