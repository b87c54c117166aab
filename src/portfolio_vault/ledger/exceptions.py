# src/portfolio_vault/ledger/exceptions.py

from portfolio_vault.exceptions import VaultError


class LedgerError(VaultError):
    """Base exception for index ledger failures."""

    code = "ledger_error"


class InsufficientBalance(LedgerError):
    """Raised when an account holds fewer real units than a debit requires."""

    code = "insufficient_balance"

    def __init__(self, index_id: str, account: str, requested: int, available: int):
        super().__init__(
            f"Account {account} holds {available} real units on {index_id}; "
            f"{requested} requested",
            index_id,
        )
        self.account = account
        self.requested = requested
        self.available = available


class InsufficientVirtual(LedgerError):
    """Raised when an index holds fewer virtual units than a removal requires."""

    code = "insufficient_virtual"

    def __init__(self, index_id: str, requested: int, available: int):
        super().__init__(
            f"Index {index_id} holds {available} virtual units; {requested} requested",
            index_id,
        )
        self.requested = requested
        self.available = available


class LedgerInvariantError(LedgerError):
    """Raised when the closed-ledger or backing invariant does not hold."""

    code = "ledger_invariant"
