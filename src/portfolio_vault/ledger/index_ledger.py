"""Per-index ledger state.

An :class:`IndexLedger` owns the virtual and real totals of one index plus
the real-unit balance of every account. It performs no I/O and knows nothing
about pools; callers pair every credit or debit with the matching totals
update inside a single :meth:`IndexLedger.transaction` block.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List

from portfolio_vault.exceptions import InvalidAmount
from portfolio_vault.ledger.exceptions import (
    InsufficientBalance,
    InsufficientVirtual,
    LedgerInvariantError,
)
from portfolio_vault.ledger.models import IndexSnapshot, IndexState


def _require_amount(amount: object, index_id: str) -> int:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise InvalidAmount(amount, index_id)
    return amount


class IndexLedger:
    """Virtual/real totals and account balances for a single index."""

    def __init__(self, index_id: str, scaling_factor: int = 1, bootstrap_floor: int = 1):
        self._state = IndexState(
            index_id=index_id,
            scaling_factor=scaling_factor,
            bootstrap_floor=bootstrap_floor,
        )
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def index_id(self) -> str:
        return self._state.index_id

    @property
    def scaling_factor(self) -> int:
        return self._state.scaling_factor

    @property
    def bootstrap_floor(self) -> int:
        return self._state.bootstrap_floor

    @property
    def virtual_total(self) -> int:
        return self._state.virtual_total

    @property
    def real_total(self) -> int:
        return self._state.real_total

    def balance_of(self, account: str) -> int:
        return self._state.balances.get(account, 0)

    def accounts(self) -> List[str]:
        return sorted(acct for acct, bal in self._state.balances.items() if bal > 0)

    def snapshot(self) -> IndexSnapshot:
        return IndexSnapshot(
            index_id=self.index_id,
            virtual_total=self._state.virtual_total,
            real_total=self._state.real_total,
        )

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def credit_real(self, account: str, amount: int) -> None:
        """Mint ``amount`` real units to ``account`` and grow the real total."""

        amount = _require_amount(amount, self.index_id)
        with self._lock:
            self._state.balances[account] = self.balance_of(account) + amount
            self._state.real_total += amount

    def debit_real(self, account: str, amount: int) -> None:
        """Burn ``amount`` real units from ``account`` and shrink the real total."""

        amount = _require_amount(amount, self.index_id)
        with self._lock:
            available = self.balance_of(account)
            if amount > available:
                raise InsufficientBalance(self.index_id, account, amount, available)
            remaining = available - amount
            if remaining:
                self._state.balances[account] = remaining
            else:
                self._state.balances.pop(account, None)
            self._state.real_total -= amount

    def add_virtual(self, amount: int) -> None:
        amount = _require_amount(amount, self.index_id)
        with self._lock:
            self._state.virtual_total += amount

    def remove_virtual(self, amount: int) -> None:
        amount = _require_amount(amount, self.index_id)
        with self._lock:
            if amount > self._state.virtual_total:
                raise InsufficientVirtual(self.index_id, amount, self._state.virtual_total)
            self._state.virtual_total -= amount

    # ------------------------------------------------------------------
    # Transactions & invariants
    # ------------------------------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator["IndexLedger"]:
        """Hold the index lock for the block and undo every change if it raises."""

        with self._lock:
            saved_virtual = self._state.virtual_total
            saved_real = self._state.real_total
            saved_balances: Dict[str, int] = dict(self._state.balances)
            try:
                yield self
            except BaseException:
                self._state.virtual_total = saved_virtual
                self._state.real_total = saved_real
                self._state.balances = saved_balances
                raise

    def check_invariants(self) -> None:
        """Raise :class:`LedgerInvariantError` if the ledger is inconsistent."""

        with self._lock:
            balances = self._state.balances
            total = sum(balances.values())
            if total != self._state.real_total:
                raise LedgerInvariantError(
                    f"real_total {self._state.real_total} != sum of balances {total}",
                    self.index_id,
                )
            if self._state.virtual_total == 0 and self._state.real_total != 0:
                raise LedgerInvariantError(
                    f"{self._state.real_total} real units outstanding with no virtual backing",
                    self.index_id,
                )
            negative = [acct for acct, bal in balances.items() if bal < 0]
            if negative:
                raise LedgerInvariantError(
                    f"negative balances for {', '.join(sorted(negative))}", self.index_id
                )
