"""All-or-nothing asset transfers between accounts and the vault."""

from __future__ import annotations

import threading
from typing import Dict, List, Protocol, Tuple

from .exceptions import InsufficientAssets


def pool_account(index_id: str) -> str:
    """Custody account holding the assets deposited into an index's pool."""

    return f"pool:{index_id}"


class AssetCustody(Protocol):
    def transfer(self, source: str, destination: str, amount: int) -> None: ...

    def balance_of(self, holder: str) -> int: ...


class PaperAssetCustody:
    """In-memory asset balances for depositors and the vault custody account."""

    def __init__(self) -> None:
        self._balances: Dict[str, int] = {}
        self._lock = threading.Lock()

    def fund(self, holder: str, amount: int) -> None:
        with self._lock:
            self._balances[holder] = self._balances.get(holder, 0) + amount

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def transfer(self, source: str, destination: str, amount: int) -> None:
        with self._lock:
            available = self._balances.get(source, 0)
            if amount > available:
                raise InsufficientAssets(source, amount, available)
            self._balances[source] = available - amount
            self._balances[destination] = self._balances.get(destination, 0) + amount


class TransferJournal:
    """Records the transfers of one operation so they can be reversed.

    Custody is shared by every index, so a failed operation undoes only its
    own transfers and leaves concurrent commits on other indices in place.
    """

    def __init__(self, custody: AssetCustody):
        self.custody = custody
        self._entries: List[Tuple[str, str, int]] = []

    def transfer(self, source: str, destination: str, amount: int) -> None:
        self.custody.transfer(source, destination, amount)
        self._entries.append((source, destination, amount))

    def unwind(self) -> None:
        while self._entries:
            source, destination, amount = self._entries.pop()
            self.custody.transfer(destination, source, amount)


__all__ = ["AssetCustody", "PaperAssetCustody", "TransferJournal", "pool_account"]
