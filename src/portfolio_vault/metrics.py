"""Lightweight in-memory counters for operational visibility."""

from __future__ import annotations

from collections import Counter, deque
from datetime import datetime, timezone
from threading import Lock
from typing import Deque, Dict, Optional


class VaultMetrics:
    """Thread-safe, low-overhead counters for vault activity."""

    def __init__(self, max_errors: int = 50) -> None:
        self._lock = Lock()
        self._recent_errors: Deque[Dict[str, str]] = deque(maxlen=max_errors)
        self._failures_by_code: Counter = Counter()
        self.deposits = 0
        self.withdrawals = 0
        self.transfers = 0
        self.harvests = 0
        self.harvested_virtual = 0
        self.last_operation_at: Optional[str] = None

    def record_operation(self, operation: str) -> None:
        """Count a successfully committed operation."""

        with self._lock:
            if operation == "deposit":
                self.deposits += 1
            elif operation == "withdraw":
                self.withdrawals += 1
            elif operation in {"transfer", "sub_transfer"}:
                self.transfers += 1
            self.last_operation_at = datetime.now(timezone.utc).isoformat()

    def record_harvest(self, virtual_amount: int) -> None:
        """Track a nonzero harvest."""

        if virtual_amount <= 0:
            return

        with self._lock:
            self.harvests += 1
            self.harvested_virtual += virtual_amount

    def record_failure(self, code: str, message: str, index_id: Optional[str] = None) -> None:
        """Count a rolled-back operation and keep its message in the rolling buffer."""

        with self._lock:
            self._failures_by_code[code] += 1
            self._recent_errors.appendleft(self._format_error(code, message, index_id))

    def snapshot(self) -> Dict[str, object]:
        """Return a read-only snapshot of current counters."""

        with self._lock:
            return {
                "deposits": self.deposits,
                "withdrawals": self.withdrawals,
                "transfers": self.transfers,
                "harvests": self.harvests,
                "harvested_virtual": self.harvested_virtual,
                "failures_by_code": dict(self._failures_by_code),
                "recent_errors": list(self._recent_errors),
                "last_operation_at": self.last_operation_at,
            }

    @staticmethod
    def _format_error(code: str, message: str, index_id: Optional[str]) -> Dict[str, str]:
        return {
            "at": datetime.now(timezone.utc).isoformat(),
            "code": code,
            "index_id": index_id or "",
            "message": message,
        }


__all__ = ["VaultMetrics"]
