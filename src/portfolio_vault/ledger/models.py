# src/portfolio_vault/ledger/models.py

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class IndexSnapshot:
    index_id: str
    virtual_total: int
    real_total: int

    @property
    def is_empty(self) -> bool:
        return self.virtual_total == 0 and self.real_total == 0


@dataclass
class IndexState:
    index_id: str
    scaling_factor: int
    bootstrap_floor: int
    virtual_total: int = 0
    real_total: int = 0
    balances: Dict[str, int] = field(default_factory=dict)
