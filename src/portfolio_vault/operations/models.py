# src/portfolio_vault/operations/models.py

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Optional

from portfolio_vault.config_models import IndexConfig
from portfolio_vault.ledger.index_ledger import IndexLedger
from portfolio_vault.pool.adapter import PoolAdapter
from portfolio_vault.pool.custody import pool_account


@dataclass
class OperationResult:
    operation: str
    index_id: str
    account: str
    amount_in: int
    amount_out: int
    harvested: int = 0
    virtual_total: int = 0
    real_total: int = 0
    counterparty: Optional[str] = None
    completed_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class BoundIndex:
    config: IndexConfig
    ledger: IndexLedger
    adapter: PoolAdapter

    @property
    def pool_account(self) -> str:
        return pool_account(self.config.index_id)
