# src/portfolio_vault/pool/adapter.py

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Protocol

from portfolio_vault.config_models import PRICE_SCALE, IndexConfig
from portfolio_vault.logging_config import structured_log_extra

from .custody import PaperAssetCustody, pool_account
from .exceptions import DepositsPaused, PoolCallError, PoolError, WithdrawalsPaused

logger = logging.getLogger(__name__)


class PoolAdapter(Protocol):
    """Boundary to one external yield-bearing pool.

    Amounts passed to and returned from :meth:`deposit` / :meth:`withdraw`
    are in the pool's internal precision. :meth:`claim_yield` must report
    only yield from the pool's own accounting, never assets that happen to
    sit in the vault's custody.
    """

    def deposit(self, asset_amount: int) -> int: ...

    def withdraw(self, virtual_amount: int) -> int: ...

    def claim_yield(self, index_id: str) -> int: ...

    def can_deposit(self) -> bool: ...

    def can_withdraw(self) -> bool: ...

    def checkpoint(self) -> Any: ...

    def restore(self, token: Any) -> None: ...


@dataclass
class PaperPoolState:
    price: int = PRICE_SCALE
    shares_outstanding: int = 0
    pool_assets: int = 0
    incidental_assets: int = 0
    pending_yield: Dict[str, int] = field(default_factory=dict)
    deposits_enabled: bool = True
    withdrawals_enabled: bool = True


class PaperPoolAdapter:
    """In-memory pool used for paper runs and tests.

    The pool prices its shares with a fixed-point ``price`` (internal asset
    units per virtual unit, scaled by :data:`PRICE_SCALE`). Yield is queued
    per index with :meth:`accrue_yield` and handed out once by
    :meth:`claim_yield`. :meth:`donate` only grows ``incidental_assets``,
    which no adapter call ever reports. When a paper custody is attached,
    the assets backing accrued yield are funded into the index's pool
    custody account so that yield stays redeemable.
    """

    def __init__(
        self,
        config: Optional[IndexConfig] = None,
        custody: Optional[PaperAssetCustody] = None,
    ):
        self.config = config
        self.custody = custody
        self.state = PaperPoolState(
            price=config.initial_price if config else PRICE_SCALE,
            deposits_enabled=config.deposits_enabled if config else True,
            withdrawals_enabled=config.withdrawals_enabled if config else True,
        )

    # ------------------------------------------------------------------
    # PoolAdapter interface
    # ------------------------------------------------------------------
    def deposit(self, asset_amount: int) -> int:
        if not self.state.deposits_enabled:
            raise DepositsPaused("Pool deposits are disabled")

        virtual_amount = asset_amount * PRICE_SCALE // self.state.price
        self.state.pool_assets += asset_amount
        self.state.shares_outstanding += virtual_amount
        return virtual_amount

    def withdraw(self, virtual_amount: int) -> int:
        if not self.state.withdrawals_enabled:
            raise WithdrawalsPaused("Pool withdrawals are disabled")
        if virtual_amount > self.state.shares_outstanding:
            raise PoolCallError(
                f"Pool holds {self.state.shares_outstanding} shares; "
                f"{virtual_amount} requested"
            )

        asset_amount = virtual_amount * self.state.price // PRICE_SCALE
        if asset_amount > self.state.pool_assets:
            raise PoolCallError(
                f"Pool holds {self.state.pool_assets} assets; {asset_amount} requested"
            )
        self.state.shares_outstanding -= virtual_amount
        self.state.pool_assets -= asset_amount
        return asset_amount

    def claim_yield(self, index_id: str) -> int:
        return self.state.pending_yield.pop(index_id, 0)

    def can_deposit(self) -> bool:
        return self.state.deposits_enabled

    def can_withdraw(self) -> bool:
        return self.state.withdrawals_enabled

    def checkpoint(self) -> PaperPoolState:
        return replace(self.state, pending_yield=dict(self.state.pending_yield))

    def restore(self, token: PaperPoolState) -> None:
        self.state = replace(token, pending_yield=dict(token.pending_yield))

    # ------------------------------------------------------------------
    # Simulation helpers
    # ------------------------------------------------------------------
    def accrue_yield(self, index_id: str, virtual_amount: int) -> None:
        """Queue ``virtual_amount`` newly earned shares for ``index_id``.

        The backing assets enter the pool at the current price so the new
        shares are redeemable.
        """

        if virtual_amount <= 0:
            return
        self.state.pending_yield[index_id] = (
            self.state.pending_yield.get(index_id, 0) + virtual_amount
        )
        self.state.shares_outstanding += virtual_amount
        backing = virtual_amount * self.state.price // PRICE_SCALE
        self.state.pool_assets += backing
        if self.custody is not None:
            scaling = self.config.scaling_factor if self.config else 1
            self.custody.fund(pool_account(index_id), backing // scaling)

    def donate(self, asset_amount: int) -> None:
        """Drop assets into the vault's custody outside of pool accounting."""

        self.state.incidental_assets += asset_amount
        logger.info(
            "Incidental assets received outside pool accounting",
            extra=structured_log_extra(
                event="incidental_assets_received",
                index_id=self.config.index_id if self.config else None,
                amount=asset_amount,
                incidental_total=self.state.incidental_assets,
            ),
        )

    def set_price(self, price: int) -> None:
        if price <= 0:
            raise PoolError(f"Pool price must be positive, got {price}")
        self.state.price = price

    def set_deposits_enabled(self, enabled: bool) -> None:
        self.state.deposits_enabled = enabled

    def set_withdrawals_enabled(self, enabled: bool) -> None:
        self.state.withdrawals_enabled = enabled


def get_pool_adapter(
    config: IndexConfig,
    mode: str = "paper",
    custody: Optional[PaperAssetCustody] = None,
) -> PoolAdapter:
    if mode == "live":
        raise PoolError(
            f"Live pool integration for {config.index_id} must be supplied by the caller",
            config.index_id,
        )
    return PaperPoolAdapter(config=config, custody=custody)
