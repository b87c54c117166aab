# src/portfolio_vault/operations/service.py

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from portfolio_vault.config_models import AppConfig, IndexConfig
from portfolio_vault.conversion import (
    real_to_virtual,
    to_external,
    to_internal,
    value_of,
    virtual_to_real,
)
from portfolio_vault.exceptions import ConfigError, IndexNotConfigured, InvalidAmount, VaultError
from portfolio_vault.harvest import RewardHarvester
from portfolio_vault.ledger.index_ledger import IndexLedger
from portfolio_vault.ledger.models import IndexSnapshot
from portfolio_vault.logging_config import error_log_extra, structured_log_extra
from portfolio_vault.metrics import VaultMetrics
from portfolio_vault.pool.adapter import PoolAdapter, get_pool_adapter
from portfolio_vault.pool.custody import AssetCustody, PaperAssetCustody, TransferJournal
from portfolio_vault.pool.exceptions import (
    DepositsPaused,
    PoolCallError,
    WithdrawalsPaused,
)

from .exceptions import BootstrapViolation, SlippageExceeded, ZeroOutput
from .models import BoundIndex, OperationResult

logger = logging.getLogger(__name__)


def _positive(amount: object, index_id: str) -> int:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise InvalidAmount(amount, index_id)
    return amount


def _non_negative(amount: object, index_id: str) -> int:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise InvalidAmount(amount, index_id)
    return amount


class VaultService:
    """Run deposits, withdrawals and transfers against registered indices.

    Each call is a single atomic transition over one index: the index lock is
    held for the whole call, the pool's yield is harvested before any ledger
    snapshot is taken, and on any failure the ledger and the pool adapter are
    restored to their state at entry while the call's own custody transfers
    are reversed. Calls on different indices share no mutable state besides
    the metrics counters and the balances of the shared custody.

    Each index must be bound to its own adapter instance, since rollback
    restores the adapter wholesale.
    """

    def __init__(
        self,
        metrics: Optional[VaultMetrics] = None,
        custody: Optional[AssetCustody] = None,
        custody_account: str = "vault",
        harvester: Optional[RewardHarvester] = None,
    ):
        self.metrics = metrics or VaultMetrics()
        self.custody = custody
        self.custody_account = custody_account
        self.harvester = harvester or RewardHarvester()
        self._indices: Dict[str, BoundIndex] = {}

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        custody: Optional[AssetCustody] = None,
        metrics: Optional[VaultMetrics] = None,
    ) -> "VaultService":
        service = cls(
            metrics=metrics,
            custody=custody,
            custody_account=config.vault.custody_account,
        )
        for index_config in config.vault.indices.values():
            service.register_index(index_config)
        return service

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------
    def register_index(
        self, config: IndexConfig, adapter: Optional[PoolAdapter] = None
    ) -> IndexLedger:
        if config.index_id in self._indices:
            raise VaultError(f"Index already registered: {config.index_id}", config.index_id)
        if config.bootstrap_floor <= 0:
            raise ConfigError(
                f"bootstrap_floor must be positive for {config.index_id}", config.index_id
            )
        if config.scaling_factor <= 0:
            raise ConfigError(
                f"scaling_factor must be positive for {config.index_id}", config.index_id
            )

        ledger = IndexLedger(
            config.index_id,
            scaling_factor=config.scaling_factor,
            bootstrap_floor=config.bootstrap_floor,
        )
        self._indices[config.index_id] = BoundIndex(
            config=config,
            ledger=ledger,
            adapter=adapter or get_pool_adapter(config, custody=self._paper_custody()),
        )
        logger.info(
            "Index registered",
            extra=structured_log_extra(
                event="index_registered",
                index_id=config.index_id,
                scaling_factor=config.scaling_factor,
                bootstrap_floor=config.bootstrap_floor,
            ),
        )
        return ledger

    def _paper_custody(self) -> Optional[PaperAssetCustody]:
        return self.custody if isinstance(self.custody, PaperAssetCustody) else None

    def index_ids(self) -> List[str]:
        return sorted(self._indices)

    def ledger(self, index_id: str) -> IndexLedger:
        return self._bound(index_id).ledger

    def adapter(self, index_id: str) -> PoolAdapter:
        return self._bound(index_id).adapter

    def _bound(self, index_id: str) -> BoundIndex:
        try:
            return self._indices[index_id]
        except KeyError:
            raise IndexNotConfigured(index_id) from None

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------
    def balance_of(self, index_id: str, account: str) -> int:
        return self._bound(index_id).ledger.balance_of(account)

    def index_state(self, index_id: str) -> IndexSnapshot:
        return self._bound(index_id).ledger.snapshot()

    def account_value(self, index_id: str, account: str) -> int:
        """Virtual claim of ``account`` at the ledger's stored ratio (no harvest)."""

        ledger = self._bound(index_id).ledger
        return value_of(ledger.snapshot(), ledger.balance_of(account))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def deposit(
        self, index_id: str, account: str, asset_amount: int, min_real_out: int = 0
    ) -> OperationResult:
        """Deposit ``asset_amount`` (external precision) and mint real units."""

        bound = self._bound(index_id)
        asset_amount = _positive(asset_amount, index_id)
        min_real_out = _non_negative(min_real_out, index_id)

        with self._atomic(bound, "deposit", account) as (ledger, journal):
            harvested = self.harvester.harvest(ledger, bound.adapter)

            if not self._call_pool(bound, bound.adapter.can_deposit):
                raise DepositsPaused(f"Deposits paused on {index_id}", index_id)

            snapshot = ledger.snapshot()
            # Any mint against zero outstanding claims is a bootstrap.
            if snapshot.real_total == 0 and asset_amount < ledger.bootstrap_floor:
                raise BootstrapViolation(index_id, asset_amount, ledger.bootstrap_floor)

            if journal is not None:
                journal.transfer(account, self.custody_account, asset_amount)
                journal.transfer(self.custody_account, bound.pool_account, asset_amount)

            virtual_amount = self._call_pool(
                bound,
                bound.adapter.deposit,
                to_internal(asset_amount, ledger.scaling_factor),
            )
            if virtual_amount == 0:
                raise ZeroOutput(
                    f"Pool minted 0 virtual units for {asset_amount} assets on {index_id}",
                    index_id,
                    asset_amount,
                )
            real_amount = virtual_to_real(snapshot, virtual_amount)

            if real_amount < min_real_out:
                raise SlippageExceeded(index_id, min_real_out, real_amount)

            ledger.add_virtual(virtual_amount)
            ledger.credit_real(account, real_amount)

        return self._committed(
            OperationResult(
                operation="deposit",
                index_id=index_id,
                account=account,
                amount_in=asset_amount,
                amount_out=real_amount,
                harvested=harvested,
                virtual_total=ledger.virtual_total,
                real_total=ledger.real_total,
            ),
            virtual_amount=virtual_amount,
        )

    def withdraw(
        self, index_id: str, account: str, real_amount: int, min_asset_out: int = 0
    ) -> OperationResult:
        """Burn ``real_amount`` real units and return the pool's asset output."""

        bound = self._bound(index_id)
        real_amount = _positive(real_amount, index_id)
        min_asset_out = _non_negative(min_asset_out, index_id)

        with self._atomic(bound, "withdraw", account) as (ledger, journal):
            harvested = self.harvester.harvest(ledger, bound.adapter)

            virtual_amount = real_to_virtual(ledger.snapshot(), real_amount)

            # Burn before the pool call so one entitlement cannot be redeemed twice.
            ledger.debit_real(account, real_amount)
            ledger.remove_virtual(virtual_amount)

            if not self._call_pool(bound, bound.adapter.can_withdraw):
                raise WithdrawalsPaused(f"Withdrawals paused on {index_id}", index_id)

            internal_out = self._call_pool(bound, bound.adapter.withdraw, virtual_amount)
            asset_amount = to_external(internal_out, ledger.scaling_factor)
            if asset_amount == 0:
                raise ZeroOutput(
                    f"{real_amount} real units redeem 0 assets on {index_id}",
                    index_id,
                    real_amount,
                )

            if asset_amount < min_asset_out:
                raise SlippageExceeded(index_id, min_asset_out, asset_amount)

            if journal is not None:
                journal.transfer(bound.pool_account, self.custody_account, asset_amount)
                journal.transfer(self.custody_account, account, asset_amount)

        return self._committed(
            OperationResult(
                operation="withdraw",
                index_id=index_id,
                account=account,
                amount_in=real_amount,
                amount_out=asset_amount,
                harvested=harvested,
                virtual_total=ledger.virtual_total,
                real_total=ledger.real_total,
            ),
            virtual_amount=virtual_amount,
        )

    def transfer(
        self, index_id: str, sender: str, recipient: str, real_amount: int
    ) -> OperationResult:
        """Move ``real_amount`` real units from ``sender`` to ``recipient``."""

        return self._move(index_id, sender, recipient, real_amount, operation="transfer")

    def sub_transfer(
        self, index_id: str, from_account: str, to_account: str, real_amount: int
    ) -> OperationResult:
        """Index-parameterized balance move between two accounts."""

        return self._move(
            index_id, from_account, to_account, real_amount, operation="sub_transfer"
        )

    def _move(
        self,
        index_id: str,
        from_account: str,
        to_account: str,
        real_amount: int,
        operation: str,
    ) -> OperationResult:
        bound = self._bound(index_id)
        real_amount = _positive(real_amount, index_id)

        with self._atomic(bound, operation, from_account) as (ledger, _):
            harvested = self.harvester.harvest(ledger, bound.adapter)
            ledger.debit_real(from_account, real_amount)
            ledger.credit_real(to_account, real_amount)

        return self._committed(
            OperationResult(
                operation=operation,
                index_id=index_id,
                account=from_account,
                amount_in=real_amount,
                amount_out=real_amount,
                harvested=harvested,
                virtual_total=ledger.virtual_total,
                real_total=ledger.real_total,
                counterparty=to_account,
            )
        )

    # ------------------------------------------------------------------
    # Transaction plumbing
    # ------------------------------------------------------------------
    @contextmanager
    def _atomic(
        self, bound: BoundIndex, operation: str, account: str
    ) -> Iterator[Tuple[IndexLedger, Optional[TransferJournal]]]:
        with bound.ledger.transaction() as ledger:
            pool_token = bound.adapter.checkpoint()
            journal = TransferJournal(self.custody) if self.custody is not None else None
            try:
                yield ledger, journal
            except VaultError as exc:
                self._rollback(bound, pool_token, journal)
                self.metrics.record_failure(exc.code, exc.message, bound.config.index_id)
                logger.warning(
                    "%s rolled back: %s",
                    operation,
                    exc.message,
                    extra=error_log_extra(
                        exc,
                        operation=operation,
                        account=account,
                        index_id=bound.config.index_id,
                    ),
                )
                raise
            except BaseException as exc:
                self._rollback(bound, pool_token, journal)
                logger.exception(
                    "%s aborted by unexpected error",
                    operation,
                    extra=error_log_extra(
                        exc,
                        operation=operation,
                        account=account,
                        index_id=bound.config.index_id,
                    ),
                )
                raise

    def _rollback(
        self, bound: BoundIndex, pool_token: Any, journal: Optional[TransferJournal]
    ) -> None:
        bound.adapter.restore(pool_token)
        if journal is not None:
            journal.unwind()

    def _call_pool(self, bound: BoundIndex, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except VaultError:
            raise
        except Exception as exc:
            raise PoolCallError(
                f"Pool call {getattr(func, '__name__', func)} failed: {exc}",
                bound.config.index_id,
            ) from exc

    def _committed(self, result: OperationResult, **fields: Any) -> OperationResult:
        self.metrics.record_operation(result.operation)
        self.metrics.record_harvest(result.harvested)
        logger.info(
            "%s committed",
            result.operation,
            extra=structured_log_extra(
                event=f"{result.operation}_completed",
                index_id=result.index_id,
                operation=result.operation,
                account=result.account,
                amount_in=result.amount_in,
                amount_out=result.amount_out,
                harvested=result.harvested,
                virtual_total=result.virtual_total,
                real_total=result.real_total,
                counterparty=result.counterparty,
                **fields,
            ),
        )
        return result


__all__ = ["VaultService"]
