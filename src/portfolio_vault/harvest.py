"""Pull newly accrued pool yield into an index's virtual total."""

from __future__ import annotations

import logging

from portfolio_vault.ledger.index_ledger import IndexLedger
from portfolio_vault.logging_config import structured_log_extra
from portfolio_vault.pool.adapter import PoolAdapter
from portfolio_vault.pool.exceptions import PoolCallError, PoolError

logger = logging.getLogger(__name__)


class RewardHarvester:
    """Credits adapter-reported yield to a ledger's virtual total.

    Only the value returned by :meth:`PoolAdapter.claim_yield` is credited.
    Assets sitting in the vault's custody are never inspected, so a donation
    cannot move the virtual/real ratio. Harvesting mints no real units: every
    existing holder's claim appreciates by the same factor.
    """

    def harvest(self, ledger: IndexLedger, adapter: PoolAdapter) -> int:
        try:
            claimed = adapter.claim_yield(ledger.index_id)
        except PoolError:
            raise
        except Exception as exc:
            raise PoolCallError(
                f"claim_yield failed for {ledger.index_id}: {exc}", ledger.index_id
            ) from exc

        if not claimed:
            return 0

        ledger.add_virtual(claimed)
        logger.info(
            "Harvested pool yield",
            extra=structured_log_extra(
                event="yield_harvested",
                index_id=ledger.index_id,
                harvested=claimed,
                virtual_total=ledger.virtual_total,
                real_total=ledger.real_total,
            ),
        )
        return claimed


__all__ = ["RewardHarvester"]
