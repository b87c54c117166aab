"""External pool boundary and asset custody."""

from .adapter import PaperPoolAdapter, PaperPoolState, PoolAdapter, get_pool_adapter
from .custody import AssetCustody, PaperAssetCustody, TransferJournal, pool_account
from .exceptions import (
    DepositsPaused,
    InsufficientAssets,
    PoolCallError,
    PoolError,
    WithdrawalsPaused,
)

__all__ = [
    "PoolAdapter",
    "PaperPoolAdapter",
    "PaperPoolState",
    "get_pool_adapter",
    "AssetCustody",
    "PaperAssetCustody",
    "TransferJournal",
    "pool_account",
    "PoolError",
    "PoolCallError",
    "DepositsPaused",
    "WithdrawalsPaused",
    "InsufficientAssets",
]
