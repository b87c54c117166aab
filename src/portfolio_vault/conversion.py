"""Conversion between an index's virtual and real unit spaces.

All helpers are pure functions over an :class:`IndexSnapshot`. Division
always floors so the ledger can only be under-credited relative to exact
arithmetic, and a conversion that floors to zero for a nonzero input raises
:class:`ZeroOutput` instead of returning ``0``.
"""

from __future__ import annotations

from portfolio_vault.exceptions import InvalidAmount
from portfolio_vault.ledger.models import IndexSnapshot
from portfolio_vault.operations.exceptions import ZeroOutput


def _check(amount: object, index_id: str) -> int:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise InvalidAmount(amount, index_id)
    return amount


def virtual_to_real(snapshot: IndexSnapshot, virtual_amount: int) -> int:
    """Real units minted for ``virtual_amount`` newly added virtual units."""

    virtual_amount = _check(virtual_amount, snapshot.index_id)
    if snapshot.real_total == 0:
        # Bootstrap: first mint on an index is 1:1.
        real_amount = virtual_amount
    else:
        real_amount = virtual_amount * snapshot.real_total // snapshot.virtual_total

    if real_amount == 0 and virtual_amount > 0:
        raise ZeroOutput(
            f"{virtual_amount} virtual units convert to 0 real units on {snapshot.index_id}",
            snapshot.index_id,
            virtual_amount,
        )
    return real_amount


def real_to_virtual(snapshot: IndexSnapshot, real_amount: int) -> int:
    """Virtual units redeemed by burning ``real_amount`` real units."""

    real_amount = _check(real_amount, snapshot.index_id)
    if snapshot.real_total == 0:
        raise ZeroOutput(
            f"Index {snapshot.index_id} has no outstanding real units",
            snapshot.index_id,
            real_amount,
        )

    virtual_amount = real_amount * snapshot.virtual_total // snapshot.real_total
    if virtual_amount == 0 and real_amount > 0:
        raise ZeroOutput(
            f"{real_amount} real units convert to 0 virtual units on {snapshot.index_id}",
            snapshot.index_id,
            real_amount,
        )
    return virtual_amount


def value_of(snapshot: IndexSnapshot, real_amount: int) -> int:
    """Virtual claim of ``real_amount``; zero instead of raising for reporting."""

    if real_amount <= 0 or snapshot.real_total == 0:
        return 0
    return real_amount * snapshot.virtual_total // snapshot.real_total


def to_internal(asset_amount: int, scaling_factor: int) -> int:
    """Scale an external asset amount into the pool's internal precision."""

    return asset_amount * scaling_factor


def to_external(internal_amount: int, scaling_factor: int) -> int:
    """Scale an internal amount back to external asset precision, flooring."""

    return internal_amount // scaling_factor


__all__ = [
    "virtual_to_real",
    "real_to_virtual",
    "value_of",
    "to_internal",
    "to_external",
]
