import pytest

from portfolio_vault.conversion import (
    real_to_virtual,
    to_external,
    to_internal,
    value_of,
    virtual_to_real,
)
from portfolio_vault.exceptions import InvalidAmount
from portfolio_vault.ledger.models import IndexSnapshot
from portfolio_vault.operations.exceptions import ZeroOutput


def snap(virtual_total: int, real_total: int) -> IndexSnapshot:
    return IndexSnapshot(index_id="usdc", virtual_total=virtual_total, real_total=real_total)


def test_bootstrap_mint_is_one_to_one():
    assert virtual_to_real(snap(0, 0), 2000) == 2000


def test_virtual_to_real_floors():
    # 1000 * 3 / 7 = 428.57...
    assert virtual_to_real(snap(7, 3), 1000) == 428


def test_virtual_to_real_zero_result_raises():
    with pytest.raises(ZeroOutput) as excinfo:
        virtual_to_real(snap(10_002_000, 2000), 1000)

    assert excinfo.value.amount_in == 1000
    assert excinfo.value.code == "zero_output"
    assert not excinfo.value.retryable


def test_zero_input_returns_zero():
    assert virtual_to_real(snap(100, 100), 0) == 0
    assert real_to_virtual(snap(100, 100), 0) == 0


def test_real_to_virtual_floors():
    # 10 * 7 / 3 = 23.33...
    assert real_to_virtual(snap(7, 3), 10) == 23


def test_real_to_virtual_zero_result_raises():
    with pytest.raises(ZeroOutput):
        real_to_virtual(snap(1, 3), 2)


def test_real_to_virtual_on_empty_index_raises():
    with pytest.raises(ZeroOutput):
        real_to_virtual(snap(0, 0), 5)


def test_round_trip_never_over_credits():
    snapshot = snap(1_000_003, 999_999)
    for amount in (1, 17, 999, 123_457):
        real = virtual_to_real(snapshot, amount)
        assert real * snapshot.virtual_total <= amount * snapshot.real_total


def test_negative_amount_rejected():
    with pytest.raises(InvalidAmount):
        virtual_to_real(snap(1, 1), -5)


def test_value_of_is_non_failing():
    assert value_of(snap(0, 0), 10) == 0
    assert value_of(snap(300, 200), 0) == 0
    assert value_of(snap(300, 200), 100) == 150


def test_scaling_helpers():
    assert to_internal(25, 10**12) == 25 * 10**12
    assert to_external(25 * 10**12 + 999, 10**12) == 25
