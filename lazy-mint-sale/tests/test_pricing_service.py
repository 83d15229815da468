"""
Tests for `services/pricing_service.py`.

Covers:
- cost = unit_price x count for every allowed count
- fee = floor(total x bps / 10000), never rounded up
- remainder + fee always equals the total
"""

from __future__ import annotations

import pytest

from conftest import UNIT_PRICE
from services.pricing_service import compute_cost, compute_fee, split_payment


@pytest.mark.parametrize("count", range(1, 11))
def test_compute_cost_is_price_times_count(count: int) -> None:
    assert compute_cost(UNIT_PRICE, count) == UNIT_PRICE * count


@pytest.mark.parametrize("count", range(1, 11))
def test_compute_fee_floors_basis_points(count: int) -> None:
    total = compute_cost(UNIT_PRICE, count)
    assert compute_fee(total, 275) == (total * 275) // 10000


def test_fee_for_five_tokens_at_point_zero_zero_zero_one_ether() -> None:
    """0.0005 ether at 2.75% is 0.00001375 ether."""

    total = compute_cost(UNIT_PRICE, 5)

    assert total == 500_000_000_000_000
    assert compute_fee(total, 275) == 13_750_000_000_000


def test_compute_fee_truncates_toward_zero() -> None:
    assert compute_fee(1, 275) == 0
    assert compute_fee(99, 275) == 2  # 2.7225
    assert compute_fee(10_001, 275) == 275  # 275.0275
    assert compute_fee(100, 10_000) == 100
    assert compute_fee(100, 0) == 0


def test_split_payment_keeps_remainder() -> None:
    split = split_payment(99, 275)

    assert split.total == 99
    assert split.fee == 2
    assert split.remainder == 97


def test_pricing_rejects_invalid_inputs() -> None:
    with pytest.raises(ValueError):
        compute_cost(-1, 1)
    with pytest.raises(ValueError):
        compute_cost(1, -1)
    with pytest.raises(ValueError):
        compute_fee(-1, 275)
    with pytest.raises(ValueError):
        compute_fee(100, 10_001)


def test_pricing_handles_amounts_beyond_64_bits() -> None:
    unit_price = 2**200

    total = compute_cost(unit_price, 10)

    assert total == unit_price * 10
    assert compute_fee(total, 275) == total * 275 // 10000
