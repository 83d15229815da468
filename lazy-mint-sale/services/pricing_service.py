"""
Pricing service for sale payments.

Pure integer arithmetic on wei amounts:
- cost of a purchase (unit price x count)
- platform fee in basis points, truncated toward zero
- split of a payment into fee and retained remainder
"""

from __future__ import annotations

from dataclasses import dataclass

from domain.sale import MAX_BASIS_POINTS


@dataclass(frozen=True, slots=True)
class PaymentSplit:
    """
    Breakdown of a payment.

    fee: routed to the fee address
    remainder: retained in the sale's balance
    """
    total: int
    fee: int
    remainder: int


def compute_cost(unit_price: int, count: int) -> int:
    """
    Total price for `count` tokens.

    Args:
        unit_price: Price of a single token (wei)
        count: Number of tokens

    Returns:
        unit_price * count

    Example:
        compute_cost(10**14, 5)
        # Returns 500000000000000
    """
    if unit_price < 0:
        raise ValueError("unit_price must be >= 0")
    if count < 0:
        raise ValueError("count must be >= 0")
    return unit_price * count


def compute_fee(total: int, fee_basis_points: int) -> int:
    """
    Fee owed on `total`, floor(total * bps / 10000).

    Integer division: the fee never rounds up.

    Example:
        compute_fee(500000000000000, 275)
        # Returns 13750000000000 (2.75%)
    """
    if total < 0:
        raise ValueError("total must be >= 0")
    if not 0 <= fee_basis_points <= MAX_BASIS_POINTS:
        raise ValueError(f"fee_basis_points must be within 0..{MAX_BASIS_POINTS}")
    return total * fee_basis_points // MAX_BASIS_POINTS


def split_payment(total: int, fee_basis_points: int) -> PaymentSplit:
    """Split `total` into the fee and the remainder kept by the sale."""

    fee = compute_fee(total, fee_basis_points)
    return PaymentSplit(total=total, fee=fee, remainder=total - fee)


__all__ = [
    "PaymentSplit",
    "compute_cost",
    "compute_fee",
    "split_payment",
]
