"""
Domain: account addresses.

All addresses handled by the sale are 20-byte hex account addresses. They are
normalised to their EIP-55 checksum form on entry so that comparisons between
the admin, the fee recipient, buyers and voucher redeemers are exact string
comparisons.
"""

from __future__ import annotations

from eth_utils import is_address, to_checksum_address


def require_address(name: str, value: str) -> str:
    """
    Validate and normalise an address.

    Returns:
        The checksummed address.

    Raises:
        ValueError: If `value` is not a 20-byte hex address.
    """

    if not isinstance(value, str) or not is_address(value):
        raise ValueError(f"{name} must be a 20-byte hex address, got {value!r}")
    return to_checksum_address(value)


def same_address(a: str, b: str) -> bool:
    """Case-insensitive address equality."""
    return a.lower() == b.lower()
