"""
Domain: sale error taxonomy.

Every rejected sale operation raises one of these. Raising means the operation
had no effect: no phase change, no mint, no balance movement.
"""

from __future__ import annotations


class SaleError(Exception):
    """Base class for rejected sale operations."""

    code: str = "SaleError"


class UnauthorizedError(SaleError):
    """Caller is not the sale admin."""

    code = "Unauthorized"


class PhaseMismatchError(SaleError):
    """Operation is not allowed in the current distribution phase."""

    code = "PhaseMismatch"


class PausedError(SaleError):
    """Sale is paused."""

    code = "Paused"


class NotPausedError(SaleError):
    """Unpause requested while the sale is not paused."""

    code = "NotPaused"


class InvalidCountError(SaleError):
    """Requested token count is outside 1..max_per_transaction."""

    code = "InvalidCount"


class SupplyExceededError(SaleError):
    """Minting would push total supply above max_supply."""

    code = "SupplyExceeded"


class WrongPaymentError(SaleError):
    """Attached payment does not match the required amount exactly."""

    code = "WrongPayment"


class InvalidSignatureError(SaleError):
    """Voucher signature does not recover to the sale signer."""

    code = "InvalidSignature"


class VoucherAlreadyRedeemedError(SaleError):
    """Voucher digest has already been redeemed."""

    code = "VoucherAlreadyRedeemed"


class TransferFailedError(SaleError):
    """Outbound payment transfer could not complete."""

    code = "TransferFailed"


class MintFailedError(SaleError):
    """Token ledger refused to mint."""

    code = "MintFailed"


class UnknownTokenError(SaleError, LookupError):
    """Token id does not exist on the ledger."""

    code = "UnknownToken"


__all__ = [
    "SaleError",
    "UnauthorizedError",
    "PhaseMismatchError",
    "PausedError",
    "NotPausedError",
    "InvalidCountError",
    "SupplyExceededError",
    "WrongPaymentError",
    "InvalidSignatureError",
    "VoucherAlreadyRedeemedError",
    "TransferFailedError",
    "MintFailedError",
    "UnknownTokenError",
]
