"""
Domain: Redemption vouchers.

A voucher is created and signed off-chain by the sale's signer. It authorises
`redeemer` to mint `amount` tokens for exactly `price` wei while the sale is in
its pre-sale phase. The sale engine never stores vouchers; it only verifies
and consumes them.

Signatures are EIP-712 typed-data signatures over the NFTVoucher struct,
separated by the SigningDomain below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .address import require_address

if TYPE_CHECKING:
    from .sale import SaleConfig

SIGNING_DOMAIN_NAME: str = "L-Voucher"
SIGNING_DOMAIN_VERSION: str = "1"


@dataclass(frozen=True, slots=True)
class SigningDomain:
    """EIP-712 domain binding a voucher to one sale deployment on one chain."""

    chain_id: int
    verifying_contract: str
    name: str = SIGNING_DOMAIN_NAME
    version: str = SIGNING_DOMAIN_VERSION

    def __post_init__(self) -> None:
        if self.chain_id <= 0:
            raise ValueError("chain_id must be a positive integer")
        object.__setattr__(
            self,
            "verifying_contract",
            require_address("verifying_contract", self.verifying_contract),
        )

    @staticmethod
    def for_sale(config: "SaleConfig") -> "SigningDomain":
        return SigningDomain(chain_id=config.chain_id, verifying_contract=config.contract_address)


@dataclass(frozen=True, slots=True)
class Voucher:
    """
    Signed authorisation for a deferred mint.

    redeemer: address that receives the minted tokens
    price: exact payment (wei) required to redeem
    amount: number of tokens to mint (>= 1)
    data: opaque bytes covered by the signature
    signature: 65-byte (r, s, v) signature by the sale's signer
    """

    redeemer: str
    price: int
    amount: int
    data: bytes = b""
    signature: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "redeemer", require_address("redeemer", self.redeemer))
        for name in ("price", "amount"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"voucher {name} must be an integer, got {value!r}")
        if self.price < 0:
            raise ValueError("voucher price must be >= 0")
        if self.amount < 1:
            raise ValueError("voucher amount must be >= 1")
        if not isinstance(self.data, (bytes, bytearray)):
            raise ValueError("voucher data must be bytes")
        if not isinstance(self.signature, (bytes, bytearray)):
            raise ValueError("voucher signature must be bytes")
        object.__setattr__(self, "data", bytes(self.data))
        object.__setattr__(self, "signature", bytes(self.signature))

    def with_signature(self, signature: bytes) -> "Voucher":
        return Voucher(
            redeemer=self.redeemer,
            price=self.price,
            amount=self.amount,
            data=self.data,
            signature=signature,
        )
