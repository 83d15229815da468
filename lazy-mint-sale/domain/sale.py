"""
Domain: Sale configuration and sale state.

Rules captured here:
- SaleConfig is fixed when the sale is deployed. The base URI is copied into
  SaleState on creation because it stays editable by the admin.
- At most MAX_PER_TRANSACTION tokens may be bought in a single purchase.
- Fees are expressed in basis points (275 = 2.75%) and capped at 10000.
- SaleState.total_minted never exceeds SaleConfig.max_supply.

This module contains only domain entities: no I/O, no locking, no frameworks.
Amounts are integers in wei.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Set

from .address import require_address
from .phase import DistributionPhase

MAX_PER_TRANSACTION: int = 10
MAX_BASIS_POINTS: int = 10_000


@dataclass(frozen=True, slots=True)
class SaleConfig:
    """
    Immutable parameters of a sale deployment.

    `signer_address` is both the only key allowed to sign vouchers and the
    admin of the sale. `contract_address` and `chain_id` take part in the
    voucher signing domain.
    """

    name: str
    symbol: str
    max_supply: int
    unit_price: int
    signer_address: str
    fee_address: str
    fee_basis_points: int
    contract_address: str
    chain_id: int = 31337
    base_uri: str = ""
    max_per_transaction: int = MAX_PER_TRANSACTION

    def __post_init__(self) -> None:
        if self.max_supply <= 0:
            raise ValueError("max_supply must be a positive integer")
        if self.unit_price < 0:
            raise ValueError("unit_price must be >= 0")
        if not 0 <= self.fee_basis_points <= MAX_BASIS_POINTS:
            raise ValueError(f"fee_basis_points must be within 0..{MAX_BASIS_POINTS}")
        if self.chain_id <= 0:
            raise ValueError("chain_id must be a positive integer")
        if self.max_per_transaction != MAX_PER_TRANSACTION:
            raise ValueError(f"max_per_transaction is fixed at {MAX_PER_TRANSACTION}")

        # Frozen dataclass: normalise addresses through object.__setattr__.
        object.__setattr__(self, "signer_address", require_address("signer_address", self.signer_address))
        object.__setattr__(self, "fee_address", require_address("fee_address", self.fee_address))
        object.__setattr__(self, "contract_address", require_address("contract_address", self.contract_address))


@dataclass(slots=True)
class SaleState:
    """
    Mutable state of a running sale.

    A single instance exists per deployment. It is only mutated by the sale
    engine, inside its exclusive section, after every precondition and
    external effect of an operation has succeeded.
    """

    base_uri: str = ""
    phase: DistributionPhase = DistributionPhase.CLOSED
    paused: bool = False
    active: bool = False  # legacy gate, independent of `phase`
    total_minted: int = 0
    redemption_price: int = 0
    balance: int = 0
    redeemed_vouchers: Set[bytes] = field(default_factory=set)

    @staticmethod
    def initial(config: SaleConfig) -> "SaleState":
        return SaleState(base_uri=config.base_uri)

    def remaining_supply(self, config: SaleConfig) -> int:
        return config.max_supply - self.total_minted
