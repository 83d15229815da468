"""
Domain: capabilities the sale consumes from outside collaborators.

The token ledger owns token ownership bookkeeping; the payment gateway moves
funds out of the sale's custody. The sale engine only calls into them and
never inspects their storage. Implementations live in `repositories/`.
"""

from __future__ import annotations

from typing import List, Protocol

# ERC-165 interface ids.
INTERFACE_ERC165: str = "0x01ffc9a7"
INTERFACE_ERC721: str = "0x80ac58cd"
INTERFACE_ERC721_METADATA: str = "0x5b5e139f"
INTERFACE_ERC721_ENUMERABLE: str = "0x780e9d63"

SUPPORTED_INTERFACES = frozenset(
    {
        INTERFACE_ERC165,
        INTERFACE_ERC721,
        INTERFACE_ERC721_METADATA,
        INTERFACE_ERC721_ENUMERABLE,
    }
)


class TokenLedger(Protocol):
    def mint(self, to: str, token_id: int) -> bool:
        """Create `token_id` owned by `to`. False if the ledger refused."""
        ...

    def burn(self, token_id: int) -> bool:
        """Remove `token_id`. Only used to roll back a failed operation."""
        ...

    def balance_of(self, owner: str) -> int:
        ...

    def owner_of(self, token_id: int) -> str:
        """Owner of `token_id`. Raises LookupError for unknown ids."""
        ...

    def tokens_of_owner(self, owner: str) -> List[int]:
        ...

    def total_supply(self) -> int:
        ...

    def supports_interface(self, interface_id: str) -> bool:
        ...


class PaymentGateway(Protocol):
    def transfer(self, to: str, amount: int) -> bool:
        """Send `amount` wei from the sale's custody. False on failure."""
        ...


def normalize_interface_id(interface_id: str) -> str:
    """Lower-case 4-byte selector with 0x prefix."""

    value = interface_id.lower()
    if not value.startswith("0x"):
        value = "0x" + value
    return value
