"""
Domain: Sale events.

Immutable records of committed sale operations. The engine appends one event
per successful state change; subscribers (e.g. the Supabase event recorder)
receive them in commit order.

All timestamps must be passed explicitly and be UTC.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, Tuple

from .phase import DistributionPhase
from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class SaleEvent:
    occurred_at: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("occurred_at", self.occurred_at)

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_payload(self) -> Dict[str, Any]:
        """Serialise to a JSON-compatible dict (event name + fields)."""

        payload: Dict[str, Any] = {"event": self.name}
        for key, value in asdict(self).items():
            if isinstance(value, datetime):
                payload[key] = value.isoformat()
            elif isinstance(value, DistributionPhase):
                payload[key] = value.name
            elif isinstance(value, tuple):
                payload[key] = list(value)
            else:
                payload[key] = value
        return payload


@dataclass(frozen=True, slots=True)
class SaleStateChanged(SaleEvent):
    active: bool = False


@dataclass(frozen=True, slots=True)
class PhaseChanged(SaleEvent):
    previous: DistributionPhase = DistributionPhase.CLOSED
    phase: DistributionPhase = DistributionPhase.CLOSED


@dataclass(frozen=True, slots=True)
class SalePaused(SaleEvent):
    account: str = ""


@dataclass(frozen=True, slots=True)
class SaleUnpaused(SaleEvent):
    account: str = ""


@dataclass(frozen=True, slots=True)
class PriceChanged(SaleEvent):
    price: int = 0


@dataclass(frozen=True, slots=True)
class BaseURIChanged(SaleEvent):
    base_uri: str = ""


@dataclass(frozen=True, slots=True)
class Purchased(SaleEvent):
    buyer: str = ""
    count: int = 0
    fee_paid: int = 0
    retained: int = 0
    token_ids: Tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Redeemed(SaleEvent):
    redeemer: str = ""
    amount: int = 0
    price_paid: int = 0
    voucher_digest: str = ""
    token_ids: Tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Withdrawn(SaleEvent):
    to: str = ""
    amount: int = 0


__all__ = [
    "SaleEvent",
    "SaleStateChanged",
    "PhaseChanged",
    "SalePaused",
    "SaleUnpaused",
    "PriceChanged",
    "BaseURIChanged",
    "Purchased",
    "Redeemed",
    "Withdrawn",
]
