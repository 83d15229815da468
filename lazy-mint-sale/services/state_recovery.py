"""
Sale state recovery.

Rebuilds the SaleState of a restarted deployment from what outlives the
process:
- the token ledger (how many ids are already issued)
- the recorded event history (phase, flags, prices, balance, consumed vouchers)

Events are folded oldest first, using the payload shape produced by
`SaleEvent.to_payload()` and returned by `list_sale_events()`.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from domain.collaborators import TokenLedger
from domain.phase import DistributionPhase
from domain.sale import SaleConfig, SaleState

logger = logging.getLogger(__name__)


def _digest_bytes(value: str) -> bytes:
    text = value[2:] if value.startswith(("0x", "0X")) else value
    return bytes.fromhex(text)


def apply_event_payload(state: SaleState, payload: Mapping[str, Any]) -> None:
    """
    Apply one recorded event to `state`.

    Unknown event names are ignored.

    Raises:
        ValueError: If a known event carries a malformed field
        KeyError: If a known event is missing a field
    """

    name = payload.get("event")

    if name == "PhaseChanged":
        state.phase = DistributionPhase[payload["phase"]]
    elif name == "SaleStateChanged":
        state.active = bool(payload["active"])
    elif name == "SalePaused":
        state.paused = True
    elif name == "SaleUnpaused":
        state.paused = False
    elif name == "PriceChanged":
        state.redemption_price = int(payload["price"])
    elif name == "BaseURIChanged":
        state.base_uri = str(payload["base_uri"])
    elif name == "Purchased":
        state.balance += int(payload["retained"])
    elif name == "Redeemed":
        state.balance += int(payload["price_paid"])
        if payload.get("voucher_digest"):
            state.redeemed_vouchers.add(_digest_bytes(payload["voucher_digest"]))
    elif name == "Withdrawn":
        state.balance -= int(payload["amount"])


def restore_sale_state(
    config: SaleConfig,
    ledger: TokenLedger,
    history: Iterable[Mapping[str, Any]] = (),
) -> SaleState:
    """
    Build the state a deployment resumes from.

    `total_minted` always comes from the ledger, so the next minted id
    follows the tokens already stored there.

    Raises:
        RuntimeError: If the ledger holds more tokens than max_supply
    """

    state = SaleState.initial(config)

    replayed = 0
    for payload in history:
        apply_event_payload(state, payload)
        replayed += 1

    state.total_minted = ledger.total_supply()
    if state.total_minted > config.max_supply:
        raise RuntimeError(
            f"Ledger holds {state.total_minted} tokens, more than max supply {config.max_supply}"
        )

    if replayed or state.total_minted:
        logger.info(
            f"Restored sale state: {state.total_minted} tokens minted, {replayed} events replayed",
            extra={
                "total_minted": state.total_minted,
                "events_replayed": replayed,
                "phase": state.phase.name,
                "redeemed_vouchers": len(state.redeemed_vouchers),
            },
        )

    return state


__all__ = ["apply_event_payload", "restore_sale_state"]
