"""
Direct sale service for public-phase purchases.

Handles:
- Gating (pause flag, Public phase)
- Count and supply limits
- Exact payment check against the pricing service
- Mint, fee routing and balance retention as one all-or-nothing step
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from domain.address import require_address
from domain.collaborators import PaymentGateway, TokenLedger
from domain.errors import (
    InvalidCountError,
    SupplyExceededError,
    TransferFailedError,
    WrongPaymentError,
)
from domain.events import Purchased
from domain.phase import DistributionPhase
from domain.sale import SaleConfig, SaleState
from domain.time import utc_now
from services.minting import burn_tokens, mint_batch, next_token_ids
from services.phase_controller import PhaseController
from services.pricing_service import compute_cost, split_payment

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PurchaseResult:
    """
    Outcome of a successful purchase.

    token_ids: ids minted to the buyer
    total_paid: payment accepted (unit_price x count)
    fee_paid: part of the payment routed to the fee address
    retained: part of the payment kept in the sale's balance
    """
    buyer: str
    token_ids: Tuple[int, ...]
    total_paid: int
    fee_paid: int
    retained: int

    @property
    def count(self) -> int:
        return len(self.token_ids)


class DirectSaleProcessor:
    def __init__(
        self,
        config: SaleConfig,
        state: SaleState,
        phases: PhaseController,
        ledger: TokenLedger,
        payments: PaymentGateway,
    ) -> None:
        self._config = config
        self._state = state
        self._phases = phases
        self._ledger = ledger
        self._payments = payments

    def validate(self, count: int, payment: int) -> int:
        """
        Check every purchase precondition, in order, without side effects.

        Returns:
            The required payment

        Raises:
            PausedError, PhaseMismatchError, InvalidCountError,
            SupplyExceededError, WrongPaymentError
        """
        self._phases.require_not_paused()
        self._phases.require_phase(DistributionPhase.PUBLIC, "buy")

        if (
            isinstance(count, bool)
            or not isinstance(count, int)
            or not 1 <= count <= self._config.max_per_transaction
        ):
            raise InvalidCountError(
                f"Can only mint 1 to {self._config.max_per_transaction} tokens at a time, got {count}"
            )

        if count > self._state.remaining_supply(self._config):
            raise SupplyExceededError(
                f"Purchase of {count} would exceed max supply "
                f"({self._state.total_minted}/{self._config.max_supply} minted)"
            )

        required = compute_cost(self._config.unit_price, count)
        if payment != required:
            raise WrongPaymentError(f"Payment must be exactly {required} wei, got {payment}")

        return required

    def buy(self, buyer: str, count: int, payment: int) -> Tuple[PurchaseResult, Purchased]:
        """
        Execute a purchase of `count` tokens for `buyer`.

        Process:
        1. Validate (see `validate`), then normalise the buyer address
        2. Mint sequential token ids to the buyer
        3. Route the fee to the fee address
        4. Commit: retain the remainder, advance total_minted

        If step 3 fails the tokens from step 2 are burned and nothing is
        committed.
        """
        required = self.validate(count, payment)
        buyer = require_address("buyer", buyer)
        split = split_payment(required, self._config.fee_basis_points)

        token_ids = mint_batch(self._ledger, buyer, next_token_ids(self._state.total_minted, count))

        if split.fee > 0:
            try:
                sent = self._payments.transfer(self._config.fee_address, split.fee)
            except Exception:
                burn_tokens(self._ledger, token_ids)
                raise
            if not sent:
                burn_tokens(self._ledger, token_ids)
                raise TransferFailedError(
                    f"Fee transfer of {split.fee} wei to {self._config.fee_address} failed"
                )

        self._state.total_minted += count
        self._state.balance += split.remainder

        logger.info(
            f"Purchased {count} tokens for {buyer}",
            extra={
                "buyer": buyer,
                "token_ids": list(token_ids),
                "total_paid": split.total,
                "fee_paid": split.fee,
            },
        )

        result = PurchaseResult(
            buyer=buyer,
            token_ids=token_ids,
            total_paid=split.total,
            fee_paid=split.fee,
            retained=split.remainder,
        )
        event = Purchased(
            occurred_at=utc_now(),
            buyer=buyer,
            count=count,
            fee_paid=split.fee,
            retained=split.remainder,
            token_ids=token_ids,
        )
        return result, event


__all__ = ["PurchaseResult", "DirectSaleProcessor"]
