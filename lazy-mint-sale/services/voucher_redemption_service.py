"""
Voucher redemption service (lazy minting).

Redeeming a voucher mints `voucher.amount` tokens to `voucher.redeemer` for
exactly `voucher.price` wei, provided the voucher was signed by the sale's
signer for this sale's signing domain.

Checks, in order:
1. signature recovers to the signer      -> InvalidSignatureError
2. phase is PRE_SALE                     -> PhaseMismatchError
3. payment equals the voucher price      -> WrongPaymentError
4. supply cap not exceeded               -> SupplyExceededError
5. voucher not redeemed before           -> VoucherAlreadyRedeemedError
   (only when replay protection is enabled)

Redemption is not gated by the pause flag.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from domain.address import same_address
from domain.collaborators import TokenLedger
from domain.errors import (
    InvalidSignatureError,
    SupplyExceededError,
    VoucherAlreadyRedeemedError,
    WrongPaymentError,
)
from domain.events import Redeemed
from domain.phase import DistributionPhase
from domain.sale import SaleConfig, SaleState
from domain.time import utc_now
from domain.voucher import SigningDomain, Voucher
from services.minting import mint_batch, next_token_ids
from services.phase_controller import PhaseController
from services.voucher_signing import recover_signer, voucher_digest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RedemptionResult:
    redeemer: str
    token_ids: Tuple[int, ...]
    price_paid: int
    voucher_digest: bytes


class VoucherRedeemer:
    def __init__(
        self,
        config: SaleConfig,
        state: SaleState,
        phases: PhaseController,
        ledger: TokenLedger,
        *,
        enforce_replay_protection: bool = True,
    ) -> None:
        self._config = config
        self._state = state
        self._phases = phases
        self._ledger = ledger
        self._domain = SigningDomain.for_sale(config)
        self._enforce_replay_protection = enforce_replay_protection

    @property
    def signing_domain(self) -> SigningDomain:
        return self._domain

    def verify(self, voucher: Voucher) -> bytes:
        """
        Verify the voucher signature.

        Returns:
            The voucher digest

        Raises:
            InvalidSignatureError: If the signer is not the sale's signer
        """
        digest = voucher_digest(voucher, self._domain)
        signer = recover_signer(digest, voucher.signature)

        if not same_address(signer, self._config.signer_address):
            logger.warning(
                "Voucher signed by unexpected key",
                extra={"recovered_signer": signer, "redeemer": voucher.redeemer},
            )
            raise InvalidSignatureError(f"Voucher signature recovers to {signer}, not the sale signer")

        return digest

    def validate(self, voucher: Voucher, payment: int) -> bytes:
        digest = self.verify(voucher)

        self._phases.require_phase(DistributionPhase.PRE_SALE, "redeem")

        if payment != voucher.price:
            raise WrongPaymentError(f"Payment must be exactly {voucher.price} wei, got {payment}")

        if voucher.amount > self._state.remaining_supply(self._config):
            raise SupplyExceededError(
                f"Redeeming {voucher.amount} would exceed max supply "
                f"({self._state.total_minted}/{self._config.max_supply} minted)"
            )

        if self._enforce_replay_protection and digest in self._state.redeemed_vouchers:
            raise VoucherAlreadyRedeemedError(f"Voucher 0x{digest.hex()} was already redeemed")

        return digest

    def redeem(self, voucher: Voucher, payment: int) -> Tuple[RedemptionResult, Redeemed]:
        digest = self.validate(voucher, payment)

        token_ids = mint_batch(
            self._ledger,
            voucher.redeemer,
            next_token_ids(self._state.total_minted, voucher.amount),
        )

        self._state.total_minted += voucher.amount
        self._state.balance += payment
        if self._enforce_replay_protection:
            self._state.redeemed_vouchers.add(digest)

        logger.info(
            f"Redeemed voucher for {voucher.redeemer}",
            extra={
                "redeemer": voucher.redeemer,
                "token_ids": list(token_ids),
                "price": voucher.price,
            },
        )

        result = RedemptionResult(
            redeemer=voucher.redeemer,
            token_ids=token_ids,
            price_paid=payment,
            voucher_digest=digest,
        )
        event = Redeemed(
            occurred_at=utc_now(),
            redeemer=voucher.redeemer,
            amount=voucher.amount,
            price_paid=payment,
            voucher_digest="0x" + digest.hex(),
            token_ids=token_ids,
        )
        return result, event


__all__ = ["RedemptionResult", "VoucherRedeemer"]
