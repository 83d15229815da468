"""
Tests for voucher redemption (`redeem`).

Covers contract rules:
- only vouchers signed by the sale signer for this sale's domain are accepted
- redemption requires the pre-sale phase and the exact voucher price
- tokens go to the voucher's redeemer, the full payment is retained
- supply cap and replay protection
- failures leave ledger and balances untouched
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

import pytest

from conftest import (
    ADMIN,
    BUYER,
    CHAIN_ID,
    CONTRACT_ADDRESS,
    OUTSIDER_KEY,
    REDEEMER,
    FlakyTokenLedger,
    make_config,
)
from domain.errors import (
    InvalidSignatureError,
    MintFailedError,
    PhaseMismatchError,
    SupplyExceededError,
    VoucherAlreadyRedeemedError,
    WrongPaymentError,
)
from domain.events import Redeemed
from domain.phase import DistributionPhase
from domain.voucher import SigningDomain, Voucher
from repositories.memory_ledger import InMemoryPaymentGateway
from services.sale_engine import SaleEngine

VoucherFactory = Callable[..., Voucher]


def test_redeem_voucher_mints_to_redeemer(presale_engine: SaleEngine, make_voucher: VoucherFactory) -> None:
    """Pre-sale voucher {redeemer=R, price=100, amount=1} redeemed paying 100."""

    presale_engine.set_price(ADMIN, 100)
    voucher = make_voucher(price=100, amount=1)

    result = presale_engine.redeem(voucher, payment=100)

    assert result.token_ids == (1,)
    assert presale_engine.balance_of(REDEEMER) == 1
    assert presale_engine.balance == 100
    assert presale_engine.total_minted == 1


def test_redeem_mints_full_amount_and_emits_event(
    presale_engine: SaleEngine, make_voucher: VoucherFactory
) -> None:
    result = presale_engine.redeem(make_voucher(amount=3, price=300), payment=300)

    assert result.token_ids == (1, 2, 3)
    event = presale_engine.events[-1]
    assert isinstance(event, Redeemed)
    assert (event.redeemer, event.amount) == (REDEEMER, 3)
    assert event.price_paid == 300
    assert event.voucher_digest == "0x" + result.voucher_digest.hex()


def test_redeem_does_not_pay_fee(
    presale_engine: SaleEngine, make_voucher: VoucherFactory, payments: InMemoryPaymentGateway
) -> None:
    presale_engine.redeem(make_voucher(price=10_000), payment=10_000)

    assert presale_engine.balance == 10_000
    assert payments.balance_of(presale_engine.config.fee_address) == 0


def test_anyone_may_submit_but_tokens_go_to_redeemer(
    presale_engine: SaleEngine, make_voucher: VoucherFactory
) -> None:
    presale_engine.redeem(make_voucher(redeemer=BUYER), payment=100)

    assert presale_engine.tokens_of_wallet_owner(BUYER) == [1]
    assert presale_engine.balance_of(REDEEMER) == 0


def test_voucher_signed_by_other_key_is_rejected(
    presale_engine: SaleEngine, make_voucher: VoucherFactory
) -> None:
    voucher = make_voucher(key=OUTSIDER_KEY)

    with pytest.raises(InvalidSignatureError):
        presale_engine.redeem(voucher, payment=100)

    assert presale_engine.total_minted == 0
    assert presale_engine.balance == 0


@pytest.mark.parametrize(
    "change",
    [{"redeemer": BUYER}, {"price": 1}, {"amount": 5}, {"data": b"\x00"}],
)
def test_tampered_voucher_is_rejected(
    presale_engine: SaleEngine, make_voucher: VoucherFactory, change: dict
) -> None:
    tampered = replace(make_voucher(), **change)

    with pytest.raises(InvalidSignatureError):
        presale_engine.redeem(tampered, payment=tampered.price)

    assert presale_engine.total_minted == 0


def test_voucher_for_other_chain_is_rejected(presale_engine: SaleEngine, make_voucher: VoucherFactory) -> None:
    voucher = make_voucher(domain=SigningDomain(chain_id=CHAIN_ID + 1, verifying_contract=CONTRACT_ADDRESS))

    with pytest.raises(InvalidSignatureError):
        presale_engine.redeem(voucher, payment=100)


def test_unsigned_voucher_is_rejected(presale_engine: SaleEngine) -> None:
    with pytest.raises(InvalidSignatureError):
        presale_engine.redeem(Voucher(redeemer=REDEEMER, price=100, amount=1), payment=100)


@pytest.mark.parametrize("phase", [DistributionPhase.CLOSED, DistributionPhase.PUBLIC])
def test_redeem_requires_pre_sale(engine: SaleEngine, make_voucher: VoucherFactory, phase: DistributionPhase) -> None:
    engine.set_distribution_phase(ADMIN, phase)

    with pytest.raises(PhaseMismatchError):
        engine.redeem(make_voucher(), payment=100)

    assert engine.total_minted == 0


def test_signature_is_checked_before_phase(engine: SaleEngine, make_voucher: VoucherFactory) -> None:
    with pytest.raises(InvalidSignatureError):
        engine.redeem(make_voucher(key=OUTSIDER_KEY), payment=100)


@pytest.mark.parametrize("payment", [0, 99, 101])
def test_redeem_requires_exact_price(
    presale_engine: SaleEngine, make_voucher: VoucherFactory, payment: int
) -> None:
    with pytest.raises(WrongPaymentError):
        presale_engine.redeem(make_voucher(price=100), payment=payment)

    assert presale_engine.balance == 0
    assert presale_engine.balance_of(REDEEMER) == 0


def test_redeem_cannot_exceed_max_supply(payments: InMemoryPaymentGateway, make_voucher: VoucherFactory) -> None:
    engine = SaleEngine(make_config(max_supply=2), FlakyTokenLedger(), payments)
    engine.set_distribution_phase(ADMIN, 1)

    with pytest.raises(SupplyExceededError):
        engine.redeem(make_voucher(amount=3, price=0), payment=0)

    engine.redeem(make_voucher(amount=2, price=0), payment=0)
    assert engine.total_minted == 2


def test_redeem_is_not_gated_by_pause(presale_engine: SaleEngine, make_voucher: VoucherFactory) -> None:
    presale_engine.pause(ADMIN)

    presale_engine.redeem(make_voucher(), payment=100)

    assert presale_engine.balance_of(REDEEMER) == 1


def test_voucher_cannot_be_redeemed_twice(presale_engine: SaleEngine, make_voucher: VoucherFactory) -> None:
    voucher = make_voucher()
    presale_engine.redeem(voucher, payment=100)

    with pytest.raises(VoucherAlreadyRedeemedError):
        presale_engine.redeem(voucher, payment=100)

    assert presale_engine.balance_of(REDEEMER) == 1
    assert presale_engine.balance == 100


def test_distinct_vouchers_for_same_redeemer_are_independent(
    presale_engine: SaleEngine, make_voucher: VoucherFactory
) -> None:
    presale_engine.redeem(make_voucher(data=b"\x01"), payment=100)
    presale_engine.redeem(make_voucher(data=b"\x02"), payment=100)

    assert presale_engine.balance_of(REDEEMER) == 2


def test_replay_allowed_when_protection_disabled(
    config, ledger: FlakyTokenLedger, payments: InMemoryPaymentGateway, make_voucher: VoucherFactory
) -> None:
    engine = SaleEngine(config, ledger, payments, enforce_voucher_replay_protection=False)
    engine.set_distribution_phase(ADMIN, 1)
    voucher = make_voucher()

    engine.redeem(voucher, payment=100)
    engine.redeem(voucher, payment=100)

    assert engine.balance_of(REDEEMER) == 2


def test_failed_mint_does_not_consume_voucher(
    presale_engine: SaleEngine, ledger: FlakyTokenLedger, make_voucher: VoucherFactory
) -> None:
    voucher = make_voucher(amount=2, price=200)
    ledger.refuse_token_id = 2

    with pytest.raises(MintFailedError):
        presale_engine.redeem(voucher, payment=200)

    assert ledger.total_supply() == 0
    assert presale_engine.total_minted == 0
    assert presale_engine.balance == 0

    ledger.refuse_token_id = None
    result = presale_engine.redeem(voucher, payment=200)
    assert result.token_ids == (1, 2)
