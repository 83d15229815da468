"""
Tests for the in-memory token ledger and payment gateway.
"""

import pytest

from conftest import ADMIN, BUYER, OUTSIDER
from repositories.memory_ledger import InMemoryPaymentGateway, InMemoryTokenLedger


def test_mint_and_query() -> None:
    ledger = InMemoryTokenLedger()

    assert ledger.mint(BUYER, 2) is True
    assert ledger.mint(BUYER, 1) is True
    assert ledger.mint(OUTSIDER, 3) is True

    assert ledger.owner_of(1) == BUYER
    assert ledger.balance_of(BUYER) == 2
    assert ledger.tokens_of_owner(BUYER) == [1, 2]
    assert ledger.total_supply() == 3


def test_mint_rejects_duplicate_and_non_positive_ids() -> None:
    ledger = InMemoryTokenLedger()
    ledger.mint(BUYER, 1)

    assert ledger.mint(OUTSIDER, 1) is False
    assert ledger.mint(BUYER, 0) is False
    assert ledger.owner_of(1) == BUYER
    assert ledger.total_supply() == 1


def test_burn_removes_token() -> None:
    ledger = InMemoryTokenLedger()
    ledger.mint(BUYER, 1)

    assert ledger.burn(1) is True
    assert ledger.burn(1) is False
    assert ledger.balance_of(BUYER) == 0
    with pytest.raises(LookupError):
        ledger.owner_of(1)


def test_addresses_are_normalised() -> None:
    ledger = InMemoryTokenLedger()
    ledger.mint(BUYER.lower(), 1)

    assert ledger.owner_of(1) == BUYER
    assert ledger.tokens_of_owner(BUYER.lower()) == [1]


def test_mint_rejects_malformed_recipient() -> None:
    with pytest.raises(ValueError):
        InMemoryTokenLedger().mint("0x1234", 1)


def test_gateway_credits_recipient() -> None:
    gateway = InMemoryPaymentGateway()

    assert gateway.transfer(ADMIN, 10) is True
    assert gateway.transfer(ADMIN, 5) is True

    assert gateway.balance_of(ADMIN) == 15
    assert gateway.balance_of(BUYER) == 0


def test_gateway_fail_next() -> None:
    gateway = InMemoryPaymentGateway()
    gateway.fail_next = 1

    assert gateway.transfer(ADMIN, 10) is False
    assert gateway.transfer(ADMIN, 10) is True
    assert gateway.balance_of(ADMIN) == 10


def test_gateway_rejects_negative_amount() -> None:
    assert InMemoryPaymentGateway().transfer(ADMIN, -1) is False
