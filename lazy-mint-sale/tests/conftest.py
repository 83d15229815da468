"""
Pytest configuration for sale tests.

This file adds the parent directory to the Python path so that tests
can import from the domain, services, repositories and api modules, and
provides shared accounts, engines and fakes.
"""

import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest
from eth_account import Account
from eth_utils import to_wei

# Add the lazy-mint-sale directory to the Python path
# so tests can import domain, services, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.phase import DistributionPhase  # noqa: E402
from domain.sale import SaleConfig  # noqa: E402
from domain.voucher import SigningDomain, Voucher  # noqa: E402
from repositories.memory_ledger import InMemoryPaymentGateway, InMemoryTokenLedger  # noqa: E402
from services.sale_engine import SaleEngine  # noqa: E402
from services.voucher_signing import sign_voucher  # noqa: E402

ADMIN_KEY = "0x" + "11" * 32
BUYER_KEY = "0x" + "22" * 32
REDEEMER_KEY = "0x" + "33" * 32
FEE_KEY = "0x" + "44" * 32
CONTRACT_KEY = "0x" + "55" * 32
OUTSIDER_KEY = "0x" + "66" * 32

ADMIN = Account.from_key(ADMIN_KEY).address
BUYER = Account.from_key(BUYER_KEY).address
REDEEMER = Account.from_key(REDEEMER_KEY).address
FEE_ADDRESS = Account.from_key(FEE_KEY).address
CONTRACT_ADDRESS = Account.from_key(CONTRACT_KEY).address
OUTSIDER = Account.from_key(OUTSIDER_KEY).address

CHAIN_ID = 31337
UNIT_PRICE = to_wei(Decimal("0.0001"), "ether")
FEE_BASIS_POINTS = 275
MAX_SUPPLY = 50
BASE_URI = "https://www.nftCollection.com/"


def make_config(**overrides: Any) -> SaleConfig:
    params: Dict[str, Any] = dict(
        name="LCollection",
        symbol="NFTC",
        max_supply=MAX_SUPPLY,
        unit_price=UNIT_PRICE,
        signer_address=ADMIN,
        fee_address=FEE_ADDRESS,
        fee_basis_points=FEE_BASIS_POINTS,
        contract_address=CONTRACT_ADDRESS,
        chain_id=CHAIN_ID,
    )
    params.update(overrides)
    return SaleConfig(**params)


class FlakyTokenLedger(InMemoryTokenLedger):
    """In-memory ledger that refuses to mint one specific token id."""

    def __init__(self, refuse_token_id: Optional[int] = None) -> None:
        super().__init__()
        self.refuse_token_id = refuse_token_id

    def mint(self, to: str, token_id: int) -> bool:
        if token_id == self.refuse_token_id:
            return False
        return super().mint(to, token_id)


@pytest.fixture
def config() -> SaleConfig:
    return make_config()


@pytest.fixture
def ledger() -> FlakyTokenLedger:
    return FlakyTokenLedger()


@pytest.fixture
def payments() -> InMemoryPaymentGateway:
    return InMemoryPaymentGateway()


@pytest.fixture
def engine(config: SaleConfig, ledger: FlakyTokenLedger, payments: InMemoryPaymentGateway) -> SaleEngine:
    sale = SaleEngine(config, ledger, payments)
    sale.set_base_uri(ADMIN, BASE_URI)
    return sale


@pytest.fixture
def public_engine(engine: SaleEngine) -> SaleEngine:
    engine.set_distribution_phase(ADMIN, DistributionPhase.PUBLIC)
    return engine


@pytest.fixture
def presale_engine(engine: SaleEngine) -> SaleEngine:
    engine.set_distribution_phase(ADMIN, DistributionPhase.PRE_SALE)
    return engine


@pytest.fixture
def make_voucher(config: SaleConfig) -> Callable[..., Voucher]:
    """Factory for vouchers signed (by default) by the sale admin."""

    def factory(
        redeemer: str = REDEEMER,
        price: int = 100,
        amount: int = 1,
        data: bytes = b"",
        key: str = ADMIN_KEY,
        domain: Optional[SigningDomain] = None,
    ) -> Voucher:
        unsigned = Voucher(redeemer=redeemer, price=price, amount=amount, data=data)
        return sign_voucher(unsigned, key, domain or SigningDomain.for_sale(config))

    return factory


class FakeResponse:
    def __init__(self, data: Optional[List[dict]] = None, error: Optional[str] = None) -> None:
        self.data = data or []
        self.error = error


class FakeQuery:
    """Minimal stand-in for the supabase-py query builder."""

    def __init__(self, store: "FakeSupabase", table: str) -> None:
        self._store = store
        self._table = table
        self._action = "select"
        self._payload: Optional[dict] = None
        self._filters: List[tuple] = []
        self._order: Optional[str] = None
        self._limit: Optional[int] = None

    def insert(self, payload: dict) -> "FakeQuery":
        self._action, self._payload = "insert", payload
        return self

    def select(self, *_columns: str) -> "FakeQuery":
        self._action = "select"
        return self

    def delete(self) -> "FakeQuery":
        self._action = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str) -> "FakeQuery":
        self._order = column
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def execute(self) -> FakeResponse:
        rows = self._store.tables.setdefault(self._table, [])

        if self._action == "insert":
            assert self._payload is not None
            unique = self._store.unique.get(self._table)
            if unique and any(row[unique] == self._payload[unique] for row in rows):
                return FakeResponse(error=f"duplicate key value violates unique constraint on {unique}")
            rows.append(dict(self._payload))
            return FakeResponse(data=[dict(self._payload)])

        if self._action == "delete":
            removed = [row for row in rows if self._matches(row)]
            self._store.tables[self._table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(data=removed)

        selected = [dict(row) for row in rows if self._matches(row)]
        if self._order:
            selected.sort(key=lambda row: row[self._order])
        if self._limit is not None:
            selected = selected[: self._limit]
        return FakeResponse(data=selected)


class FakeSupabase:
    def __init__(self, unique: Optional[Dict[str, str]] = None) -> None:
        self.tables: Dict[str, List[dict]] = {}
        self.unique = unique or {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase(unique={"tokens": "token_id", "sale_events": "event_id"})
