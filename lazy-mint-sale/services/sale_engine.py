"""
Sale engine: the deployment-wide facade over the sale components.

Owns:
- the single SaleState aggregate
- the single exclusive lock every public operation runs under
- the event log and its subscribers

Every public operation is serialized: it validates, performs external effects
(mint, transfers) with compensation on failure, and only then commits to the
state. A rejected operation raises a SaleError and leaves state, ledger and
balances exactly as they were.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, TypeVar

from domain.address import require_address
from domain.collaborators import PaymentGateway, TokenLedger, normalize_interface_id
from domain.errors import SaleError, UnknownTokenError
from domain.events import BaseURIChanged, PriceChanged, SaleEvent
from domain.phase import DistributionPhase
from domain.sale import SaleConfig
from domain.time import utc_now
from domain.voucher import SigningDomain, Voucher
from services.access_control import AccessControl
from services.direct_sale_service import DirectSaleProcessor, PurchaseResult
from services.phase_controller import PhaseController
from services.state_recovery import restore_sale_state
from services.treasury_service import TreasuryManager
from services.voucher_redemption_service import RedemptionResult, VoucherRedeemer

logger = logging.getLogger(__name__)

EventSubscriber = Callable[[SaleEvent], None]
T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SaleSnapshot:
    """Point-in-time view of the sale, taken under the engine lock."""
    name: str
    symbol: str
    phase: DistributionPhase
    paused: bool
    active: bool
    total_minted: int
    max_supply: int
    unit_price: int
    redemption_price: int
    max_per_transaction: int
    balance: int
    base_uri: str
    chain_id: int
    contract_address: str


class SaleEngine:
    """
    Lazy-mint NFT sale.

    Example:
        engine = SaleEngine(config, InMemoryTokenLedger(), InMemoryPaymentGateway())
        engine.set_distribution_phase(admin, DistributionPhase.PUBLIC)
        engine.buy(buyer, 5, payment=5 * config.unit_price)

    A restarted deployment passes its ledger and recorded `history` (event
    payloads, oldest first); the engine resumes `total_minted` from the
    ledger and the remaining state from the history.
    """

    def __init__(
        self,
        config: SaleConfig,
        ledger: TokenLedger,
        payments: PaymentGateway,
        *,
        enforce_voucher_replay_protection: bool = True,
        history: Iterable[Mapping[str, Any]] = (),
    ) -> None:
        self._config = config
        self._ledger = ledger
        self._payments = payments
        self._state = restore_sale_state(config, ledger, history)
        self._lock = threading.RLock()
        self._events: List[SaleEvent] = []
        self._subscribers: List[EventSubscriber] = []

        self._access = AccessControl(config.signer_address)
        self._phases = PhaseController(self._state, self._access)
        self._direct_sale = DirectSaleProcessor(config, self._state, self._phases, ledger, payments)
        self._redeemer = VoucherRedeemer(
            config,
            self._state,
            self._phases,
            ledger,
            enforce_replay_protection=enforce_voucher_replay_protection,
        )
        self._treasury = TreasuryManager(self._state, self._access, payments)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _run(self, action: str, operation: Callable[[], T]) -> T:
        with self._lock:
            try:
                return operation()
            except SaleError as e:
                logger.warning(
                    f"Rejected '{action}': {e}",
                    extra={"action": action, "error_code": e.code},
                )
                raise

    def _publish(self, event: Optional[SaleEvent]) -> None:
        # Called with the lock held, after the state change was committed.
        if event is None:
            return
        self._events.append(event)
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.exception(
                    f"Event subscriber failed for {event.name}",
                    extra={"event": event.name},
                )

    def subscribe(self, subscriber: EventSubscriber) -> None:
        with self._lock:
            self._subscribers.append(subscriber)

    @property
    def events(self) -> List[SaleEvent]:
        with self._lock:
            return list(self._events)

    # ------------------------------------------------------------------
    # Admin operations
    # ------------------------------------------------------------------

    def set_base_uri(self, caller: str, uri: str) -> None:
        def op() -> None:
            self._access.require_admin(caller, "set_base_uri")
            self._state.base_uri = uri
            self._publish(BaseURIChanged(occurred_at=utc_now(), base_uri=uri))

        self._run("set_base_uri", op)

    def set_price(self, caller: str, price: int) -> None:
        def op() -> None:
            self._access.require_admin(caller, "set_price")
            if price < 0:
                raise ValueError("price must be >= 0")
            self._state.redemption_price = price
            self._publish(PriceChanged(occurred_at=utc_now(), price=price))

        self._run("set_price", op)

    def flip_sale_state(self, caller: str) -> bool:
        def op() -> bool:
            event = self._phases.flip_sale_state(caller)
            self._publish(event)
            return event.active

        return self._run("flip_sale_state", op)

    def set_distribution_phase(self, caller: str, phase: int | DistributionPhase) -> DistributionPhase:
        def op() -> DistributionPhase:
            event = self._phases.set_distribution_phase(caller, phase)
            self._publish(event)
            return event.phase

        return self._run("set_distribution_phase", op)

    def pause(self, caller: str) -> None:
        self._run("pause", lambda: self._publish(self._phases.pause(caller)))

    def unpause(self, caller: str) -> None:
        self._run("unpause", lambda: self._publish(self._phases.unpause(caller)))

    def withdraw(self, caller: str) -> int:
        """Withdraw the retained balance to the admin; returns the amount sent."""

        def op() -> int:
            event = self._treasury.withdraw(caller)
            self._publish(event)
            return event.amount if event is not None else 0

        return self._run("withdraw", op)

    # ------------------------------------------------------------------
    # Minting operations
    # ------------------------------------------------------------------

    def buy(self, caller: str, count: int, payment: int) -> PurchaseResult:
        def op() -> PurchaseResult:
            result, event = self._direct_sale.buy(caller, count, payment)
            self._publish(event)
            return result

        return self._run("buy", op)

    def redeem(self, voucher: Voucher, payment: int) -> RedemptionResult:
        def op() -> RedemptionResult:
            result, event = self._redeemer.redeem(voucher, payment)
            self._publish(event)
            return result

        return self._run("redeem", op)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def get_chain_id(self) -> int:
        return self._config.chain_id

    @property
    def config(self) -> SaleConfig:
        return self._config

    @property
    def signing_domain(self) -> SigningDomain:
        return self._redeemer.signing_domain

    @property
    def admin(self) -> str:
        return self._access.admin

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def symbol(self) -> str:
        return self._config.symbol

    @property
    def unit_price(self) -> int:
        return self._config.unit_price

    @property
    def max_supply(self) -> int:
        return self._config.max_supply

    @property
    def max_per_transaction(self) -> int:
        return self._config.max_per_transaction

    @property
    def distribution_phase(self) -> DistributionPhase:
        with self._lock:
            return self._state.phase

    @property
    def sale_is_active(self) -> bool:
        with self._lock:
            return self._state.active

    @property
    def paused(self) -> bool:
        with self._lock:
            return self._state.paused

    @property
    def total_minted(self) -> int:
        with self._lock:
            return self._state.total_minted

    @property
    def balance(self) -> int:
        with self._lock:
            return self._state.balance

    @property
    def redemption_price(self) -> int:
        with self._lock:
            return self._state.redemption_price

    @property
    def base_uri(self) -> str:
        with self._lock:
            return self._state.base_uri

    def snapshot(self) -> SaleSnapshot:
        with self._lock:
            return SaleSnapshot(
                name=self._config.name,
                symbol=self._config.symbol,
                phase=self._state.phase,
                paused=self._state.paused,
                active=self._state.active,
                total_minted=self._state.total_minted,
                max_supply=self._config.max_supply,
                unit_price=self._config.unit_price,
                redemption_price=self._state.redemption_price,
                max_per_transaction=self._config.max_per_transaction,
                balance=self._state.balance,
                base_uri=self._state.base_uri,
                chain_id=self._config.chain_id,
                contract_address=self._config.contract_address,
            )

    def owner_of(self, token_id: int) -> str:
        with self._lock:
            try:
                return self._ledger.owner_of(token_id)
            except LookupError as e:
                raise UnknownTokenError(f"Token {token_id} does not exist") from e

    def token_uri(self, token_id: int) -> str:
        """
        Metadata URI: base_uri + token id + ".json".

        Returns an empty string while no base URI is set.

        Raises:
            UnknownTokenError: If the token has not been minted
        """
        with self._lock:
            self.owner_of(token_id)
            if not self._state.base_uri:
                return ""
            return f"{self._state.base_uri}{token_id}.json"

    def balance_of(self, owner: str) -> int:
        with self._lock:
            return self._ledger.balance_of(require_address("owner", owner))

    def tokens_of_wallet_owner(self, owner: str) -> List[int]:
        with self._lock:
            return list(self._ledger.tokens_of_owner(require_address("owner", owner)))

    def supports_interface(self, interface_id: str) -> bool:
        return self._ledger.supports_interface(normalize_interface_id(interface_id))


__all__ = ["SaleEngine", "SaleSnapshot", "EventSubscriber"]
