"""
In-memory collaborators for the sale engine.

- InMemoryTokenLedger: token id -> owner mapping with per-owner enumeration
- InMemoryPaymentGateway: records outbound transfers as per-address balances

Both are the default backends for local runs and the test-suite. They are
thread-safe on their own; the sale engine still serializes every operation.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Set

from domain.address import require_address
from domain.collaborators import SUPPORTED_INTERFACES, normalize_interface_id


class InMemoryTokenLedger:
    def __init__(self) -> None:
        self._owners: Dict[int, str] = {}
        self._by_owner: Dict[str, Set[int]] = {}
        self._lock = threading.Lock()

    def mint(self, to: str, token_id: int) -> bool:
        owner = require_address("to", to)
        with self._lock:
            if token_id <= 0 or token_id in self._owners:
                return False
            self._owners[token_id] = owner
            self._by_owner.setdefault(owner, set()).add(token_id)
            return True

    def burn(self, token_id: int) -> bool:
        with self._lock:
            owner = self._owners.pop(token_id, None)
            if owner is None:
                return False
            self._by_owner[owner].discard(token_id)
            return True

    def balance_of(self, owner: str) -> int:
        key = require_address("owner", owner)
        with self._lock:
            return len(self._by_owner.get(key, ()))

    def owner_of(self, token_id: int) -> str:
        with self._lock:
            owner = self._owners.get(token_id)
        if owner is None:
            raise LookupError(f"Token {token_id} does not exist")
        return owner

    def tokens_of_owner(self, owner: str) -> List[int]:
        key = require_address("owner", owner)
        with self._lock:
            return sorted(self._by_owner.get(key, ()))

    def total_supply(self) -> int:
        with self._lock:
            return len(self._owners)

    def supports_interface(self, interface_id: str) -> bool:
        return normalize_interface_id(interface_id) in SUPPORTED_INTERFACES


class InMemoryPaymentGateway:
    """
    Payment gateway that credits recipients in memory.

    `fail_next` makes the next N transfers fail, to exercise rollback paths.
    """

    def __init__(self) -> None:
        self._balances: Dict[str, int] = {}
        self._lock = threading.Lock()
        self.fail_next: int = 0

    def transfer(self, to: str, amount: int) -> bool:
        recipient = require_address("to", to)
        if amount < 0:
            return False
        with self._lock:
            if self.fail_next > 0:
                self.fail_next -= 1
                return False
            self._balances[recipient] = self._balances.get(recipient, 0) + amount
            return True

    def balance_of(self, address: str) -> int:
        key = require_address("address", address)
        with self._lock:
            return self._balances.get(key, 0)


__all__ = ["InMemoryTokenLedger", "InMemoryPaymentGateway"]
