"""
Treasury service: admin withdrawal of the sale's retained balance.
"""

from __future__ import annotations

import logging
from typing import Optional

from domain.collaborators import PaymentGateway
from domain.errors import TransferFailedError
from domain.events import Withdrawn
from domain.sale import SaleState
from domain.time import utc_now
from services.access_control import AccessControl

logger = logging.getLogger(__name__)


class TreasuryManager:
    def __init__(self, state: SaleState, access: AccessControl, payments: PaymentGateway) -> None:
        self._state = state
        self._access = access
        self._payments = payments

    def withdraw(self, caller: str) -> Optional[Withdrawn]:
        """
        Send the entire retained balance to the admin.

        Returns:
            Withdrawn event, or None when the balance was already zero

        Raises:
            UnauthorizedError: If caller is not the admin
            TransferFailedError: If the transfer fails (balance unchanged)
        """
        self._access.require_admin(caller, "withdraw")

        amount = self._state.balance
        if amount == 0:
            return None

        if not self._payments.transfer(self._access.admin, amount):
            raise TransferFailedError(f"Withdrawal of {amount} wei to {self._access.admin} failed")

        self._state.balance = 0
        logger.info(f"Withdrew {amount} wei", extra={"to": self._access.admin, "amount": amount})
        return Withdrawn(occurred_at=utc_now(), to=self._access.admin, amount=amount)


__all__ = ["TreasuryManager"]
