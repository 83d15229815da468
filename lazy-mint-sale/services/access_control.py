"""
Access control for admin-only sale operations.

The sale has a single privileged identity: the configured signer address,
which also signs vouchers and receives withdrawals. The check always runs
before any other validation of an admin operation.
"""

from __future__ import annotations

import logging

from domain.address import same_address
from domain.errors import UnauthorizedError

logger = logging.getLogger(__name__)


class AccessControl:
    def __init__(self, admin: str) -> None:
        self._admin = admin

    @property
    def admin(self) -> str:
        return self._admin

    def is_admin(self, caller: str) -> bool:
        return isinstance(caller, str) and same_address(caller, self._admin)

    def require_admin(self, caller: str, action: str) -> None:
        """
        Raise UnauthorizedError unless `caller` is the admin.

        Args:
            caller: Address invoking the operation
            action: Operation name (for the error message and logs)
        """
        if not self.is_admin(caller):
            logger.warning(
                f"Unauthorized call to '{action}'",
                extra={"caller": caller, "action": action},
            )
            raise UnauthorizedError(f"{caller} is not allowed to call {action}")


__all__ = ["AccessControl"]
