"""
Phase controller: distribution phase, pause flag and the legacy active flag.

Transitions:
- set_distribution_phase: any phase -> any phase, admin only
- flip_sale_state: toggles `active`, admin only (gates nothing by itself)
- pause / unpause: admin only; pause gates direct purchases

The controller mutates the shared SaleState and must be called from inside
the sale engine's exclusive section.
"""

from __future__ import annotations

import logging

from domain.errors import NotPausedError, PausedError, PhaseMismatchError
from domain.events import PhaseChanged, SalePaused, SaleStateChanged, SaleUnpaused
from domain.phase import DistributionPhase
from domain.sale import SaleState
from domain.time import utc_now
from services.access_control import AccessControl

logger = logging.getLogger(__name__)


class PhaseController:
    def __init__(self, state: SaleState, access: AccessControl) -> None:
        self._state = state
        self._access = access

    @property
    def phase(self) -> DistributionPhase:
        return self._state.phase

    def set_distribution_phase(self, caller: str, phase: int | DistributionPhase) -> PhaseChanged:
        self._access.require_admin(caller, "set_distribution_phase")
        new_phase = DistributionPhase.parse(phase)

        previous = self._state.phase
        self._state.phase = new_phase
        logger.info(f"Distribution phase changed: {previous.name} -> {new_phase.name}")
        return PhaseChanged(occurred_at=utc_now(), previous=previous, phase=new_phase)

    def flip_sale_state(self, caller: str) -> SaleStateChanged:
        self._access.require_admin(caller, "flip_sale_state")

        self._state.active = not self._state.active
        logger.info(f"Sale active flag set to {self._state.active}")
        return SaleStateChanged(occurred_at=utc_now(), active=self._state.active)

    def pause(self, caller: str) -> SalePaused:
        self._access.require_admin(caller, "pause")
        self.require_not_paused()

        self._state.paused = True
        logger.info("Sale paused")
        return SalePaused(occurred_at=utc_now(), account=self._access.admin)

    def unpause(self, caller: str) -> SaleUnpaused:
        self._access.require_admin(caller, "unpause")
        if not self._state.paused:
            raise NotPausedError("Pausable: not paused")

        self._state.paused = False
        logger.info("Sale unpaused")
        return SaleUnpaused(occurred_at=utc_now(), account=self._access.admin)

    def require_not_paused(self) -> None:
        if self._state.paused:
            raise PausedError("Pausable: paused")

    def require_phase(self, expected: DistributionPhase, action: str) -> None:
        if self._state.phase != expected:
            raise PhaseMismatchError(
                f"{action} requires phase {expected.name}, current phase is {self._state.phase.name}"
            )


__all__ = ["PhaseController"]
