"""
Domain: distribution phases.

The sale moves between three phases. Transitions are unordered: the admin may
assign any phase at any time (Closed -> Public directly is allowed).

- CLOSED:   nothing can be minted
- PRE_SALE: only voucher redemption mints
- PUBLIC:   only direct purchase mints
"""

from __future__ import annotations

from enum import IntEnum


class DistributionPhase(IntEnum):
    CLOSED = 0
    PRE_SALE = 1
    PUBLIC = 2

    @staticmethod
    def parse(value: "int | DistributionPhase") -> "DistributionPhase":
        """
        Resolve a phase from its integer value.

        Raises:
            ValueError: If `value` is not 0, 1 or 2.
        """

        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Distribution phase must be an integer, got {value!r}")
        try:
            return DistributionPhase(value)
        except ValueError:
            raise ValueError(f"Unknown distribution phase: {value}") from None
