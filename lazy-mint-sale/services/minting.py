"""
All-or-nothing minting against the token ledger.

Tokens are minted one id at a time. If the ledger refuses any of them, the
ids already minted in the same batch are burned again and the whole batch is
rejected; the caller never sees a partial mint.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from domain.collaborators import TokenLedger
from domain.errors import MintFailedError

logger = logging.getLogger(__name__)


def next_token_ids(total_minted: int, count: int) -> Tuple[int, ...]:
    """Sequential ids following the `total_minted` already issued (first id is 1)."""
    return tuple(range(total_minted + 1, total_minted + count + 1))


def burn_tokens(ledger: TokenLedger, token_ids: Iterable[int]) -> None:
    """Roll back tokens minted by an operation that did not complete."""

    for token_id in reversed(list(token_ids)):
        if not ledger.burn(token_id):
            # Ledger and sale state now disagree; nothing left to compensate with.
            logger.error(
                f"Failed to roll back token {token_id}",
                extra={"token_id": token_id},
            )


def mint_batch(ledger: TokenLedger, to: str, token_ids: Tuple[int, ...]) -> Tuple[int, ...]:
    """
    Mint every id in `token_ids` to `to`.

    Raises:
        MintFailedError: If any mint is refused (already minted ids are burned)
    """
    minted: List[int] = []

    for token_id in token_ids:
        try:
            ok = ledger.mint(to, token_id)
        except Exception:
            burn_tokens(ledger, minted)
            raise
        if not ok:
            burn_tokens(ledger, minted)
            raise MintFailedError(f"Ledger refused to mint token {token_id} to {to}")
        minted.append(token_id)

    return tuple(minted)


__all__ = ["next_token_ids", "mint_batch", "burn_tokens"]
