"""
Token repository (persistence).

Supabase-backed Token Ledger collaborator. It stores one row per minted token
and answers ownership queries. It does not enforce sale rules (supply caps,
phases, payments); the sale engine decides what gets minted.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from domain.address import require_address
from domain.collaborators import SUPPORTED_INTERFACES, normalize_interface_id

logger = logging.getLogger(__name__)

# Supabase table name for minted tokens.
# Keep this aligned with your database schema (token_id is the primary key).
_TOKENS_TABLE: str = "tokens"


def _rows(response: Any, action: str) -> List[dict]:
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")
    return getattr(response, "data", None) or []


class SupabaseTokenLedger:
    """
    Token Ledger persisted in the Supabase `tokens` table.

    Args:
        client: Supabase client (default: the shared client from repositories.client)
    """

    def __init__(self, client: Optional[Any] = None) -> None:
        if client is None:
            from repositories.client import get_supabase

            client = get_supabase()
        self._client = client

    def mint(self, to: str, token_id: int) -> bool:
        """
        Insert a token row. Returns False if the insert is rejected
        (e.g. duplicate token_id).
        """
        from postgrest.exceptions import APIError

        payload: dict[str, Any] = {
            "token_id": token_id,
            "owner": require_address("to", to),
            "minted_at_utc": datetime.now(timezone.utc).isoformat(),
        }

        try:
            response = self._client.table(_TOKENS_TABLE).insert(payload).execute()
        except APIError as e:
            logger.warning(
                f"Token insert rejected for token {token_id}",
                extra={"token_id": token_id, "error": str(e)},
            )
            return False

        error = getattr(response, "error", None)
        if error:
            logger.warning(
                f"Token insert failed for token {token_id}",
                extra={"token_id": token_id, "error": str(error)},
            )
            return False
        return True

    def burn(self, token_id: int) -> bool:
        response = (
            self._client.table(_TOKENS_TABLE)
            .delete()
            .eq("token_id", token_id)
            .execute()
        )
        return bool(_rows(response, "burn token"))

    def balance_of(self, owner: str) -> int:
        response = (
            self._client.table(_TOKENS_TABLE)
            .select("token_id")
            .eq("owner", require_address("owner", owner))
            .execute()
        )
        return len(_rows(response, "count tokens"))

    def owner_of(self, token_id: int) -> str:
        response = (
            self._client.table(_TOKENS_TABLE)
            .select("owner")
            .eq("token_id", token_id)
            .limit(1)
            .execute()
        )
        rows = _rows(response, "get token owner")
        if not rows:
            raise LookupError(f"Token {token_id} does not exist")
        return str(rows[0]["owner"])

    def tokens_of_owner(self, owner: str) -> List[int]:
        response = (
            self._client.table(_TOKENS_TABLE)
            .select("token_id")
            .eq("owner", require_address("owner", owner))
            .order("token_id")
            .execute()
        )
        return [int(row["token_id"]) for row in _rows(response, "list tokens")]

    def total_supply(self) -> int:
        response = self._client.table(_TOKENS_TABLE).select("token_id").execute()
        return len(_rows(response, "count tokens"))

    def supports_interface(self, interface_id: str) -> bool:
        return normalize_interface_id(interface_id) in SUPPORTED_INTERFACES


__all__ = ["SupabaseTokenLedger"]
