"""
Sale event repository (persistence).

Stores the engine's committed events in Supabase for auditing. It only
inserts and fetches event rows; it never feeds back into sale decisions.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from domain.events import SaleEvent

# Supabase table name for sale events.
_EVENTS_TABLE: str = "sale_events"


def _default_client() -> Any:
    from repositories.client import get_supabase

    return get_supabase()


def record_sale_event(event: SaleEvent, client: Optional[Any] = None) -> Dict[str, Any]:
    """
    Insert a sale event.

    Args:
        event: Committed SaleEvent
        client: Supabase client (default: shared client)

    Returns:
        The inserted row payload
    """

    client = client or _default_client()

    payload: dict[str, Any] = {
        "event_id": str(uuid4()),
        "event_name": event.name,
        "payload": json.dumps(event.to_payload()),
        "occurred_at_utc": event.occurred_at.isoformat(),
        "recorded_at_utc": datetime.now(timezone.utc).isoformat(),
    }

    response = client.table(_EVENTS_TABLE).insert(payload).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to record sale event: {error}")

    return payload


def list_sale_events(event_name: Optional[str] = None, client: Optional[Any] = None) -> List[Dict[str, Any]]:
    """
    Retrieve recorded events (decoded payloads), oldest first.

    Args:
        event_name: Only return events with this name (e.g. "Purchased")
    """

    client = client or _default_client()

    query = client.table(_EVENTS_TABLE).select("*")
    if event_name is not None:
        query = query.eq("event_name", event_name)
    response = query.order("occurred_at_utc").execute()

    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to list sale events: {error}")

    rows = getattr(response, "data", None) or []
    return [json.loads(row["payload"]) for row in rows]


def make_event_recorder(client: Optional[Any] = None) -> Callable[[SaleEvent], None]:
    """Build an engine subscriber that records every event."""

    def recorder(event: SaleEvent) -> None:
        record_sale_event(event, client=client)

    return recorder


__all__ = ["record_sale_event", "list_sale_events", "make_event_recorder"]
