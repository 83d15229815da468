"""
FastAPI dependencies.

The sale engine is a process-wide singleton built from the environment on
first use. Tests replace it through `app.dependency_overrides[get_engine]`.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Header

from repositories.memory_ledger import InMemoryPaymentGateway, InMemoryTokenLedger
from services.sale_engine import SaleEngine
from services.settings import SaleSettings, load_settings

logger = logging.getLogger(__name__)


def build_engine(settings: SaleSettings) -> SaleEngine:
    """
    Wire a SaleEngine for the configured ledger backend.

    The Supabase backend resumes from the stored tokens and recorded events,
    so a restarted process continues the same sale.
    """

    if settings.ledger_backend == "supabase":
        from repositories.event_repository import list_sale_events, make_event_recorder
        from repositories.token_repository import SupabaseTokenLedger

        engine = SaleEngine(
            settings.config,
            SupabaseTokenLedger(),
            InMemoryPaymentGateway(),
            enforce_voucher_replay_protection=settings.enforce_voucher_replay_protection,
            history=list_sale_events(),
        )
        engine.subscribe(make_event_recorder())
    else:
        engine = SaleEngine(
            settings.config,
            InMemoryTokenLedger(),
            InMemoryPaymentGateway(),
            enforce_voucher_replay_protection=settings.enforce_voucher_replay_protection,
        )

    logger.info(
        f"Sale engine ready for {settings.config.name} ({settings.config.symbol})",
        extra={"ledger_backend": settings.ledger_backend, "chain_id": settings.config.chain_id},
    )
    return engine


@lru_cache(maxsize=1)
def get_engine() -> SaleEngine:
    return build_engine(load_settings())


def get_caller(x_caller_address: str = Header(..., alias="X-Caller-Address")) -> str:
    """Address of the account invoking the operation."""
    return x_caller_address
