"""
Sale settings loaded from the environment.

Environment variables (required):
- SALE_NAME, SALE_SYMBOL: collection name and symbol
- SALE_MAX_SUPPLY: total token cap
- SALE_UNIT_PRICE_WEI: direct-sale price per token
- SALE_SIGNER_ADDRESS: voucher signer and sale admin
- SALE_FEE_ADDRESS: recipient of the platform fee
- SALE_FEE_BASIS_POINTS: platform fee (275 = 2.75%)
- SALE_CONTRACT_ADDRESS: verifying contract used in the voucher signing domain

Optional:
- SALE_CHAIN_ID (default 31337)
- SALE_BASE_URI (default "")
- SALE_LEDGER_BACKEND: "memory" or "supabase" (default "memory")
- SALE_ENFORCE_VOUCHER_REPLAY: "true"/"false" (default "true")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from domain.sale import SaleConfig

# Look for .env in the lazy-mint-sale directory
env_path = Path(__file__).parent.parent / ".env"

LEDGER_BACKENDS = ("memory", "supabase")


@dataclass(frozen=True, slots=True)
class SaleSettings:
    config: SaleConfig
    ledger_backend: str = "memory"
    enforce_voucher_replay_protection: bool = True


def _required(env: Mapping[str, str], name: str, description: str) -> str:
    value = env.get(name)
    if not value:
        raise RuntimeError(
            f"Missing environment variable: {name}. "
            f"Set {name} to {description}."
        )
    return value


def _integer(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw!r}") from None


def _boolean(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise RuntimeError(f"Environment variable {name} must be true or false, got {raw!r}")


def load_settings(env: Optional[Mapping[str, str]] = None) -> SaleSettings:
    """
    Build SaleSettings from `env` (default: os.environ after loading .env).

    Raises:
        RuntimeError: If a required variable is missing or malformed
    """

    if env is None:
        load_dotenv(dotenv_path=env_path)
        env = os.environ

    backend = env.get("SALE_LEDGER_BACKEND", "memory").strip().lower()
    if backend not in LEDGER_BACKENDS:
        raise RuntimeError(
            f"Unsupported SALE_LEDGER_BACKEND: {backend!r} (expected one of {', '.join(LEDGER_BACKENDS)})"
        )

    try:
        config = SaleConfig(
            name=_required(env, "SALE_NAME", "the collection name"),
            symbol=_required(env, "SALE_SYMBOL", "the collection symbol"),
            max_supply=_integer("SALE_MAX_SUPPLY", _required(env, "SALE_MAX_SUPPLY", "the token supply cap")),
            unit_price=_integer(
                "SALE_UNIT_PRICE_WEI", _required(env, "SALE_UNIT_PRICE_WEI", "the token price in wei")
            ),
            signer_address=_required(env, "SALE_SIGNER_ADDRESS", "the voucher signer / admin address"),
            fee_address=_required(env, "SALE_FEE_ADDRESS", "the fee recipient address"),
            fee_basis_points=_integer(
                "SALE_FEE_BASIS_POINTS",
                _required(env, "SALE_FEE_BASIS_POINTS", "the platform fee in basis points"),
            ),
            contract_address=_required(
                env, "SALE_CONTRACT_ADDRESS", "the verifying contract address of the voucher domain"
            ),
            chain_id=_integer("SALE_CHAIN_ID", env.get("SALE_CHAIN_ID", "31337")),
            base_uri=env.get("SALE_BASE_URI", ""),
        )
    except ValueError as e:
        raise RuntimeError(f"Invalid sale configuration: {e}") from e

    return SaleSettings(
        config=config,
        ledger_backend=backend,
        enforce_voucher_replay_protection=_boolean(
            "SALE_ENFORCE_VOUCHER_REPLAY", env.get("SALE_ENFORCE_VOUCHER_REPLAY", "true")
        ),
    )


__all__ = ["SaleSettings", "load_settings"]
