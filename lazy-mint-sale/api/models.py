"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
All amounts are integers in wei; byte strings travel as 0x-prefixed hex.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _require_hex(value: str) -> str:
    text = value[2:] if value.startswith(("0x", "0X")) else value
    if len(text) % 2 != 0:
        raise ValueError("hex string must have an even number of digits")
    try:
        bytes.fromhex(text)
    except ValueError:
        raise ValueError("invalid hex string") from None
    return "0x" + text.lower()


# ============================================================================
# Sale Models
# ============================================================================

class SaleStatusResponse(BaseModel):
    """Current sale status."""
    name: str
    symbol: str
    phase: int
    phase_name: str
    paused: bool
    sale_is_active: bool
    total_minted: int
    max_supply: int
    unit_price_wei: int
    redemption_price_wei: int
    max_per_transaction: int
    balance_wei: int
    base_uri: str
    chain_id: int
    contract_address: str

    class Config:
        json_schema_extra = {
            "example": {
                "name": "LCollection",
                "symbol": "NFTC",
                "phase": 2,
                "phase_name": "PUBLIC",
                "paused": False,
                "sale_is_active": True,
                "total_minted": 5,
                "max_supply": 50,
                "unit_price_wei": 100000000000000,
                "redemption_price_wei": 0,
                "max_per_transaction": 10,
                "balance_wei": 486250000000000,
                "base_uri": "https://www.nftCollection.com/",
                "chain_id": 31337,
                "contract_address": "0x5FbDB2315678afecb367f032d93F642f64180aa3"
            }
        }


class PhaseRequest(BaseModel):
    """Request to change the distribution phase (0 closed, 1 pre-sale, 2 public)."""
    phase: int = Field(..., ge=0, le=2)


class PhaseResponse(BaseModel):
    phase: int
    phase_name: str


class SaleStateResponse(BaseModel):
    sale_is_active: bool


class PausedResponse(BaseModel):
    paused: bool


class PriceRequest(BaseModel):
    price_wei: int = Field(..., ge=0, description="Redemption price in wei")


class BaseURIRequest(BaseModel):
    base_uri: str = Field(..., description="Prefix for token metadata URIs")


class WithdrawResponse(BaseModel):
    amount_wei: int
    to: str


class ChainIdResponse(BaseModel):
    chain_id: int


# ============================================================================
# Purchase Models
# ============================================================================

class PurchaseRequest(BaseModel):
    """Request to buy tokens during the public phase."""
    count: int = Field(..., description="Number of tokens to buy (1 to 10)")
    payment_wei: int = Field(..., ge=0, description="Attached payment, must equal unit price x count")

    class Config:
        json_schema_extra = {
            "example": {
                "count": 5,
                "payment_wei": 500000000000000
            }
        }


class PurchaseResponse(BaseModel):
    """Response after purchase execution."""
    buyer: str
    token_ids: List[int]
    total_paid_wei: int
    fee_paid_wei: int
    message: Optional[str] = None


# ============================================================================
# Voucher Models
# ============================================================================

class VoucherPayload(BaseModel):
    """Signed voucher, as produced by scripts/sign_voucher.py."""
    redeemer: str
    price: int = Field(..., ge=0)
    amount: int = Field(..., ge=1)
    data: str = Field("0x", description="Opaque bytes covered by the signature (hex)")
    signature: str = Field(..., description="65-byte signature (hex)")

    @field_validator("data", "signature")
    @classmethod
    def _hex(cls, value: str) -> str:
        return _require_hex(value)


class RedeemRequest(BaseModel):
    """Request to redeem a voucher during the pre-sale phase."""
    voucher: VoucherPayload
    payment_wei: int = Field(..., ge=0, description="Attached payment, must equal the voucher price")

    class Config:
        json_schema_extra = {
            "example": {
                "voucher": {
                    "redeemer": "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
                    "price": 100,
                    "amount": 1,
                    "data": "0x",
                    "signature": "0x..."
                },
                "payment_wei": 100
            }
        }


class RedeemResponse(BaseModel):
    redeemer: str
    token_ids: List[int]
    price_paid_wei: int
    voucher_digest: str


# ============================================================================
# Token Models
# ============================================================================

class TokenResponse(BaseModel):
    token_id: int
    owner: str
    token_uri: str


class WalletTokensResponse(BaseModel):
    owner: str
    balance: int
    token_ids: List[int]


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "WrongPayment",
                "detail": "Payment must be exactly 500000000000000 wei, got 1",
                "status_code": 400
            }
        }
