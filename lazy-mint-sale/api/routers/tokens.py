"""
Tokens API Endpoints.

Read-only views over minted tokens.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_engine
from api.errors import raise_http_error
from api.models import TokenResponse, WalletTokensResponse
from domain.errors import SaleError
from services.sale_engine import SaleEngine

router = APIRouter()


@router.get("/tokens/{token_id}", response_model=TokenResponse, summary="Token Details")
def get_token(token_id: int, engine: SaleEngine = Depends(get_engine)):
    """Owner and metadata URI (`base_uri` + id + `.json`) of a minted token."""
    try:
        return TokenResponse(
            token_id=token_id,
            owner=engine.owner_of(token_id),
            token_uri=engine.token_uri(token_id),
        )
    except SaleError as e:
        raise_http_error(e)


@router.get(
    "/wallets/{address}/tokens",
    response_model=WalletTokensResponse,
    summary="Tokens Of Wallet Owner"
)
def get_wallet_tokens(address: str, engine: SaleEngine = Depends(get_engine)):
    try:
        token_ids = engine.tokens_of_wallet_owner(address)
        return WalletTokensResponse(owner=address, balance=len(token_ids), token_ids=token_ids)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
