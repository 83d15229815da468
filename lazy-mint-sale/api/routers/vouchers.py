"""
Vouchers API Endpoints.

Redemption of off-chain signed vouchers during the pre-sale phase.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_engine
from api.errors import raise_http_error
from api.models import RedeemRequest, RedeemResponse
from domain.errors import SaleError
from domain.voucher import Voucher
from services.sale_engine import SaleEngine

router = APIRouter()


@router.post(
    "/vouchers/redeem",
    response_model=RedeemResponse,
    summary="Redeem Voucher",
    description="Mint the tokens a signed voucher authorises, paying exactly the voucher price."
)
def redeem_voucher(request: RedeemRequest, engine: SaleEngine = Depends(get_engine)):
    """
    Redeem a voucher signed by the sale signer.

    Tokens are minted to `voucher.redeemer`, whoever submits the request.
    A voucher can only be redeemed once.
    """
    try:
        voucher = Voucher(
            redeemer=request.voucher.redeemer,
            price=request.voucher.price,
            amount=request.voucher.amount,
            data=bytes.fromhex(request.voucher.data[2:]),
            signature=bytes.fromhex(request.voucher.signature[2:]),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid voucher: {str(e)}")

    try:
        result = engine.redeem(voucher, request.payment_wei)

        return RedeemResponse(
            redeemer=result.redeemer,
            token_ids=list(result.token_ids),
            price_paid_wei=result.price_paid,
            voucher_digest="0x" + result.voucher_digest.hex(),
        )

    except SaleError as e:
        raise_http_error(e)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to redeem voucher: {str(e)}"
        )
