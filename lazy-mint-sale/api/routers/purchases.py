"""
Purchases API Endpoints.

Direct purchase of tokens during the public phase.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_caller, get_engine
from api.errors import raise_http_error
from api.models import PurchaseRequest, PurchaseResponse
from domain.errors import SaleError
from services.sale_engine import SaleEngine

router = APIRouter()


@router.post(
    "/purchases",
    response_model=PurchaseResponse,
    summary="Buy Tokens",
    description="Buy 1 to 10 tokens at the unit price while the sale is public and not paused."
)
def buy_tokens(
    request: PurchaseRequest,
    caller: str = Depends(get_caller),
    engine: SaleEngine = Depends(get_engine),
):
    """
    Execute a direct purchase.

    **Process:**
    1. Rejects if the sale is paused or not in the public phase
    2. Validates count (1 to 10) and remaining supply
    3. Requires `payment_wei` to equal unit price x count exactly
    4. Mints sequential token ids to the caller
    5. Routes the platform fee to the fee address and retains the rest

    **All-or-Nothing:**
    If any step fails nothing is minted and no payment is kept.

    **Example request:**
    ```json
    {
      "count": 5,
      "payment_wei": 500000000000000
    }
    ```
    """
    try:
        result = engine.buy(caller, request.count, request.payment_wei)

        return PurchaseResponse(
            buyer=result.buyer,
            token_ids=list(result.token_ids),
            total_paid_wei=result.total_paid,
            fee_paid_wei=result.fee_paid,
            message=f"Purchase completed successfully. {result.count} tokens minted."
        )

    except SaleError as e:
        raise_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to execute purchase: {str(e)}"
        )
