"""
Sale API Endpoints.

Sale status and admin-only controls: distribution phase, legacy sale flag,
pause, redemption price, base URI and withdrawal. Admin endpoints require the
`X-Caller-Address` header to be the sale's signer address.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_caller, get_engine
from api.errors import raise_http_error
from api.models import (
    BaseURIRequest,
    ChainIdResponse,
    PausedResponse,
    PhaseRequest,
    PhaseResponse,
    PriceRequest,
    SaleStateResponse,
    SaleStatusResponse,
    WithdrawResponse,
)
from domain.errors import SaleError
from services.sale_engine import SaleEngine

router = APIRouter()


def _status(engine: SaleEngine) -> SaleStatusResponse:
    snapshot = engine.snapshot()
    return SaleStatusResponse(
        name=snapshot.name,
        symbol=snapshot.symbol,
        phase=int(snapshot.phase),
        phase_name=snapshot.phase.name,
        paused=snapshot.paused,
        sale_is_active=snapshot.active,
        total_minted=snapshot.total_minted,
        max_supply=snapshot.max_supply,
        unit_price_wei=snapshot.unit_price,
        redemption_price_wei=snapshot.redemption_price,
        max_per_transaction=snapshot.max_per_transaction,
        balance_wei=snapshot.balance,
        base_uri=snapshot.base_uri,
        chain_id=snapshot.chain_id,
        contract_address=snapshot.contract_address,
    )


@router.get(
    "/sale",
    response_model=SaleStatusResponse,
    summary="Sale Status",
    description="Current phase, flags, supply and balances of the sale."
)
def get_sale_status(engine: SaleEngine = Depends(get_engine)):
    return _status(engine)


@router.get("/sale/chain-id", response_model=ChainIdResponse, summary="Chain ID")
def get_chain_id(engine: SaleEngine = Depends(get_engine)):
    """Chain identifier used in the voucher signing domain."""
    return ChainIdResponse(chain_id=engine.get_chain_id())


@router.post(
    "/sale/phase",
    response_model=PhaseResponse,
    summary="Set Distribution Phase",
    description="Admin only. Any phase may follow any other phase."
)
def set_phase(
    request: PhaseRequest,
    caller: str = Depends(get_caller),
    engine: SaleEngine = Depends(get_engine),
):
    """
    Change the distribution phase.

    **Phases:**
    - `0` Closed: no minting
    - `1` Pre-sale: voucher redemption only
    - `2` Public: direct purchase only
    """
    try:
        phase = engine.set_distribution_phase(caller, request.phase)
        return PhaseResponse(phase=int(phase), phase_name=phase.name)
    except SaleError as e:
        raise_http_error(e)


@router.post("/sale/flip", response_model=SaleStateResponse, summary="Flip Sale State")
def flip_sale_state(caller: str = Depends(get_caller), engine: SaleEngine = Depends(get_engine)):
    """Admin only. Toggle the legacy sale-active flag."""
    try:
        return SaleStateResponse(sale_is_active=engine.flip_sale_state(caller))
    except SaleError as e:
        raise_http_error(e)


@router.post("/sale/pause", response_model=PausedResponse, summary="Pause Sale")
def pause_sale(caller: str = Depends(get_caller), engine: SaleEngine = Depends(get_engine)):
    """Admin only. Block direct purchases until unpaused."""
    try:
        engine.pause(caller)
        return PausedResponse(paused=True)
    except SaleError as e:
        raise_http_error(e)


@router.post("/sale/unpause", response_model=PausedResponse, summary="Unpause Sale")
def unpause_sale(caller: str = Depends(get_caller), engine: SaleEngine = Depends(get_engine)):
    try:
        engine.unpause(caller)
        return PausedResponse(paused=False)
    except SaleError as e:
        raise_http_error(e)


@router.post("/sale/price", response_model=SaleStatusResponse, summary="Set Redemption Price")
def set_price(
    request: PriceRequest,
    caller: str = Depends(get_caller),
    engine: SaleEngine = Depends(get_engine),
):
    try:
        engine.set_price(caller, request.price_wei)
        return _status(engine)
    except SaleError as e:
        raise_http_error(e)


@router.post("/sale/base-uri", response_model=SaleStatusResponse, summary="Set Base URI")
def set_base_uri(
    request: BaseURIRequest,
    caller: str = Depends(get_caller),
    engine: SaleEngine = Depends(get_engine),
):
    try:
        engine.set_base_uri(caller, request.base_uri)
        return _status(engine)
    except SaleError as e:
        raise_http_error(e)


@router.post(
    "/sale/withdraw",
    response_model=WithdrawResponse,
    summary="Withdraw Balance",
    description="Admin only. Sends the whole retained balance to the admin. A zero balance is a no-op."
)
def withdraw(caller: str = Depends(get_caller), engine: SaleEngine = Depends(get_engine)):
    try:
        amount = engine.withdraw(caller)
        return WithdrawResponse(amount_wei=amount, to=engine.admin)
    except SaleError as e:
        raise_http_error(e)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to withdraw: {str(e)}"
        )
