"""
Lazy-Mint Sale API - Main Application.

FastAPI application exposing the NFT sale engine: direct purchases, voucher
redemption, admin controls and token views.

Admin endpoints identify the caller through the `X-Caller-Address` header.
Sale errors are returned as `{"detail": ErrorResponse}` with the status
chosen in api/errors.py.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.errors import status_for
from api.models import ErrorResponse
from domain.errors import SaleError

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Lazy-Mint Sale API",
    description="REST API for buying, redeeming and administering a lazy-mint NFT sale",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS for the minting site and wallet front-ends
# TODO: Restrict origins to the minting site once it has a fixed domain
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(SaleError)
async def sale_error_handler(request: Request, exc: SaleError) -> JSONResponse:
    """Fallback for sale errors a router does not translate itself."""
    status = status_for(exc)
    logger.warning(
        f"Unhandled sale error on {request.url.path}: {exc}",
        extra={"path": request.url.path, "error_code": exc.code},
    )
    return JSONResponse(
        status_code=status,
        content={"detail": ErrorResponse(error=exc.code, detail=str(exc), status_code=status).model_dump()},
    )


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "lazy-mint-sale-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information and the main sale routes.
    """
    return {
        "message": "Lazy-Mint Sale API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "sale": "/api/v1/sale",
            "purchases": "/api/v1/purchases",
            "redeem": "/api/v1/vouchers/redeem",
            "tokens": "/api/v1/tokens/{token_id}",
            "wallets": "/api/v1/wallets/{address}/tokens",
        },
    }


# Import and include routers
from api.routers import purchases, sale, tokens, vouchers  # noqa: E402

app.include_router(sale.router, prefix="/api/v1", tags=["Sale"])
app.include_router(purchases.router, prefix="/api/v1", tags=["Purchases"])
app.include_router(vouchers.router, prefix="/api/v1", tags=["Vouchers"])
app.include_router(tokens.router, prefix="/api/v1", tags=["Tokens"])
