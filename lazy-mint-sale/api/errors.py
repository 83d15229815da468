"""
Mapping of sale errors to HTTP errors.
"""

from __future__ import annotations

from typing import Dict, NoReturn, Type

from fastapi import HTTPException

from api.models import ErrorResponse
from domain.errors import (
    InvalidCountError,
    InvalidSignatureError,
    MintFailedError,
    SaleError,
    TransferFailedError,
    UnauthorizedError,
    UnknownTokenError,
    WrongPaymentError,
)

_STATUS_BY_ERROR: Dict[Type[SaleError], int] = {
    UnauthorizedError: 403,
    UnknownTokenError: 404,
    InvalidCountError: 400,
    WrongPaymentError: 400,
    InvalidSignatureError: 400,
    TransferFailedError: 502,
    MintFailedError: 502,
}

# Everything else in the taxonomy is a conflict with the current sale state.
_DEFAULT_STATUS: int = 409


def status_for(error: SaleError) -> int:
    for error_type, status in _STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status
    return _DEFAULT_STATUS


def raise_http_error(error: SaleError) -> NoReturn:
    status = status_for(error)
    raise HTTPException(
        status_code=status,
        detail=ErrorResponse(error=error.code, detail=str(error), status_code=status).model_dump(),
    ) from error
