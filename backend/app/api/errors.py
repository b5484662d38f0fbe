import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from gift_core import (
    CodeCollisionExhaustedError,
    GiftCoreError,
    InsufficientMembersError,
    MatchExhaustedError,
)

from ..core.exceptions import GiftExchangeError

logger = logging.getLogger(__name__)

CORE_ERROR_STATUS = {
    InsufficientMembersError: (status.HTTP_400_BAD_REQUEST, "insufficient_members"),
    MatchExhaustedError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "match_exhausted"),
    CodeCollisionExhaustedError: (status.HTTP_503_SERVICE_UNAVAILABLE, "code_collision_exhausted"),
}


def _error_response(status_code: int, code: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, "code": code})


def register_error_handlers(app: FastAPI) -> None:
    """Register handlers mapping application errors to JSON responses."""

    @app.exception_handler(GiftExchangeError)
    async def gift_exchange_error_handler(request: Request, exc: GiftExchangeError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.url.path}: {exc.detail}")
        else:
            logger.info(f"{exc.code} on {request.url.path}: {exc.detail}")
        return _error_response(exc.status_code, exc.code, exc.detail)

    @app.exception_handler(GiftCoreError)
    async def gift_core_error_handler(request: Request, exc: GiftCoreError):
        status_code, code = CORE_ERROR_STATUS.get(
            type(exc), (status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error")
        )
        if status_code >= 500:
            logger.error(f"{code} on {request.url.path}: {exc}")
        else:
            logger.info(f"{code} on {request.url.path}: {exc}")
        return _error_response(status_code, code, str(exc))
