"""Maps storefront rejections to HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.api.schemas import ErrorResponse
from storefront.errors import (
    BookNotFound,
    CancellationNotAllowed,
    CustomerRequired,
    InvalidStatusTransition,
    ItemNotFound,
    OrderNotFound,
    PersistenceFailure,
    StorefrontError,
)

logger = structlog.get_logger(__name__)


def status_code_for(exc: StorefrontError) -> int:
    if isinstance(exc, PersistenceFailure):
        return 503
    if isinstance(exc, (ItemNotFound, OrderNotFound, BookNotFound)):
        return 404
    if isinstance(exc, (InvalidStatusTransition, CancellationNotAllowed)):
        return 409
    if isinstance(exc, CustomerRequired):
        return 401
    return 400


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("Storefront request failed", path=request.url.path, error=str(exc))

    detail = getattr(exc, "messages", None) or str(exc)
    body = ErrorResponse(error=exc.code, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
