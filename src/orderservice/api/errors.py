"""
Exception handlers for the FastAPI application.

Maps orderservice errors onto HTTP responses with one body format:
``{"error": true, "message": ..., "status_code": ...}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from orderservice.exceptions import (
    IllegalOrderStateError,
    OrderNotFoundError,
)

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    message: str,
    details: list[dict[str, str]] | None = None,
) -> JSONResponse:
    content: dict[str, object] = {
        "error": True,
        "message": message,
        "status_code": status_code,
    }
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def order_not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unknown order id -> 404."""
    logger.warning("Order lookup failed on %s: %s", request.url.path, exc)
    return _error_response(status.HTTP_404_NOT_FOUND, str(exc))


async def illegal_state_handler(request: Request, exc: Exception) -> JSONResponse:
    """Mutation rejected by the order's status -> 400."""
    logger.warning("Rejected state change on %s: %s", request.url.path, exc)
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Malformed request body, path or query -> 400 with per-field details."""
    if isinstance(exc, RequestValidationError):
        errors = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
    else:
        errors = [{"field": "request", "message": str(exc), "type": "value_error"}]

    logger.warning("Validation error on %s: %s", request.url.path, errors)
    return _error_response(status.HTTP_400_BAD_REQUEST, "Validation error", errors)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException (including routing 404/405) with the common response format."""
    http_exc = (
        exc
        if isinstance(exc, HTTPException)
        else HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    )
    response = _error_response(http_exc.status_code, str(http_exc.detail))
    if http_exc.headers:
        response.headers.update(http_exc.headers)
    return response


def register_exception_handlers(app: FastAPI) -> None:
    """Register all orderservice exception handlers on ``app``."""
    app.add_exception_handler(OrderNotFoundError, order_not_found_handler)
    app.add_exception_handler(IllegalOrderStateError, illegal_state_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
