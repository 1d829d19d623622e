"""HTTP mapping of ordering errors.

Protean's handlers cover validation (400) and missing aggregates (404). The
more specific ordering errors are registered on top of them. A write that lost
a race against a concurrent change of the same order is a retryable 409.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from ordering.errors import (
    CancellationWindowExpired,
    CheckoutInProgress,
    InvalidTransition,
    PermissionDenied,
    ProcessingTooEarly,
)
from payments.gateway import GatewayError

logger = structlog.get_logger(__name__)


class PaymentNotCompleted(Exception):
    """The customer's payment did not succeed, so no order was created."""


def _error_response(status_code: int, exc) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": exc.messages})


async def _permission_denied(request: Request, exc: PermissionDenied) -> JSONResponse:
    return _error_response(403, exc)


async def _lifecycle_conflict(request: Request, exc) -> JSONResponse:
    return _error_response(409, exc)


async def _concurrent_change(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent change rejected", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=409,
        content={"error": {"version": ["The order was changed by another request; reload and retry"]}},
    )


async def _payment_not_completed(request: Request, exc: PaymentNotCompleted) -> JSONResponse:
    return JSONResponse(status_code=402, content={"error": {"payment": [str(exc)]}})


async def _gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
    logger.error("Payment processor error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"error": {"payment": ["Payment processor unavailable"]}})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(PermissionDenied, _permission_denied)
    app.add_exception_handler(InvalidTransition, _lifecycle_conflict)
    app.add_exception_handler(CancellationWindowExpired, _lifecycle_conflict)
    app.add_exception_handler(ProcessingTooEarly, _lifecycle_conflict)
    app.add_exception_handler(CheckoutInProgress, _lifecycle_conflict)
    app.add_exception_handler(ExpectedVersionError, _concurrent_change)
    app.add_exception_handler(PaymentNotCompleted, _payment_not_completed)
    app.add_exception_handler(GatewayError, _gateway_error)
