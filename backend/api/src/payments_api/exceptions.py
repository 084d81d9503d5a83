"""FastAPI exception handlers for converting errors to HTTP responses.

This module provides exception handlers that convert domain errors
(PaymentError) and request validation errors to JSON responses with a
consistent envelope.

The ErrorCode-to-HTTP status mapping:
- 400 Bad Request: Validation failures, invalid webhook signatures
- 500 Internal Server Error: Stripe API failures, unexpected errors
- 503 Service Unavailable: Message bus unavailable

Usage:
    from payments_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from payments.models.errors import ErrorCode, ErrorResponse, PaymentError
from payments_api.models.common import format_validation_errors

logger = logging.getLogger(__name__)

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_FAILED: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: HTTP_400_BAD_REQUEST,
    ErrorCode.STRIPE_API_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.MESSAGE_BUS_UNAVAILABLE: HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.INTERNAL_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Args:
        code: The ErrorCode to map

    Returns:
        HTTP status code, defaults to 400 if not explicitly mapped.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def payment_error_handler(request: Request, exc: PaymentError) -> JSONResponse:
    """Convert a PaymentError to its JSON envelope and status code."""
    status_code = get_http_status_for_error(exc.code)
    return JSONResponse(
        status_code=status_code,
        content=exc.to_error_response().model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return request validation failures as 400 with field-level details."""
    response = format_validation_errors(list(exc.errors()))
    logger.info(
        "Request validation failed on %s %s: %d error(s)",
        request.method,
        request.url.path,
        len(response.details),
    )
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=response.model_dump(mode="json"),
    )


def internal_error_response() -> JSONResponse:
    """The generic 500 envelope; never exposes the underlying error."""
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse.from_code(ErrorCode.INTERNAL_ERROR).model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic error response.

    Requests passing through CorrelationIdMiddleware are answered there;
    this handler covers failures raised outside of it.
    """
    logger.exception("Unhandled exception: %s", exc)
    return internal_error_response()


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(PaymentError, payment_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
