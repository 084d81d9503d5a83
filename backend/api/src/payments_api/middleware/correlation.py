"""Correlation ID middleware for request tracing.

Extracts X-Correlation-ID header from incoming requests or generates a new one.
Makes correlation ID available throughout the request lifecycle via contextvars.

Unhandled exceptions are turned into the generic 500 envelope here, while
the correlation ID is still bound, so error responses carry the header too.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from payments.utils.logging import clear_correlation_id, get_logger, set_correlation_id
from payments_api.exceptions import internal_error_response

CORRELATION_ID_HEADER = "X-Correlation-ID"

logger = get_logger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware that manages correlation IDs for request tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.exception(
                    "Unhandled exception on %s %s: %s",
                    request.method,
                    request.url.path,
                    exc,
                )
                response = internal_error_response()
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_correlation_id()
