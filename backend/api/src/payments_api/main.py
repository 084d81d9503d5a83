"""FastAPI application for the payments microservice.

Endpoints:
- GET  /                                 liveness text
- GET  /health                           JSON health check
- POST /payments/create-payment-session  open a Stripe checkout session
- GET  /payments/success, /payments/cancel  checkout redirect landings
- POST /payments/webhook                 Stripe webhook receiver
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

from fastapi import FastAPI
from mangum import Mangum

from payments import __version__
from payments.config import get_settings
from payments.utils.logging import configure_logging
from payments_api.dependencies import close_services
from payments_api.exceptions import register_exception_handlers
from payments_api.middleware.correlation import CorrelationIdMiddleware
from payments_api.routes import health_router, payments_router, webhooks_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load configuration at startup and release the broker connection on shutdown."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Payments Microservice running on port %d", settings.port)
    try:
        yield
    finally:
        close_services()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="Payments Microservice",
        description="Stripe checkout sessions and webhook republishing",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationIdMiddleware)

    # Register exception handlers for consistent error responses
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(payments_router)
    app.include_router(webhooks_router)

    return app


app = create_app()

# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway.
# lifespan is off there, so logging is configured on the first invocation.
_mangum = Mangum(app, lifespan="off")


@lru_cache(maxsize=1)
def _configure_lambda_logging() -> None:
    configure_logging(get_settings().log_level)


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point."""
    _configure_lambda_logging()
    return _mangum(event, context)


def run_server(host: str = "0.0.0.0", port: int | None = None, reload: bool = False) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: PORT from settings)
        reload: Enable hot reload for development (default: False)
    """
    import uvicorn

    port = port or get_settings().port

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run(
            "payments_api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["backend/api/src", "backend/payments/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
