"""Liveness endpoints."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from payments import __version__

router = APIRouter(tags=["health"])

LIVENESS_MESSAGE = "Payment Microservice is up and running!!"


@router.get("/", response_class=PlainTextResponse, summary="Liveness check")
async def liveness() -> str:
    return LIVENESS_MESSAGE


@router.get("/health", summary="Health check")
async def health() -> dict[str, Any]:
    """JSON health check for container orchestrators."""
    return {
        "status": "healthy",
        "service": "payments-ms",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }
