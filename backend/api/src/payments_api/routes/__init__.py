"""API routes package.

Routers are organized by domain:

- health: Liveness and health check endpoints
- payments: Checkout session creation and redirect landings
- webhooks: Stripe webhook receiver

All routers are registered in main.py.
"""

from payments_api.routes.health import router as health_router
from payments_api.routes.payments import router as payments_router
from payments_api.routes.webhooks import router as webhooks_router

__all__ = [
    "health_router",
    "payments_router",
    "webhooks_router",
]
