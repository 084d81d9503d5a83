"""FastAPI dependency injection providers for shared services.

This module provides factory functions for service instances using @lru_cache
so every request shares one instance per process. Services are lazily
instantiated on first use.

Usage in routes:
    from payments_api.dependencies import get_webhook_processor

    @router.post("/payments/webhook")
    async def webhook(
        processor: WebhookProcessor = Depends(get_webhook_processor),
    ):
        ...

Service Dependency Graph:
    Settings (get_settings)
        ├── StripeService
        │       ├── CheckoutSessionBuilder
        │       └── WebhookProcessor
        └── RabbitMQMessageBus
                └── WebhookProcessor

Testing:
    Override providers with app.dependency_overrides, and call
    reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from payments.config import get_settings
from payments.services.checkout_service import CheckoutSessionBuilder
from payments.services.message_bus import MessageBus, RabbitMQMessageBus
from payments.services.stripe_service import StripeService
from payments.services.webhook_processor import WebhookProcessor


@lru_cache
def get_stripe_service() -> StripeService:
    """Get cached StripeService configured from settings."""
    settings = get_settings()
    return StripeService(
        settings.stripe_secret,
        settings.stripe_endpoint_secret,
        webhook_tolerance=settings.stripe_webhook_tolerance,
    )


@lru_cache
def get_message_bus() -> MessageBus:
    """Get cached message bus client (connects on first publish)."""
    settings = get_settings()
    return RabbitMQMessageBus(settings.broker_urls, exchange=settings.broker_exchange)


@lru_cache
def get_checkout_builder() -> CheckoutSessionBuilder:
    """Get cached CheckoutSessionBuilder."""
    settings = get_settings()
    return CheckoutSessionBuilder(
        get_stripe_service(),
        success_url=settings.stripe_success_url,
        cancel_url=settings.stripe_cancel_url,
    )


@lru_cache
def get_webhook_processor() -> WebhookProcessor:
    """Get cached WebhookProcessor wired to Stripe and the message bus."""
    return WebhookProcessor(get_stripe_service(), get_message_bus())


def close_services() -> None:
    """Close the message bus connection if one was opened."""
    if get_message_bus.cache_info().currsize:
        bus = get_message_bus()
        close = getattr(bus, "close", None)
        if close is not None:
            close()


def reset_services() -> None:
    """Clear all cached service instances and settings.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    get_stripe_service.cache_clear()
    get_message_bus.cache_clear()
    get_checkout_builder.cache_clear()
    get_webhook_processor.cache_clear()
    get_settings.cache_clear()
