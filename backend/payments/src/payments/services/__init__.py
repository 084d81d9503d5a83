"""Backend services for the payments service."""

from .checkout_service import CheckoutSessionBuilder, build_line_items, to_minor_units
from .message_bus import MessageBus, MessageBusError, RabbitMQMessageBus
from .ssm_service import SSMService, SSMServiceError, get_ssm_service
from .stripe_service import StripeService, StripeServiceError
from .webhook_processor import WebhookProcessor

__all__ = [
    "CheckoutSessionBuilder",
    "build_line_items",
    "to_minor_units",
    "MessageBus",
    "MessageBusError",
    "RabbitMQMessageBus",
    "SSMService",
    "SSMServiceError",
    "get_ssm_service",
    "StripeService",
    "StripeServiceError",
    "WebhookProcessor",
]
