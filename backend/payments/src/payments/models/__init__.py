"""Pydantic models for the payments service."""

from .checkout import CheckoutSessionResult, OrderItem, PaymentSessionRequest
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    ErrorCode,
    ErrorResponse,
    PaymentError,
)
from .webhook import (
    CHARGE_SUCCEEDED,
    PAYMENT_SUCCEEDED_TOPIC,
    PaymentSucceededPayload,
    WebhookResult,
    WebhookStatus,
    WebhookVerification,
)

__all__ = [
    # Checkout
    "CheckoutSessionResult",
    "OrderItem",
    "PaymentSessionRequest",
    # Webhooks
    "CHARGE_SUCCEEDED",
    "PAYMENT_SUCCEEDED_TOPIC",
    "PaymentSucceededPayload",
    "WebhookResult",
    "WebhookStatus",
    "WebhookVerification",
    # Errors
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "ErrorCode",
    "ErrorResponse",
    "PaymentError",
]
