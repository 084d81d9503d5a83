"""Webhook verification and processing models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PAYMENT_SUCCEEDED_TOPIC = "payment.succeeded"
CHARGE_SUCCEEDED = "charge.succeeded"


class WebhookStatus(str, Enum):
    """Terminal state of a single webhook request."""

    PUBLISHED = "published"
    IGNORED = "ignored"
    REJECTED = "rejected"


class WebhookVerification(BaseModel):
    """Outcome of verifying a webhook signature.

    `event` is only set when `verified` is True; `reason` only when it is False.
    """

    model_config = ConfigDict(frozen=True)

    verified: bool
    event: dict[str, Any] | None = None
    reason: str | None = None

    @classmethod
    def success(cls, event: dict[str, Any]) -> "WebhookVerification":
        return cls(verified=True, event=event)

    @classmethod
    def failure(cls, reason: str) -> "WebhookVerification":
        return cls(verified=False, reason=reason)


class PaymentSucceededPayload(BaseModel):
    """Normalized message published on the payment.succeeded topic."""

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    stripe_payment_id: str | None = Field(
        ...,
        description="Stripe charge ID (ch_xxx)",
        examples=["ch_3ABC123DEF456"],
    )
    order_id: str | None = Field(
        default=None,
        description="Order ID from charge metadata; null for charges not opened here",
        examples=["o1"],
    )
    receipt_url: str | None = Field(
        default=None,
        description="Stripe-hosted receipt",
        examples=["https://pay.stripe.com/receipts/payment/abc"],
    )

    def to_message(self) -> dict[str, Any]:
        """Serialize to the camelCase wire format."""
        return self.model_dump(by_alias=True)


class WebhookResult(BaseModel):
    """What happened to one webhook request."""

    model_config = ConfigDict(frozen=True)

    status: WebhookStatus
    event_id: str | None = None
    event_type: str | None = None
    payload: PaymentSucceededPayload | None = None
    message: str | None = None

    @property
    def accepted(self) -> bool:
        """True when the provider should receive a 2xx response."""
        return self.status != WebhookStatus.REJECTED
