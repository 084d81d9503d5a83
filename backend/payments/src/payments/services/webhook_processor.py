"""Webhook processor for Stripe events.

Verifies the signature over the raw request bytes, dispatches on the event
type and republishes successful charges on the message bus. Kept apart from
HTTP routing so it can be unit tested and reused without a web server.

Each request goes RECEIVED → VERIFYING → either REJECTED, or
DISPATCHING → PUBLISHED / IGNORED. Nothing is persisted and no event is
deduplicated: Stripe redeliveries are published again.
"""

from typing import Any

from payments.models.webhook import (
    CHARGE_SUCCEEDED,
    PAYMENT_SUCCEEDED_TOPIC,
    PaymentSucceededPayload,
    WebhookResult,
    WebhookStatus,
)
from payments.services.message_bus import MessageBus, MessageBusError
from payments.services.stripe_service import StripeService
from payments.utils.logging import get_logger, log_webhook_event

logger = get_logger(__name__)


class WebhookProcessor:
    """Processes verified Stripe webhooks into message bus events."""

    def __init__(self, stripe_service: StripeService, bus: MessageBus) -> None:
        self._stripe = stripe_service
        self._bus = bus

    def process(self, payload: bytes, signature: str | None) -> WebhookResult:
        """Verify and handle one webhook delivery.

        Args:
            payload: Raw request body, byte for byte as received.
            signature: Stripe-Signature header value, if any.

        Returns:
            WebhookResult; `accepted` is False only when verification failed.
        """
        verification = self._stripe.verify_webhook_signature(payload, signature)
        if not verification.verified or verification.event is None:
            logger.warning("Webhook signature verification failed: %s", verification.reason)
            return WebhookResult(status=WebhookStatus.REJECTED, message=verification.reason)

        event = verification.event
        event_id = event.get("id")
        event_type = event.get("type")
        log_webhook_event(logger, event_type, event_id, result="received")

        if event_type == CHARGE_SUCCEEDED:
            return self._handle_charge_succeeded(event)

        log_webhook_event(logger, event_type, event_id, result="ignored")
        return WebhookResult(
            status=WebhookStatus.IGNORED,
            event_id=event_id,
            event_type=event_type,
            message=f"Event {event_type} not handled",
        )

    def _handle_charge_succeeded(self, event: dict[str, Any]) -> WebhookResult:
        """Publish payment.succeeded for a charge.succeeded event."""
        event_id = event.get("id")
        charge = (event.get("data") or {}).get("object") or {}
        metadata = charge.get("metadata") or {}
        order_id = metadata.get("orderId")
        charge_id = charge.get("id")

        if not order_id or not charge_id:
            # Charges created outside this service carry no order reference.
            logger.warning(
                "charge.succeeded %s without charge id or orderId metadata, publishing as is",
                event_id,
            )

        payload = PaymentSucceededPayload(
            stripe_payment_id=charge_id,
            order_id=order_id,
            receipt_url=charge.get("receipt_url"),
        )

        message = None
        try:
            self._bus.publish(PAYMENT_SUCCEEDED_TOPIC, payload.to_message())
        except MessageBusError as e:
            # Fire-and-forget: Stripe still gets a 2xx, the loss is logged.
            message = str(e)
            log_webhook_event(
                logger,
                CHARGE_SUCCEEDED,
                event_id,
                order_id=order_id,
                result="publish_failed",
                error=message,
            )
        else:
            log_webhook_event(
                logger,
                CHARGE_SUCCEEDED,
                event_id,
                order_id=order_id,
                result="published",
                topic=PAYMENT_SUCCEEDED_TOPIC,
            )

        return WebhookResult(
            status=WebhookStatus.PUBLISHED,
            event_id=event_id,
            event_type=CHARGE_SUCCEEDED,
            payload=payload,
            message=message,
        )
