"""Stripe gateway for checkout sessions and webhook verification.

Provides integration with Stripe using the v8+ StripeClient pattern. This is
the only module that talks to the Stripe SDK.
"""

import json
import logging
from typing import Any

import stripe
from stripe import StripeClient

from payments.models.webhook import WebhookVerification

logger = logging.getLogger(__name__)


class StripeServiceError(Exception):
    """Raised when a Stripe operation fails."""

    def __init__(self, message: str, stripe_error_code: str | None = None) -> None:
        """Initialize with message and optional Stripe error code.

        Args:
            message: Human-readable error message.
            stripe_error_code: Stripe-specific error code if available.
        """
        super().__init__(message)
        self.stripe_error_code = stripe_error_code


class StripeService:
    """Service for Stripe operations.

    Handles:
    - Checkout session creation
    - Webhook signature verification

    Usage:
        stripe_svc = StripeService(secret_key, endpoint_secret)
        session = stripe_svc.create_checkout_session(
            line_items=[...],
            metadata={"orderId": "o1"},
            success_url="https://example.com/success",
            cancel_url="https://example.com/cancel",
        )
    """

    def __init__(
        self,
        secret_key: str,
        endpoint_secret: str,
        *,
        webhook_tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE,
    ) -> None:
        """Initialize the service.

        Args:
            secret_key: Stripe secret API key (sk_...).
            endpoint_secret: Webhook endpoint signing secret (whsec_...).
            webhook_tolerance: Maximum accepted signature age in seconds.
        """
        self._secret_key = secret_key
        self._endpoint_secret = endpoint_secret
        self._webhook_tolerance = webhook_tolerance
        self._client: StripeClient | None = None

    def _get_client(self) -> StripeClient:
        """Get or create the Stripe client (lazy initialization)."""
        if self._client is None:
            self._client = StripeClient(self._secret_key)
            logger.info("Stripe client initialized")
        return self._client

    def create_checkout_session(
        self,
        *,
        line_items: list[dict[str, Any]],
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
    ) -> dict[str, str | None]:
        """Create a Stripe Checkout session in payment mode.

        The metadata is attached to the PaymentIntent so that it is copied
        onto the resulting charge and comes back on charge webhooks.

        Args:
            line_items: Stripe line items (price_data + quantity).
            metadata: PaymentIntent metadata.
            success_url: URL to redirect on success.
            cancel_url: URL to redirect on cancel.

        Returns:
            Dict with the session's redirect targets:
                - session_id: Stripe checkout session ID
                - success_url: Success redirect as stored by Stripe
                - cancel_url: Cancel redirect as stored by Stripe
                - url: Hosted checkout page

        Raises:
            StripeServiceError: If session creation fails.
        """
        client = self._get_client()

        try:
            session = client.checkout.sessions.create(
                params={
                    "mode": "payment",
                    "line_items": line_items,
                    "payment_intent_data": {"metadata": metadata},
                    "success_url": success_url,
                    "cancel_url": cancel_url,
                },
            )
        except stripe.StripeError as e:
            error_code = getattr(e, "code", None)
            logger.error(
                "Stripe checkout session creation failed: %s (code: %s)",
                str(e),
                error_code,
            )
            raise StripeServiceError(
                f"Failed to create checkout session: {e}",
                stripe_error_code=error_code,
            ) from e

        logger.info("Checkout session created: %s", session.id)

        return {
            "session_id": session.id,
            "success_url": session.success_url,
            "cancel_url": session.cancel_url,
            "url": session.url,
        }

    def verify_webhook_signature(
        self,
        payload: bytes,
        signature: str | None,
    ) -> WebhookVerification:
        """Verify a webhook signature and parse the event.

        The signature is checked over the raw bytes exactly as received; the
        payload is only parsed once the signature matched.

        Args:
            payload: Raw request body bytes.
            signature: Stripe-Signature header value.

        Returns:
            WebhookVerification carrying the parsed event, or the failure reason.
        """
        if not signature:
            return WebhookVerification.failure("Missing Stripe-Signature header")

        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError:
            return WebhookVerification.failure("Payload is not valid UTF-8")

        try:
            stripe.WebhookSignature.verify_header(
                text,
                signature,
                self._endpoint_secret,
                self._webhook_tolerance,
            )
        except stripe.SignatureVerificationError as e:
            return WebhookVerification.failure(str(e))

        try:
            event = json.loads(text)
        except json.JSONDecodeError as e:
            return WebhookVerification.failure(f"Payload is not valid JSON: {e.msg}")

        if not isinstance(event, dict):
            return WebhookVerification.failure("Payload is not a JSON object")

        return WebhookVerification.success(event)
