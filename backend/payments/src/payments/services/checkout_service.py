"""Checkout session builder.

Turns an order into Stripe line items and opens a hosted checkout session.

Amounts are converted to minor units with Decimal arithmetic and
ROUND_HALF_UP, so 9.995 becomes 1000 and 0.125 becomes 13.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from payments.models.checkout import (
    CheckoutSessionResult,
    OrderItem,
    PaymentSessionRequest,
)
from payments.services.stripe_service import StripeService
from payments.utils.logging import get_logger, log_payment_operation

logger = get_logger(__name__)

MINOR_UNITS_PER_MAJOR = Decimal(100)


def to_minor_units(price: Decimal | float | int) -> int:
    """Convert a major-unit price to integer minor units (cents).

    Floats go through their shortest string form so that 9.99 is 999,
    not 998.9999999999999 rounded.
    """
    if not isinstance(price, Decimal):
        price = Decimal(str(price))
    return int((price * MINOR_UNITS_PER_MAJOR).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def build_line_item(item: OrderItem, currency: str) -> dict[str, Any]:
    """Build one Stripe line item for an order item."""
    return {
        "price_data": {
            "currency": currency,
            "product_data": {"name": item.name},
            "unit_amount": to_minor_units(item.price),
        },
        "quantity": item.quantity,
    }


def build_line_items(order: PaymentSessionRequest) -> list[dict[str, Any]]:
    """Build Stripe line items for every item of the order, in order."""
    return [build_line_item(item, order.currency) for item in order.items]


class CheckoutSessionBuilder:
    """Opens Stripe checkout sessions for orders."""

    def __init__(self, stripe_service: StripeService, success_url: str, cancel_url: str) -> None:
        self._stripe = stripe_service
        self._success_url = success_url
        self._cancel_url = cancel_url

    def create_session(self, order: PaymentSessionRequest) -> CheckoutSessionResult:
        """Create a checkout session for an order.

        Args:
            order: Validated order payload.

        Returns:
            The redirect URLs returned by Stripe.

        Raises:
            StripeServiceError: If Stripe rejects the request.
        """
        line_items = build_line_items(order)
        total = sum(li["price_data"]["unit_amount"] * li["quantity"] for li in line_items)

        log_payment_operation(
            logger,
            "create_checkout_session",
            order_id=order.order_id,
            amount_cents=total,
            currency=order.currency,
            line_items=len(line_items),
        )

        session = self._stripe.create_checkout_session(
            line_items=line_items,
            metadata={"orderId": order.order_id},
            success_url=self._success_url,
            cancel_url=self._cancel_url,
        )

        log_payment_operation(
            logger,
            "checkout_session_created",
            order_id=order.order_id,
            session_id=session["session_id"],
        )

        return CheckoutSessionResult(
            success_url=session["success_url"],
            cancel_url=session["cancel_url"],
            url=session["url"],
        )
