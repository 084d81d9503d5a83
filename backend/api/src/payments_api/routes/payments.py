"""Checkout endpoints.

Provides REST endpoints for:
- Opening a Stripe hosted checkout session for an order
- The success/cancel pages Stripe redirects the customer back to
"""

import logging

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_201_CREATED

from payments.models.checkout import CheckoutSessionResult, PaymentSessionRequest
from payments.models.errors import ErrorCode, PaymentError
from payments.services.checkout_service import CheckoutSessionBuilder
from payments.services.stripe_service import StripeServiceError
from payments_api.dependencies import get_checkout_builder
from payments_api.models.common import (
    ErrorResponse,
    RedirectStatus,
    ValidationErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post(
    "/create-payment-session",
    summary="Create checkout session",
    description="""
Open a Stripe hosted checkout session for an order.

Each item becomes one line item; prices are converted to minor units
(ROUND_HALF_UP). The order ID is attached to the PaymentIntent metadata so the
`charge.succeeded` webhook can be correlated back to the order.
""",
    response_model=CheckoutSessionResult,
    status_code=HTTP_201_CREATED,
    responses={
        201: {"description": "Checkout session created"},
        400: {"description": "Invalid order payload", "model": ValidationErrorResponse},
        500: {"description": "Stripe rejected the request", "model": ErrorResponse},
    },
)
async def create_payment_session(
    body: PaymentSessionRequest,
    builder: CheckoutSessionBuilder = Depends(get_checkout_builder),
) -> CheckoutSessionResult:
    try:
        return await run_in_threadpool(builder.create_session, body)
    except StripeServiceError as e:
        logger.error("Checkout session for order %s failed: %s", body.order_id, e)
        details = {"order_id": body.order_id}
        if e.stripe_error_code:
            details["stripe_error_code"] = e.stripe_error_code
        raise PaymentError(code=ErrorCode.STRIPE_API_ERROR, details=details) from e


@router.get("/success", response_model=RedirectStatus, summary="Checkout success landing")
async def payment_success() -> RedirectStatus:
    return RedirectStatus(ok=True, message="Payment successful")


@router.get("/cancel", response_model=RedirectStatus, summary="Checkout cancel landing")
async def payment_cancel() -> RedirectStatus:
    return RedirectStatus(ok=False, message="Payment cancelled")
