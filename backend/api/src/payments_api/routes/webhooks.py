"""Webhook endpoint for Stripe events.

Handles charge.succeeded by republishing it as payment.succeeded on the
message bus; every other verified event is acknowledged and ignored.

This endpoint does NOT require authentication: payloads are signed by
Stripe and verified with the endpoint secret.
"""

from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_200_OK

from payments.models.errors import ErrorCode, ErrorResponse, PaymentError
from payments.services.webhook_processor import WebhookProcessor
from payments_api.dependencies import get_webhook_processor

router = APIRouter(prefix="/payments", tags=["webhooks"])

SIGNATURE_HEADER = "Stripe-Signature"


@router.post(
    "/webhook",
    summary="Receive Stripe webhook events",
    description="""
Endpoint for Stripe webhook events. Handles:
- charge.succeeded: publishes `payment.succeeded` with
  `{stripePaymentId, orderId, receiptUrl}`

Other event types are acknowledged with 200 and not acted upon.

**No authentication required** - the `Stripe-Signature` header is verified
against the raw request body using the webhook endpoint secret.

**Not deduplicated**: redelivered events are published again.
""",
    status_code=HTTP_200_OK,
    response_class=Response,
    responses={
        200: {"description": "Event verified (empty body)"},
        400: {"description": "Missing or invalid signature", "model": ErrorResponse},
    },
)
async def handle_stripe_webhook(
    request: Request,
    processor: WebhookProcessor = Depends(get_webhook_processor),
) -> Response:
    # Raw bytes: re-serialized JSON would not match the signature.
    payload = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    result = await run_in_threadpool(processor.process, payload, signature)

    if not result.accepted:
        raise PaymentError(
            code=ErrorCode.INVALID_WEBHOOK_SIGNATURE,
            details={"message": "Webhook signature verification failed"},
        )

    return Response(status_code=HTTP_200_OK)
