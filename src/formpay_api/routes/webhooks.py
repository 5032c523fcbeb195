"""Webhook endpoint for Stripe events.

Handles checkout.session.completed by appending the order to the
spreadsheet; every other event type is acknowledged and ignored.

This endpoint does NOT require authentication as it receives signed
payloads. Only a failed signature check changes the response: anything that
goes wrong after verification is logged and Stripe still gets a 200, so a
spreadsheet outage never triggers a redelivery storm.
"""

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from formpay.models.errors import ErrorCode, ErrorResponse, FormPayError
from formpay.services.order_record import MalformedEvent
from formpay.services.stripe_service import SignatureInvalid, StripeService
from formpay.services.webhook_handler import WebhookHandler
from formpay.utils.logging import get_logger
from formpay_api.dependencies import get_stripe_service, get_webhook_handler
from formpay_api.models.webhooks import WebhookResponse

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

SIGNATURE_HEADER = "Stripe-Signature"


@router.post(
    "/webhook",
    summary="Receive Stripe webhook events",
    description="""
Endpoint for Stripe webhook events. Handles:
- checkout.session.completed: stores the order as a spreadsheet row

**No authentication required** - signature is verified using the Stripe
webhook secret over the raw request body.

Returns 200 for every verified delivery, including ignored event types and
failed spreadsheet writes.
""",
    response_model=WebhookResponse,
    responses={
        200: {"description": "Event received", "model": WebhookResponse},
        400: {"description": "Invalid or missing signature", "model": ErrorResponse},
    },
)
async def handle_stripe_webhook(
    request: Request,
    stripe_service: StripeService = Depends(get_stripe_service),
    handler: WebhookHandler = Depends(get_webhook_handler),
) -> WebhookResponse:
    """Verify, process and acknowledge a Stripe webhook delivery."""
    # Raw bytes: the signature covers the exact payload
    payload = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    try:
        event = stripe_service.verify_webhook_signature(payload, signature)
    except SignatureInvalid as e:
        logger.warning("Webhook signature verification failed: %s", e)
        raise FormPayError(
            code=ErrorCode.INVALID_WEBHOOK_SIGNATURE,
            error=f"Webhook Error: {e}",
        ) from e
    except MalformedEvent as e:
        logger.error("Acknowledging signed delivery that is not a usable event: %s", e)
        return WebhookResponse(received=True)

    try:
        outcome = await run_in_threadpool(handler.handle_event, event)
    except Exception:
        logger.exception("Unexpected error processing webhook event %s", event.id)
    else:
        if outcome.processing_result == "error":
            logger.error(
                "Webhook event %s acknowledged without storing order: %s",
                event.id,
                outcome.message,
            )

    return WebhookResponse(received=True)
