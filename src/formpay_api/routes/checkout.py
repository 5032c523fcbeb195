"""Checkout session endpoint.

Turns the order form's fields into a Stripe-hosted Checkout session and hands
the redirect URL back to the browser. Errors are reported synchronously: the
form shows them to the customer.
"""

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from formpay.config import Settings
from formpay.models.errors import ErrorCode, FormPayError, get_user_friendly_stripe_message
from formpay.services.stripe_service import ProviderError, StripeService
from formpay.utils.logging import get_logger, log_checkout_operation
from formpay_api.dependencies import get_settings, get_stripe_service
from formpay_api.models.checkout import CheckoutSessionRequest, CheckoutSessionResponse

logger = get_logger(__name__)

router = APIRouter(tags=["checkout"])


@router.post(
    "/create-checkout-session",
    summary="Create a Stripe Checkout session",
    description="""
Create a hosted Checkout session for a single product.

**Required fields:** productName, productPrice (minor units), customerEmail.
`customerName` and every key of `metadata` are attached to the session and
come back in the checkout.session.completed webhook.
""",
    response_model=CheckoutSessionResponse,
    responses={
        200: {"description": "Session created; redirect the customer to checkoutUrl"},
        400: {"description": "Missing or invalid fields"},
        500: {"description": "Stripe rejected the session"},
    },
)
async def create_checkout_session(
    body: CheckoutSessionRequest,
    settings: Settings = Depends(get_settings),
    stripe_service: StripeService = Depends(get_stripe_service),
) -> CheckoutSessionResponse:
    """Create a Checkout session and return its URL."""
    missing = body.missing_fields()
    if missing:
        logger.warning("Checkout request missing fields: %s", ", ".join(missing))
        raise FormPayError(
            code=ErrorCode.MISSING_REQUIRED_FIELDS,
            details={"missing": ", ".join(missing)},
        )

    log_checkout_operation(
        logger,
        "create_checkout_session",
        customer_email=body.customer_email,
        amount_cents=body.product_price,
        product=body.product_name,
    )

    try:
        session = await run_in_threadpool(
            stripe_service.create_checkout_session,
            product_name=body.product_name,
            amount_cents=body.product_price,
            customer_email=body.customer_email,
            customer_name=body.customer_name,
            metadata=body.metadata,
            success_url=settings.checkout_success_url,
            cancel_url=settings.checkout_cancel_url,
        )
    except ProviderError as e:
        log_checkout_operation(
            logger,
            "create_checkout_session",
            customer_email=body.customer_email,
            error=str(e),
            stripe_error_code=e.stripe_error_code,
        )
        raise FormPayError(
            code=ErrorCode.PAYMENT_PROVIDER_ERROR,
            error=str(e),
            message=get_user_friendly_stripe_message(e.stripe_error_code),
        ) from e

    log_checkout_operation(
        logger,
        "checkout_session_created",
        session_id=session["session_id"],
        customer_email=body.customer_email,
    )
    return CheckoutSessionResponse(checkout_url=session["checkout_url"])
