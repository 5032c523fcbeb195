"""Stripe payment service for checkout sessions and webhook verification.

Two operations: opening a hosted Checkout page for the order form, and
authenticating the signed notifications Stripe sends back. Credentials are
passed in explicitly; see formpay_api.dependencies.
"""

import json
import logging
from typing import Any

import stripe
from pydantic import ValidationError
from stripe import StripeClient

from formpay.models.order import NAME_METADATA_KEY
from formpay.models.stripe_event import StripeEvent
from formpay.services.order_record import MalformedEvent

logger = logging.getLogger(__name__)


class StripeServiceError(Exception):
    """Base class for failures talking to Stripe.

    ``stripe_error_code`` carries Stripe's machine-readable code (e.g.
    "amount_too_small") when the API supplied one.
    """

    def __init__(self, message: str, stripe_error_code: str | None = None) -> None:
        super().__init__(message)
        self.stripe_error_code = stripe_error_code


class SignatureInvalid(StripeServiceError):
    """Raised when a webhook payload cannot be authenticated."""


class ProviderError(StripeServiceError):
    """Raised when Stripe rejects or fails an API request."""


class StripeService:
    """Stripe Checkout sessions and webhook verification for the order form.

    Usage:
        stripe_svc = StripeService(secret_key="sk_test_...", webhook_secret="whsec_...")
        url = stripe_svc.create_checkout_session(
            product_name="Consultation",
            amount_cents=2999,
            customer_email="ann@example.com",
            success_url="https://example.com/success",
            cancel_url="https://example.com/cancel",
        )
    """

    def __init__(
        self,
        *,
        secret_key: str | None,
        webhook_secret: str | None,
        currency: str = "usd",
        timeout: float = 10.0,
    ) -> None:
        """Initialize Stripe service.

        Args:
            secret_key: Stripe API key (sk_xxx).
            webhook_secret: Webhook endpoint signing secret (whsec_xxx).
            currency: ISO currency code for line items.
            timeout: Network timeout in seconds for Stripe API calls.
        """
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        self._currency = currency
        self._timeout = timeout
        self._client: StripeClient | None = None

    def _get_client(self) -> StripeClient:
        """Get or create the Stripe client (lazy initialization).

        Raises:
            ProviderError: If no API key is configured.
        """
        if self._client is None:
            if not self._secret_key:
                raise ProviderError("Stripe secret key is not configured")
            self._client = StripeClient(
                self._secret_key,
                http_client=stripe.RequestsClient(timeout=self._timeout),
            )
            logger.info("Stripe client initialized")
        return self._client

    def create_checkout_session(
        self,
        *,
        product_name: str,
        amount_cents: int,
        customer_email: str,
        success_url: str,
        cancel_url: str,
        customer_name: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict:
        """Create a Stripe Checkout session for a single product.

        Args:
            product_name: Line item name shown on the Checkout page.
            amount_cents: Price in minor currency units.
            customer_email: Prefilled customer email (also used for the receipt).
            success_url: URL to redirect on success.
            cancel_url: URL to redirect on cancel.
            customer_name: Stored in metadata under "customerName".
            metadata: Additional form fields, echoed back in the completion event.

        Returns:
            Dict with session details:
                - session_id: Stripe checkout session ID
                - checkout_url: URL to redirect user

        Raises:
            ProviderError: If session creation fails.
        """
        client = self._get_client()

        session_metadata: dict[str, str] = {}
        if customer_name:
            session_metadata[NAME_METADATA_KEY] = customer_name
        if metadata:
            # metadata may override customerName
            session_metadata.update(
                {key: _metadata_value(value) for key, value in metadata.items()}
            )

        try:
            logger.info(
                "Creating Stripe checkout session for %s, amount %d",
                customer_email,
                amount_cents,
            )

            session = client.checkout.sessions.create(
                params={
                    "mode": "payment",
                    "payment_method_types": ["card"],
                    "line_items": [
                        {
                            "price_data": {
                                "currency": self._currency,
                                "unit_amount": amount_cents,
                                "product_data": {"name": product_name},
                            },
                            "quantity": 1,
                        }
                    ],
                    "success_url": success_url,
                    "cancel_url": cancel_url,
                    "customer_email": customer_email,
                    "metadata": session_metadata,
                },
            )

            logger.info("Checkout session created: %s", session.id)

            return {
                "session_id": session.id,
                "checkout_url": session.url,
            }

        except stripe.StripeError as e:
            error_code = getattr(e, "code", None)
            message = e.user_message or str(e)
            logger.error(
                "Stripe checkout session creation failed: %s (code: %s)",
                message,
                error_code,
            )
            raise ProviderError(message, stripe_error_code=error_code) from e

    def verify_webhook_signature(self, payload: bytes, signature: str | None) -> StripeEvent:
        """Verify a webhook signature and parse the event.

        The signature is checked over the raw bytes first; the envelope is
        only parsed once the delivery is known to come from Stripe.

        Args:
            payload: Raw request body bytes, exactly as received.
            signature: Stripe-Signature header value.

        Returns:
            The verified event.

        Raises:
            SignatureInvalid: If the header is missing, the signature does not
                match or is outside the timestamp tolerance, or the secret is
                not configured.
            MalformedEvent: If an authentic payload is not a usable event
                envelope.
        """
        if not signature:
            raise SignatureInvalid("Missing Stripe-Signature header")
        if not self._webhook_secret:
            logger.error("Webhook secret is not configured; rejecting delivery")
            raise SignatureInvalid("Webhook secret is not configured")

        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"),
                signature,
                self._webhook_secret,
                tolerance=stripe.Webhook.DEFAULT_TOLERANCE,
            )
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", str(e))
            raise SignatureInvalid(f"Invalid webhook signature: {e.user_message or e}") from e
        except UnicodeDecodeError as e:
            logger.warning("Webhook payload is not UTF-8: %s", str(e))
            raise SignatureInvalid(f"Invalid webhook payload: {e}") from e

        try:
            verified = StripeEvent.model_validate_json(payload)
        except ValidationError as e:
            raise MalformedEvent(
                f"Verified webhook payload is not an event envelope: "
                f"{e.error_count()} invalid field(s)"
            ) from e

        logger.info("Webhook signature verified for event: %s", verified.id)
        return verified


def _metadata_value(value: Any) -> str:
    """Stripe metadata values are strings; render other JSON types compactly."""
    if isinstance(value, str):
        return value
    return json.dumps(value)

