"""Backend services for the checkout bridge."""

from .order_record import MalformedEvent, MissingCustomerEmail, normalize_checkout_session
from .sheets_service import SheetsService, SinkResult, SinkStatus, SinkWriteFailed
from .stripe_service import ProviderError, SignatureInvalid, StripeService, StripeServiceError
from .webhook_handler import WebhookHandler, WebhookOutcome

__all__ = [
    "MalformedEvent",
    "MissingCustomerEmail",
    "normalize_checkout_session",
    "SheetsService",
    "SinkResult",
    "SinkStatus",
    "SinkWriteFailed",
    "ProviderError",
    "SignatureInvalid",
    "StripeService",
    "StripeServiceError",
    "WebhookHandler",
    "WebhookOutcome",
]
