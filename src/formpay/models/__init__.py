"""Pydantic models for the checkout bridge."""

from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    STRIPE_ERROR_MESSAGES,
    ErrorCode,
    ErrorResponse,
    FormPayError,
    get_user_friendly_stripe_message,
)
from .order import FIXED_COLUMNS, NAME_METADATA_KEY, PAYMENT_STATUS_COMPLETED, OrderRecord
from .stripe_event import (
    CHECKOUT_SESSION_COMPLETED,
    CheckoutSession,
    CustomerDetails,
    StripeEvent,
    StripeEventData,
)

__all__ = [
    # Errors
    "ErrorCode",
    "ErrorResponse",
    "FormPayError",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "STRIPE_ERROR_MESSAGES",
    "get_user_friendly_stripe_message",
    # Orders
    "FIXED_COLUMNS",
    "NAME_METADATA_KEY",
    "PAYMENT_STATUS_COMPLETED",
    "OrderRecord",
    # Stripe
    "CHECKOUT_SESSION_COMPLETED",
    "CheckoutSession",
    "CustomerDetails",
    "StripeEvent",
    "StripeEventData",
]
