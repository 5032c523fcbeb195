"""Standard error codes for the checkout bridge.

Every error that reaches an HTTP caller is expressed as an ErrorCode so the
response body has the same shape on every endpoint.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes returned to HTTP callers."""

    # Request validation (ERR_REQ_xxx)
    MISSING_REQUIRED_FIELDS = "ERR_REQ_001"
    INVALID_REQUEST = "ERR_REQ_002"

    # Stripe (ERR_STRIPE_xxx)
    INVALID_WEBHOOK_SIGNATURE = "ERR_STRIPE_001"
    PAYMENT_PROVIDER_ERROR = "ERR_STRIPE_002"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.MISSING_REQUIRED_FIELDS: (
        "Missing required fields. Please provide productName, productPrice, "
        "and customerEmail."
    ),
    ErrorCode.INVALID_REQUEST: "Request validation failed",
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: "Invalid webhook signature",
    ErrorCode.PAYMENT_PROVIDER_ERROR: (
        "We could not start the payment. Please try again in a moment."
    ),
}

ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.MISSING_REQUIRED_FIELDS: "Fill in the missing form fields and resubmit",
    ErrorCode.INVALID_REQUEST: "Check the request body and try again",
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: "Verify webhook secret configuration",
    ErrorCode.PAYMENT_PROVIDER_ERROR: "Try again or contact support",
}


class ErrorResponse(BaseModel):
    """Standard error body for failed requests.

    ``error`` carries the technical reason (e.g. the provider's message),
    ``message`` a text suitable for showing to the customer.
    """

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    error: str
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        error: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
        message: Optional[str] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            error: Technical reason; defaults to the code's message
            details: Optional additional context about the error
            message: Customer-facing text; defaults to the code's message

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            error=error or ERROR_MESSAGES[code],
            message=message or ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class FormPayError(Exception):
    """Exception raised by request handlers.

    Converted to an ErrorResponse by the API exception handlers.
    """

    def __init__(
        self,
        code: ErrorCode,
        error: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
        message: Optional[str] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.error = error or self.message
        self.details = details
        super().__init__(self.error)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse body."""
        return ErrorResponse.from_code(
            self.code, self.error, self.details, message=self.message
        )


# Stripe error code to customer-facing message mapping
STRIPE_ERROR_MESSAGES: dict[str, str] = {
    "amount_too_small": "The payment amount is below the minimum allowed.",
    "amount_too_large": "The payment amount exceeds the maximum allowed.",
    "invalid_currency": "This currency is not supported.",
    "email_invalid": "The email address is invalid. Please check and try again.",
    "processing_error": "A processing error occurred. Please try again.",
    "rate_limit": "Too many requests. Please wait a moment and try again.",
}


def get_user_friendly_stripe_message(
    stripe_error_code: Optional[str],
    default_message: str = ERROR_MESSAGES[ErrorCode.PAYMENT_PROVIDER_ERROR],
) -> str:
    """Get a customer-facing message for a Stripe error code.

    Args:
        stripe_error_code: The Stripe error code (e.g., 'amount_too_small').
        default_message: Message to use if error code is unknown.

    Returns:
        Message suitable for display in the checkout form.
    """
    if stripe_error_code and stripe_error_code in STRIPE_ERROR_MESSAGES:
        return STRIPE_ERROR_MESSAGES[stripe_error_code]
    return default_message
