"""Shared API request/response models.

This module contains models used across multiple endpoints, chiefly
validation error formatting.

Domain models (OrderRecord, StripeEvent, ...) live in formpay.models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from formpay.models.errors import ERROR_MESSAGES, ERROR_RECOVERY, ErrorCode, ErrorResponse

__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "ValidationErrorResponse",
    "ValidationErrorDetail",
    "format_validation_errors",
]


class ValidationErrorDetail(BaseModel):
    """One rejected field."""

    model_config = ConfigDict(strict=True)

    loc: list[str | int] = Field(
        ...,
        description="Location of the rejected value, starting with \"body\"",
        examples=[["body", "productPrice"]],
    )
    msg: str = Field(
        ...,
        description="Why the value was rejected",
        examples=["Input should be a valid integer"],
    )
    type: str = Field(
        ...,
        description="pydantic error type",
        examples=["int_parsing"],
    )


class ValidationErrorResponse(BaseModel):
    """Response format for request validation errors (HTTP 400).

    Same envelope as ErrorResponse, with per-field details.
    """

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: str = ErrorCode.INVALID_REQUEST.value
    error: str = ERROR_MESSAGES[ErrorCode.INVALID_REQUEST]
    message: str = ERROR_MESSAGES[ErrorCode.INVALID_REQUEST]
    recovery: str = ERROR_RECOVERY[ErrorCode.INVALID_REQUEST]
    details: list[ValidationErrorDetail] = Field(default_factory=list)


def format_validation_errors(errors: list[dict[str, Any]]) -> ValidationErrorResponse:
    """Build the 400 body for a request FastAPI could not parse.

    ``error`` names the offending fields by their JSON names, e.g.
    "Invalid value for: productPrice".
    """
    details = [
        ValidationErrorDetail(
            loc=[str(part) for part in err.get("loc", ())],
            msg=err.get("msg", ""),
            type=err.get("type", ""),
        )
        for err in errors
    ]
    fields = ", ".join(".".join(str(part) for part in detail.loc[1:]) or "body" for detail in details)
    return ValidationErrorResponse(
        error=f"Invalid value for: {fields}" if fields else ERROR_MESSAGES[ErrorCode.INVALID_REQUEST],
        details=details,
    )
