"""API models for checkout session creation."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Fields the form must send; a missing or empty value is rejected with 400.
REQUIRED_FIELDS: tuple[str, ...] = ("productName", "productPrice", "customerEmail")


class CheckoutSessionRequest(BaseModel):
    """Order intent posted by the checkout form.

    Every field is optional at the schema level so that missing fields are
    reported as MISSING_REQUIRED_FIELDS rather than a generic validation error.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "productName": "Skin consultation",
                    "productPrice": 2999,
                    "customerName": "Ann",
                    "customerEmail": "ann@example.com",
                    "metadata": {"notes": "vip", "age": "34"},
                }
            ]
        },
    )

    product_name: str | None = Field(default=None, alias="productName")
    product_price: int | None = Field(
        default=None,
        alias="productPrice",
        description="Price in minor currency units (cents)",
    )
    customer_name: str | None = Field(default=None, alias="customerName")
    customer_email: str | None = Field(default=None, alias="customerEmail")
    metadata: dict[str, Any] | None = Field(
        default=None,
        description="Additional form fields, stored as Checkout Session metadata",
    )

    def missing_fields(self) -> list[str]:
        """Names of required fields that are absent or empty (None, "", 0)."""
        values = {
            "productName": self.product_name,
            "productPrice": self.product_price,
            "customerEmail": self.customer_email,
        }
        return [name for name in REQUIRED_FIELDS if not values[name]]


class CheckoutSessionResponse(BaseModel):
    """Redirect target for the customer."""

    model_config = ConfigDict(strict=True)

    checkout_url: str = Field(
        ...,
        serialization_alias="checkoutUrl",
        description="Stripe-hosted Checkout page",
        examples=["https://checkout.stripe.com/c/pay/cs_test_123"],
    )
