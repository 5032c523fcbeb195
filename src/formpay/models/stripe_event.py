"""Stripe webhook event models.

Only the fields the bridge consumes are declared; everything else in the
payload is ignored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


class StripeEventData(BaseModel):
    """The ``data`` envelope of a Stripe event."""

    model_config = ConfigDict(extra="ignore")

    object: dict[str, Any] = Field(
        default_factory=dict,
        description="The API resource the event is about",
    )


class StripeEvent(BaseModel):
    """A verified Stripe webhook event.

    ``type`` is the discriminator; the payload stays an untyped mapping until
    a handler for that type parses it.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Stripe event ID", examples=["evt_1ABC123DEF456"])
    type: str = Field(
        ...,
        description="Stripe event type",
        examples=[CHECKOUT_SESSION_COMPLETED, "payment_intent.created"],
    )
    data: StripeEventData = Field(default_factory=StripeEventData)

    @property
    def is_checkout_completed(self) -> bool:
        return self.type == CHECKOUT_SESSION_COMPLETED


class CustomerDetails(BaseModel):
    """Customer details collected by Checkout."""

    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    name: str | None = None


class CheckoutSession(BaseModel):
    """The ``data.object`` of a checkout.session.completed event."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Checkout Session ID", examples=["cs_test_abc123"])
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="Metadata attached at session creation, echoed back by Stripe",
    )
    customer_details: CustomerDetails | None = None
    payment_intent: str | None = Field(
        default=None,
        description="PaymentIntent ID (pi_xxx)",
        examples=["pi_3ABC123DEF456"],
    )
    amount_total: int | None = Field(
        default=None,
        description="Total amount in minor currency units",
        examples=[2999],
    )
