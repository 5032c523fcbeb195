"""API models for the Stripe webhook endpoint."""

from pydantic import BaseModel, ConfigDict


class WebhookResponse(BaseModel):
    """Acknowledgment returned to Stripe for every verified delivery."""

    model_config = ConfigDict(strict=True)

    received: bool = True
