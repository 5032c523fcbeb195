"""API-specific request/response models.

This package contains Pydantic models specific to the REST API layer.
These models define request bodies and response schemas for endpoints.

Domain models (OrderRecord, StripeEvent, etc.) are in formpay.models
and should be reused here where appropriate.

Modules:
- common: Validation error models
- checkout: Checkout session request/response models
- webhooks: Webhook acknowledgment model
"""

__all__: list[str] = []
