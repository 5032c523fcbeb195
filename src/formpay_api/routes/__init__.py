"""API routes package.

Routers are organized by concern:

- status: Plain-text banner and API index
- checkout: Stripe Checkout session creation
- webhooks: Stripe webhook ingestion

checkout and webhooks are mounted both at the root and under /api.
"""

from formpay_api.routes.checkout import router as checkout_router
from formpay_api.routes.status import router as status_router
from formpay_api.routes.webhooks import router as webhooks_router

__all__ = [
    "checkout_router",
    "status_router",
    "webhooks_router",
]
