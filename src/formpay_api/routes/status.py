"""Status endpoints for uptime checks and discovery."""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["status"])

BANNER = (
    "Form payment integration API is running. "
    "Use /create-checkout-session to create a payment."
)


@router.get("/", response_class=PlainTextResponse, summary="Plain-text status banner")
async def root() -> str:
    return BANNER


@router.get("/api", summary="API index")
async def api_index() -> dict[str, Any]:
    """List the endpoints exposed under the /api prefix."""
    return {
        "status": "API is running",
        "availableEndpoints": [
            "/api/create-checkout-session",
            "/api/webhook",
        ],
        "message": "Use /api/create-checkout-session to create a Stripe checkout session",
    }
