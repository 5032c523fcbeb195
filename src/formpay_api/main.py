"""FastAPI application for the checkout bridge.

This package provides REST endpoints for:
- Status checks (GET / and GET /api)
- Stripe Checkout session creation
- Stripe webhook ingestion into Google Sheets

The checkout and webhook routes are served at the root and again under /api,
so the same app works behind a plain server and as a platform function.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from formpay import __version__
from formpay.config import Settings
from formpay.utils.logging import configure_logging, get_logger
from formpay_api.dependencies import get_settings
from formpay_api.exceptions import register_exception_handlers
from formpay_api.middleware.correlation import CORRELATION_ID_HEADER, CorrelationIdMiddleware
from formpay_api.routes.checkout import router as checkout_router
from formpay_api.routes.status import router as status_router
from formpay_api.routes.webhooks import router as webhooks_router

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to configure middleware with. Defaults to the
            cached settings read from the environment.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Form Payment Bridge API",
        description="Stripe Checkout sessions and order webhooks backed by Google Sheets",
        version=__version__,
    )

    # Origins allowed to post the checkout form
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", CORRELATION_ID_HEADER],
        expose_headers=[CORRELATION_ID_HEADER],
    )
    app.add_middleware(CorrelationIdMiddleware)

    register_exception_handlers(app)

    app.include_router(status_router)
    app.include_router(checkout_router)
    app.include_router(webhooks_router)
    app.include_router(checkout_router, prefix="/api", include_in_schema=False)
    app.include_router(webhooks_router, prefix="/api", include_in_schema=False)

    return app


app = create_app()

# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int | None = None, reload: bool = False) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: PORT from the environment, else 3000)
        reload: Enable hot reload for development (default: False)
    """
    import uvicorn

    port = port or get_settings().port
    logger.info("Server running on port %d", port)

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run("formpay_api.main:app", host=host, port=port, reload=True, reload_dirs=["src"])
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
