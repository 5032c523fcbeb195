"""FastAPI dependency injection providers for shared services.

Each provider builds its service explicitly from Settings and caches it with
@lru_cache, so a process holds one instance of each client. Clients are
lazy: no network traffic happens until a request needs it.

Usage in routes:
    from formpay_api.dependencies import get_stripe_service

    @router.post("/create-checkout-session")
    async def create_checkout_session(
        stripe_service: StripeService = Depends(get_stripe_service),
    ):
        ...

Service Dependency Graph:
    Settings (from environment)
        ├── StripeService
        └── SheetsService
                └── WebhookHandler

Testing:
    Override providers with app.dependency_overrides, or call
    reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from formpay.config import Settings
from formpay.services.sheets_service import SheetsService
from formpay.services.stripe_service import StripeService
from formpay.services.webhook_handler import WebhookHandler


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings read from the environment."""
    return Settings()


@lru_cache
def get_stripe_service() -> StripeService:
    """Get cached StripeService instance.

    Returns:
        StripeService configured with the Stripe secrets from Settings.
    """
    settings = get_settings()
    return StripeService(
        secret_key=settings.stripe_secret_key,
        webhook_secret=settings.stripe_webhook_secret,
        currency=settings.checkout_currency,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache
def get_sheets_service() -> SheetsService:
    """Get cached SheetsService instance.

    Returns:
        SheetsService for the configured spreadsheet (possibly unconfigured).
    """
    settings = get_settings()
    return SheetsService(
        credentials_json=settings.google_credentials_json,
        spreadsheet_id=settings.spreadsheet_id,
        sheet_name=settings.sheet_name,
        extra_columns=settings.sheet_extra_columns,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache
def get_webhook_handler() -> WebhookHandler:
    """Get cached WebhookHandler instance.

    Returns:
        WebhookHandler writing to the SheetsService singleton.
    """
    return WebhookHandler(sink=get_sheets_service())


def reset_services() -> None:
    """Clear all cached service instances.

    Call this in test fixtures to ensure clean state between tests.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    get_settings.cache_clear()
    get_stripe_service.cache_clear()
    get_sheets_service.cache_clear()
    get_webhook_handler.cache_clear()
