"""Pytest configuration and fixtures for the checkout bridge tests.

This module provides reusable fixtures for testing:
- Environment defaults set before the app is imported
- Stripe webhook signing helpers producing real signatures
- Sample Stripe events
- A spy sink standing in for Google Sheets
- A TestClient wired to injected services
"""

import datetime as dt
import hashlib
import hmac
import json
import os
import time
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest

# === Environment Setup ===

# Set before any test module imports formpay_api.main
TEST_WEBHOOK_SECRET = "whsec_test_secret_for_testing"
TEST_SECRET_KEY = "sk_test_abc123xyz"

os.environ.setdefault("STRIPE_SECRET_KEY", TEST_SECRET_KEY)
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", TEST_WEBHOOK_SECRET)
os.environ.pop("GOOGLE_APPLICATION_CREDENTIALS_JSON", None)
os.environ.pop("SPREADSHEET_ID", None)

from fastapi.testclient import TestClient  # noqa: E402

from formpay.services.sheets_service import SheetsService, SinkResult, SinkStatus  # noqa: E402
from formpay.services.stripe_service import StripeService  # noqa: E402
from formpay.services.webhook_handler import WebhookHandler  # noqa: E402

FIXED_NOW = dt.datetime(2025, 6, 15, 12, 0, 0, tzinfo=dt.UTC)


# === Signing Helpers ===


def create_stripe_signature(
    payload: bytes,
    secret: str = TEST_WEBHOOK_SECRET,
    timestamp: int | None = None,
) -> str:
    """Create a valid Stripe webhook signature.

    Stripe signatures use HMAC-SHA256 with format: t={timestamp},v1={signature}
    """
    ts = str(timestamp if timestamp is not None else int(time.time()))
    signed_payload = f"{ts}.{payload.decode('utf-8')}"
    signature = hmac.new(
        secret.encode("utf-8"),
        signed_payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={ts},v1={signature}"


def encode_event(event: dict[str, Any]) -> bytes:
    """Serialize an event the way Stripe sends it."""
    return json.dumps(event, indent=2).encode("utf-8")


# === Sample Events ===


def make_checkout_completed_event(
    event_id: str = "evt_1ABC123DEF456",
    metadata: dict[str, str] | None = None,
    email: str | None = "ann@x.com",
    amount_total: int | None = 5000,
    payment_intent: str | None = "pi_1",
) -> dict[str, Any]:
    """Create a checkout.session.completed webhook event."""
    session: dict[str, Any] = {
        "id": "cs_test_abc123",
        "object": "checkout.session",
        "payment_intent": payment_intent,
        "payment_status": "paid",
        "amount_total": amount_total,
        "currency": "usd",
        "metadata": metadata if metadata is not None else {"customerName": "Ann", "notes": "vip"},
        "customer_details": {"email": email, "name": "Ann Example"} if email else None,
    }
    return {
        "id": event_id,
        "object": "event",
        "type": "checkout.session.completed",
        "created": int(time.time()),
        "data": {"object": session},
    }


def make_event(event_type: str, event_id: str = "evt_3GHI789JKL012") -> dict[str, Any]:
    """Create an event of any other type."""
    return {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "created": int(time.time()),
        "data": {"object": {"id": "pi_test", "object": "payment_intent"}},
    }


@pytest.fixture
def checkout_completed_event() -> dict[str, Any]:
    """The canonical completed-checkout event (Ann, 50.00, pi_1)."""
    return make_checkout_completed_event()


# === Service Fixtures ===


@pytest.fixture(autouse=True)
def reset_service_singletons() -> Generator[None, None, None]:
    """Reset cached dependency providers before and after each test."""
    from formpay_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


@pytest.fixture
def stripe_service() -> StripeService:
    """StripeService with test credentials; no network unless the client is used."""
    return StripeService(secret_key=TEST_SECRET_KEY, webhook_secret=TEST_WEBHOOK_SECRET)


@pytest.fixture
def spy_sink() -> MagicMock:
    """Stand-in for SheetsService that records appended rows."""
    sink = MagicMock(spec=SheetsService)
    sink.append_record.return_value = SinkResult(
        status=SinkStatus.WRITTEN, updated_range="Sheet1!A2:M2"
    )
    return sink


@pytest.fixture
def webhook_handler(spy_sink: MagicMock) -> WebhookHandler:
    """WebhookHandler writing to the spy sink with a frozen clock."""
    return WebhookHandler(sink=spy_sink, clock=lambda: FIXED_NOW)


@pytest.fixture
def client(
    stripe_service: StripeService,
    webhook_handler: WebhookHandler,
) -> Generator[TestClient, None, None]:
    """TestClient for the app with injected services."""
    from formpay_api.dependencies import get_stripe_service, get_webhook_handler
    from formpay_api.main import app

    app.dependency_overrides[get_stripe_service] = lambda: stripe_service
    app.dependency_overrides[get_webhook_handler] = lambda: webhook_handler
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
