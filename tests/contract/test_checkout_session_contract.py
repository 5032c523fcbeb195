"""Contract tests for POST /create-checkout-session.

The Stripe API client is mocked at the StripeClient boundary, so the real
StripeService builds the request parameters.

Test categories:
- Successful session creation (200)
- Missing required fields (400, no provider call)
- Malformed bodies (400)
- Provider errors (500)
"""

from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import stripe
from fastapi.testclient import TestClient
from starlette.status import HTTP_200_OK, HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

pytestmark = pytest.mark.contract

CHECKOUT_URL = "https://checkout.stripe.com/c/pay/cs_test_123"


def _valid_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "productName": "Skin consultation",
        "productPrice": 2999,
        "customerName": "Ann",
        "customerEmail": "ann@x.com",
        "metadata": {"notes": "vip", "age": "34"},
    }
    body.update(overrides)
    return body


@pytest.fixture
def mock_stripe_client():
    """Mock Stripe client returning a created session."""
    with patch("formpay.services.stripe_service.StripeClient") as mock_client_class:
        mock_client = MagicMock()
        session = MagicMock()
        session.id = "cs_test_123"
        session.url = CHECKOUT_URL
        mock_client.checkout.sessions.create.return_value = session
        mock_client_class.return_value = mock_client
        yield mock_client


def _sent_params(mock_stripe_client: MagicMock) -> dict[str, Any]:
    return mock_stripe_client.checkout.sessions.create.call_args.kwargs["params"]


# === Success ===


class TestCreateCheckoutSessionSuccess:
    """Valid requests return the hosted page URL."""

    def test_returns_checkout_url(self, client: TestClient, mock_stripe_client: MagicMock):
        response = client.post("/create-checkout-session", json=_valid_body())

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"checkoutUrl": CHECKOUT_URL}

    def test_api_prefixed_route(self, client: TestClient, mock_stripe_client: MagicMock):
        response = client.post("/api/create-checkout-session", json=_valid_body())

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"checkoutUrl": CHECKOUT_URL}

    def test_session_parameters(self, client: TestClient, mock_stripe_client: MagicMock):
        client.post("/create-checkout-session", json=_valid_body())

        params = _sent_params(mock_stripe_client)
        assert params["mode"] == "payment"
        assert params["customer_email"] == "ann@x.com"
        assert params["line_items"][0]["price_data"]["unit_amount"] == 2999
        assert params["line_items"][0]["price_data"]["product_data"] == {
            "name": "Skin consultation"
        }
        assert params["success_url"] == "https://your-framer-site.com/success"
        assert params["cancel_url"] == "https://your-framer-site.com/cancel"

    def test_name_and_metadata_attached(self, client: TestClient, mock_stripe_client: MagicMock):
        client.post("/create-checkout-session", json=_valid_body())

        assert _sent_params(mock_stripe_client)["metadata"] == {
            "customerName": "Ann",
            "notes": "vip",
            "age": "34",
        }

    def test_optional_fields_may_be_omitted(
        self, client: TestClient, mock_stripe_client: MagicMock
    ):
        body = {"productName": "Kit", "productPrice": 500, "customerEmail": "ann@x.com"}

        response = client.post("/create-checkout-session", json=body)

        assert response.status_code == HTTP_200_OK
        assert _sent_params(mock_stripe_client)["metadata"] == {}


# === Missing Required Fields ===


class TestMissingRequiredFields:
    """Absent or empty required fields are rejected before Stripe is called."""

    @pytest.mark.parametrize("field", ["productName", "productPrice", "customerEmail"])
    def test_missing_field_returns_400(
        self, client: TestClient, mock_stripe_client: MagicMock, field: str
    ):
        body = _valid_body()
        del body[field]

        response = client.post("/create-checkout-session", json=body)

        assert response.status_code == HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["error_code"] == "ERR_REQ_001"
        assert data["error"] == (
            "Missing required fields. Please provide productName, productPrice, "
            "and customerEmail."
        )
        assert field in data["details"]["missing"]
        mock_stripe_client.checkout.sessions.create.assert_not_called()

    @pytest.mark.parametrize(
        ("field", "empty"),
        [("productName", ""), ("customerEmail", ""), ("productPrice", 0), ("productName", None)],
    )
    def test_empty_field_returns_400(
        self, client: TestClient, mock_stripe_client: MagicMock, field: str, empty: Any
    ):
        response = client.post("/create-checkout-session", json=_valid_body(**{field: empty}))

        assert response.status_code == HTTP_400_BAD_REQUEST
        mock_stripe_client.checkout.sessions.create.assert_not_called()

    def test_all_missing_lists_all(self, client: TestClient, mock_stripe_client: MagicMock):
        response = client.post("/create-checkout-session", json={})

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["details"] == {
            "missing": "productName, productPrice, customerEmail"
        }


# === Malformed Bodies ===


class TestMalformedRequests:
    """Bodies that cannot be parsed are a 400, not FastAPI's default 422."""

    def test_non_integer_price_returns_400(
        self, client: TestClient, mock_stripe_client: MagicMock
    ):
        response = client.post(
            "/create-checkout-session", json=_valid_body(productPrice="twenty dollars")
        )

        assert response.status_code == HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["error_code"] == "ERR_REQ_002"
        assert "productPrice" in data["error"]
        mock_stripe_client.checkout.sessions.create.assert_not_called()

    def test_invalid_json_returns_400(self, client: TestClient, mock_stripe_client: MagicMock):
        response = client.post(
            "/create-checkout-session",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["success"] is False


# === Provider Errors ===


class TestProviderErrors:
    """Stripe failures surface as 500 with a displayable message."""

    def test_stripe_rejection_returns_500(
        self, client: TestClient, mock_stripe_client: MagicMock
    ):
        mock_stripe_client.checkout.sessions.create.side_effect = stripe.InvalidRequestError(
            "Invalid currency: xyz",
            param="line_items[0][price_data][currency]",
        )

        response = client.post("/create-checkout-session", json=_valid_body())

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert data["error_code"] == "ERR_STRIPE_002"
        assert data["error"] == "Invalid currency: xyz"
        assert data["message"] == "We could not start the payment. Please try again in a moment."

    def test_known_error_code_gets_friendly_message(
        self, client: TestClient, mock_stripe_client: MagicMock
    ):
        mock_stripe_client.checkout.sessions.create.side_effect = stripe.InvalidRequestError(
            "Amount must be at least $0.50 usd",
            param="line_items[0][price_data][unit_amount]",
            code="amount_too_small",
        )

        response = client.post("/create-checkout-session", json=_valid_body(productPrice=10))

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["message"] == "The payment amount is below the minimum allowed."

    def test_network_failure_returns_500(self, client: TestClient, mock_stripe_client: MagicMock):
        mock_stripe_client.checkout.sessions.create.side_effect = stripe.APIConnectionError(
            "Could not connect to Stripe"
        )

        response = client.post("/create-checkout-session", json=_valid_body())

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error_code"] == "ERR_STRIPE_002"
