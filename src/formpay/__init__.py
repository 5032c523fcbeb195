"""Checkout-to-spreadsheet bridge: Stripe Checkout sessions and order webhooks."""

__version__ = "0.1.0"
