"""Normalization of completed Checkout Sessions into order records.

Pure functions only: no I/O, so the mapping can be tested without Stripe or
Google in the loop.
"""

import datetime as dt
import logging
from decimal import Decimal

from formpay.models.order import NAME_METADATA_KEY, PAYMENT_STATUS_COMPLETED, OrderRecord
from formpay.models.stripe_event import CheckoutSession

logger = logging.getLogger(__name__)

MINOR_UNITS_PER_MAJOR = Decimal(100)


class MalformedEvent(ValueError):
    """Raised when a verified event lacks a field the record needs."""


class MissingCustomerEmail(MalformedEvent):
    """Raised when a completed session has no customer email."""


def minor_to_major(amount: int) -> Decimal:
    """Convert minor currency units to major units (2999 -> Decimal("29.99"))."""
    return Decimal(amount) / MINOR_UNITS_PER_MAJOR


def normalize_checkout_session(
    session: CheckoutSession,
    *,
    now: dt.datetime | None = None,
) -> OrderRecord:
    """Build the order record for a completed Checkout Session.

    Args:
        session: Parsed ``data.object`` of a checkout.session.completed event
        now: Processing time; defaults to the current UTC time

    Returns:
        OrderRecord with the name key removed from the pass-through fields.

    Raises:
        MissingCustomerEmail: If customer_details or its email is absent.
        MalformedEvent: If amount_total is absent.
    """
    email = session.customer_details.email if session.customer_details else None
    if not email:
        raise MissingCustomerEmail(f"Checkout session {session.id} has no customer email")

    if session.amount_total is None:
        raise MalformedEvent(f"Checkout session {session.id} has no amount_total")

    if not session.payment_intent:
        logger.warning("Checkout session %s has no payment_intent", session.id)

    extra_fields = dict(session.metadata)
    name = extra_fields.pop(NAME_METADATA_KEY, "")

    timestamp = (now or dt.datetime.now(dt.UTC)).isoformat()

    return OrderRecord(
        name=name,
        email=email,
        payment_status=PAYMENT_STATUS_COMPLETED,
        payment_id=session.payment_intent or "",
        payment_amount=minor_to_major(session.amount_total),
        timestamp=timestamp,
        extra_fields=extra_fields,
    )
