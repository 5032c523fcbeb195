"""Logging setup and request-scoped correlation IDs.

Every log line emitted while a request is in flight is prefixed with that
request's correlation ID, so one checkout or webhook delivery can be followed
across the route, the Stripe service and the sheet sink.

Usage:
    from formpay.utils.logging import get_logger, log_webhook_event

    logger = get_logger(__name__)
    log_webhook_event(logger, event.type, event.id, result="received")
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
NO_CORRELATION_ID = "no-correlation-id"

# One value per request task; worker threads started via run_in_threadpool
# inherit a copy of the context.
_request_correlation_id: ContextVar[str | None] = ContextVar(
    "request_correlation_id", default=None
)

# Webhook processing results that are logged above INFO
_RESULT_LEVELS = {
    "error": logging.ERROR,
    "skipped": logging.WARNING,
}


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation ID to the current context, generating one if needed."""
    value = correlation_id or str(uuid.uuid4())
    _request_correlation_id.set(value)
    return value


def get_correlation_id() -> str | None:
    return _request_correlation_id.get()


def clear_correlation_id() -> None:
    _request_correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamps ``correlation_id`` onto every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Prefixes formatted lines with ``[correlation-id]``."""

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id is None:
            correlation_id = get_correlation_id() or NO_CORRELATION_ID
            record.correlation_id = correlation_id
        return f"[{correlation_id}] {super().format(record)}"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install a structured handler on the root logger.

    Safe to call more than once: an existing structured handler is reused
    and only the level is updated.

    Args:
        level: Log level name or number
    """
    root = logging.getLogger()
    root.setLevel(level)

    if any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(DEFAULT_LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)`` with a CorrelationIdFilter attached once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def _emit(
    logger: logging.Logger,
    level: int,
    headline: str,
    context: dict[str, Any],
    shown: dict[str, Any],
) -> None:
    """Log ``headline | key=value ...`` with ``context`` attached as record attributes."""
    parts = [headline]
    parts.extend(f"{key}={value}" for key, value in shown.items() if value is not None)
    logger.log(level, " | ".join(parts), extra=context)


def log_checkout_operation(
    logger: logging.Logger,
    operation: str,
    *,
    session_id: str | None = None,
    customer_email: str | None = None,
    amount_cents: int | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one step of checkout session creation.

    Every given field is shown in the message and attached to the record.
    The line is logged at ERROR when ``error`` is set, INFO otherwise.

    Args:
        logger: Logger to write to
        operation: Step name (e.g. "create_checkout_session")
        session_id: Checkout Session ID, once Stripe has returned one
        customer_email: Customer the session is for
        amount_cents: Price in minor units
        error: Failure reason
        **extra: Further fields, e.g. stripe_error_code
    """
    fields: dict[str, Any] = {
        "session_id": session_id or None,
        "customer_email": customer_email or None,
        "amount_cents": amount_cents,
        "error": error or None,
        **extra,
    }
    fields = {key: value for key, value in fields.items() if value is not None}

    _emit(
        logger,
        logging.ERROR if error else logging.INFO,
        f"Checkout operation: {operation}",
        {"operation": operation, **fields},
        fields,
    )


def log_webhook_event(
    logger: logging.Logger,
    event_type: str,
    event_id: str,
    *,
    payment_id: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a webhook event at a level chosen from its processing result.

    "error" logs at ERROR, "skipped" at WARNING, anything else at INFO.

    Args:
        logger: Logger to write to
        event_type: Stripe event type (e.g., "checkout.session.completed")
        event_id: Stripe event ID
        payment_id: PaymentIntent ID, when the event carries one
        result: received, success, skipped or error
        error: Failure reason
        **extra: Further record attributes, not shown in the message
    """
    context: dict[str, Any] = {"event_type": event_type, "event_id": event_id}
    for key, value in (("payment_id", payment_id), ("result", result), ("error", error)):
        if value:
            context[key] = value
    context.update(extra)

    _emit(
        logger,
        _RESULT_LEVELS.get(result or "", logging.INFO),
        f"Webhook event: {event_type} ({event_id})",
        context,
        {"result": result or None, "payment": payment_id or None, "error": error or None},
    )
