"""Webhook handler for processing verified Stripe events.

Provides business logic for handling webhook events separate from
HTTP routing concerns. This enables:
- Unit testing without HTTP overhead
- Reuse across different transport mechanisms (ASGI server, Lambda)

Events reach this module already verified. Nothing in here raises: every
outcome is reported as a WebhookOutcome so the route can always acknowledge.
"""

import datetime as dt
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, ValidationError

from formpay.models.order import OrderRecord
from formpay.models.stripe_event import CheckoutSession, StripeEvent
from formpay.services.order_record import MalformedEvent, normalize_checkout_session
from formpay.services.sheets_service import SheetsService, SinkStatus
from formpay.utils.logging import get_logger, log_webhook_event

logger = get_logger(__name__)


class WebhookOutcome(BaseModel):
    """What happened to a verified event."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    event_type: str
    processing_result: str  # "success", "skipped", "error"
    message: str | None = None
    record: OrderRecord | None = None


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class WebhookHandler:
    """Handler for processing Stripe webhook events.

    Turns checkout.session.completed events into order rows; every other
    event type is acknowledged and ignored.
    """

    def __init__(
        self,
        sink: SheetsService,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        """Initialize webhook handler.

        Args:
            sink: Destination for normalized order records
            clock: Source of the processing timestamp
        """
        self._sink = sink
        self._clock = clock

    def handle_event(self, event: StripeEvent) -> WebhookOutcome:
        """Route a verified event by type.

        Args:
            event: Verified Stripe event

        Returns:
            WebhookOutcome describing the processing result
        """
        log_webhook_event(logger, event.type, event.id, result="received")

        if not event.is_checkout_completed:
            log_webhook_event(logger, event.type, event.id, result="skipped")
            return WebhookOutcome(
                event_id=event.id,
                event_type=event.type,
                processing_result="skipped",
                message=f"Event type '{event.type}' not handled",
            )

        return self.process_checkout_completed(event)

    def process_checkout_completed(self, event: StripeEvent) -> WebhookOutcome:
        """Process checkout.session.completed event.

        Normalizes the session into an OrderRecord and appends it to the sheet.
        Malformed sessions and sink failures are logged and reported as
        "error"; they never propagate.

        Args:
            event: Verified checkout.session.completed event

        Returns:
            WebhookOutcome with the record when one was built
        """
        try:
            session = CheckoutSession.model_validate(event.data.object)
            record = normalize_checkout_session(session, now=self._clock())
        except (ValidationError, MalformedEvent) as e:
            error_msg = f"Cannot build order record: {e}"
            log_webhook_event(logger, event.type, event.id, result="error", error=error_msg)
            return WebhookOutcome(
                event_id=event.id,
                event_type=event.type,
                processing_result="error",
                message=error_msg,
            )

        logger.info("Processing completed payment for: %s", record.email)

        result = self._sink.append_record(record)

        if result.status == SinkStatus.WRITTEN:
            log_webhook_event(
                logger,
                event.type,
                event.id,
                payment_id=record.payment_id,
                result="success",
                updated_range=result.updated_range,
            )
            return WebhookOutcome(
                event_id=event.id,
                event_type=event.type,
                processing_result="success",
                record=record,
            )

        error_msg = str(result.error) if result.error else f"Sink status {result.status.value}"
        log_webhook_event(
            logger,
            event.type,
            event.id,
            payment_id=record.payment_id,
            result="error",
            error=error_msg,
            sink_status=result.status.value,
        )
        return WebhookOutcome(
            event_id=event.id,
            event_type=event.type,
            processing_result="error",
            message=error_msg,
            record=record,
        )
