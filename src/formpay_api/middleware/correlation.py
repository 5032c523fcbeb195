"""Correlation ID middleware for request tracing.

Extracts X-Correlation-ID header from incoming requests or generates a new one,
makes it available through contextvars for the lifetime of the request, echoes
it on the response and logs one access line per request.

Implemented as plain ASGI so the request body stream reaches the webhook
route untouched.
"""

import logging
import time

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from formpay.utils.logging import clear_correlation_id, get_logger, set_correlation_id

CORRELATION_ID_HEADER = "X-Correlation-ID"

logger = get_logger(__name__)


class CorrelationIdMiddleware:
    """Middleware that manages correlation IDs for request tracing."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming_id = Headers(scope=scope).get(CORRELATION_ID_HEADER)
        correlation_id = set_correlation_id(incoming_id)

        start = time.perf_counter()
        status = {"code": 500}

        async def send_with_correlation_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                status["code"] = message["status"]
                MutableHeaders(scope=message)[CORRELATION_ID_HEADER] = correlation_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_correlation_id)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.log(
                logging.WARNING if status["code"] >= 500 else logging.INFO,
                "%s %s -> %d (%.1f ms)",
                scope.get("method", "-"),
                scope.get("path", "-"),
                status["code"],
                elapsed_ms,
            )
            clear_correlation_id()
