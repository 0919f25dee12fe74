"""Request/response inspection middleware.

Runs three strictly ordered stages for every HTTP request:

1. Drain the request body, log it (when enabled) together with the request
   line, and hand the downstream app a replayed body.
2. Await the downstream app.
3. When body logging is enabled and the process runs at DEBUG, buffer the
   response, log its body at DEBUG and send it on as a single chunk.
   Otherwise the response is streamed through without being read.

Written as a pure ASGI middleware so that an unread response keeps its
original chunking and backpressure.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from inspector.config.settings import InspectionConfig
from inspector.middleware.body_capture import capture, capture_request
from inspector.middleware.error_handler import BodyCaptureError, _envelope

logger = logging.getLogger(__name__)


class _ResponseRecorder:
    """ASGI ``send`` stand-in that buffers one response."""

    def __init__(self) -> None:
        self.start: Message | None = None
        self._chunks: list[bytes] = []
        self._complete = False
        self._error: BaseException | None = None

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.start = message
        elif message["type"] == "http.response.body":
            self._chunks.append(message.get("body", b""))
            if not message.get("more_body", False):
                self._complete = True

    def fail(self, exc: BaseException) -> None:
        self._error = exc

    async def body_chunks(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error
        if not self._complete:
            raise RuntimeError("response ended before its final body chunk")


class InspectionMiddleware:
    """ASGI middleware that captures and logs request and response bodies.

    The request line (method, target, HTTP version) is always logged at INFO.
    Bodies are logged only when ``config.log_enabled`` is set; response
    bodies additionally require ``config.verbosity`` at DEBUG.
    """

    def __init__(self, app: ASGIApp, config: InspectionConfig | None = None) -> None:
        self.app = app
        self.config = config or InspectionConfig()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            captured = await capture_request(scope, receive, self.config.log_enabled)
        except BodyCaptureError as exc:
            logger.warning(
                "Request body capture failed: %s",
                exc.cause,
                extra={"event": "capture_failed", "direction": exc.direction},
            )
            await _envelope(exc.status_code, exc.message)(scope, receive, send)
            return

        logger.info(
            "req method = %s, uri = %s, version = HTTP/%s",
            captured.method,
            captured.target,
            captured.http_version,
            extra={
                "event": "request_received",
                "method": captured.method,
                "path": captured.target,
                "http_version": captured.http_version,
            },
        )
        replayed = captured.replay(receive)

        if not self.config.capture_responses:
            await self.app(scope, replayed, send)
            return

        await self._dispatch_captured(scope, replayed, send)

    async def _dispatch_captured(self, scope: Scope, receive: Receive, send: Send) -> None:
        recorder = _ResponseRecorder()
        try:
            await self.app(scope, receive, recorder)
        except Exception as exc:
            if recorder.start is None:
                raise
            recorder.fail(exc)

        if recorder.start is None:
            raise RuntimeError("No response returned.")

        try:
            body = await capture("response", True, recorder.body_chunks(), level=logging.DEBUG)
        except BodyCaptureError as exc:
            logger.error(
                "Response body capture failed: %s",
                exc.cause,
                exc_info=exc.cause,
                extra={"event": "capture_failed", "direction": exc.direction},
            )
            await _envelope(exc.status_code, exc.message)(scope, receive, send)
            return

        headers = MutableHeaders(raw=list(recorder.start.get("headers", [])))
        if "content-length" in headers:
            headers["content-length"] = str(len(body))
        await send({**recorder.start, "headers": headers.raw})
        await send({"type": "http.response.body", "body": body, "more_body": False})
