"""Body capture: drain a streamed message body, log it, replay it.

``capture`` is transport-agnostic: it drains any async iterable of byte
chunks into one owned buffer. The helpers below adapt an ASGI ``receive``
channel into such an iterable and build a replacement ``receive`` that serves
the captured buffer to the downstream application.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass, field

from starlette.requests import ClientDisconnect
from starlette.types import Message, Receive, Scope

from inspector.middleware.error_handler import BodyCaptureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedBody:
    """A fully drained body plus the head of the message it came from.

    The body is handed downstream exactly once: ``replay`` may be called a
    single time per capture.
    """

    body: bytes
    method: str | None = None
    target: str | None = None
    http_version: str | None = None
    headers: tuple[tuple[bytes, bytes], ...] = field(default=(), repr=False)
    _replayed: bool = field(default=False, init=False, repr=False, compare=False)

    def replay(self, receive: Receive) -> Receive:
        """Return a ``receive`` that yields the buffered body once.

        Subsequent calls are delegated to the original channel so that the
        downstream app still observes ``http.disconnect``.
        """
        if self._replayed:
            raise RuntimeError("captured body has already been replayed")
        object.__setattr__(self, "_replayed", True)

        delivered = False

        async def replayed() -> Message:
            nonlocal delivered
            if not delivered:
                delivered = True
                return {"type": "http.request", "body": self.body, "more_body": False}
            return await receive()

        return replayed


async def capture(
    direction: str,
    log_enabled: bool,
    chunks: AsyncIterable[bytes],
    *,
    level: int = logging.INFO,
) -> bytes:
    """Drain ``chunks`` into memory and return the concatenated bytes.

    Raises ``BodyCaptureError`` if the stream fails before it is exhausted;
    whatever was read up to that point is dropped.
    """
    buffer = bytearray()
    try:
        async for chunk in chunks:
            buffer.extend(chunk)
    except Exception as exc:
        raise BodyCaptureError(direction, exc) from exc

    body = bytes(buffer)
    if log_enabled:
        _log_body(direction, body, level)
    return body


def _log_body(direction: str, body: bytes, level: int) -> None:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        # Binary payloads are forwarded as-is but never logged.
        return
    logger.log(
        level,
        "%s body = %r",
        direction,
        text,
        extra={"event": "body_captured", "direction": direction, "body_bytes": len(body)},
    )


async def request_body_chunks(receive: Receive) -> AsyncIterator[bytes]:
    """Yield request body chunks from an ASGI ``receive`` channel."""
    while True:
        message = await receive()
        if message["type"] == "http.request":
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                return
        elif message["type"] == "http.disconnect":
            raise ClientDisconnect("client disconnected before the body was complete")


def request_target(scope: Scope) -> str:
    target = scope.get("path", "/")
    query = scope.get("query_string", b"")
    if query:
        target = f"{target}?{query.decode('latin-1')}"
    return target


async def capture_request(scope: Scope, receive: Receive, log_enabled: bool) -> CapturedBody:
    """Drain the request body of an HTTP scope and keep its head metadata."""
    body = await capture("request", log_enabled, request_body_chunks(receive))
    return CapturedBody(
        body=body,
        method=scope.get("method"),
        target=request_target(scope),
        http_version=scope.get("http_version", "1.1"),
        headers=tuple(scope.get("headers", ())),
    )
