"""Shared test fixtures, ASGI helpers and hypothesis strategies."""

from __future__ import annotations

import os
from collections.abc import Callable

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import Response
from hypothesis import strategies as st
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from inspector.config.settings import InspectorSettings
from inspector.main import build_api, compose_layers


# ---------------------------------------------------------------------------
# Keep the environment from leaking into InspectorSettings
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Drop INSPECTOR_* variables and run from a directory without a .env file."""
    for key in list(os.environ):
        if key.startswith("INSPECTOR_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Settings and application fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> InspectorSettings:
    """Default settings: body logging on, INFO verbosity."""
    return InspectorSettings()


@pytest.fixture
def debug_settings() -> InspectorSettings:
    """Body logging on at DEBUG, so responses are captured too."""
    return InspectorSettings(log_level="DEBUG", log_body=True)


def make_layered_app(
    settings: InspectorSettings,
    extra_routes: Callable[[FastAPI], None] | None = None,
) -> ASGIApp:
    """Build the full layer stack, optionally with test-only routes."""
    api = build_api(settings)
    if extra_routes is not None:
        extra_routes(api)
    return compose_layers(api, settings)


def add_echo_route(api: FastAPI) -> None:
    """POST /echo returns the request body exactly as the handler saw it."""

    @api.post("/echo")
    async def echo(request: Request) -> Response:
        return Response(content=await request.body(), media_type="application/octet-stream")


# ---------------------------------------------------------------------------
# Raw ASGI helpers
# ---------------------------------------------------------------------------

def http_scope(method: str = "POST", path: str = "/echo", query_string: bytes = b"") -> Scope:
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "query_string": query_string,
        "headers": [(b"host", b"testserver")],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }


class SentinelReceive:
    """ASGI ``receive`` that serves a fixed list of messages and counts reads."""

    def __init__(self, messages: list[Message]) -> None:
        self._messages = list(messages)
        self.reads = 0

    async def __call__(self) -> Message:
        self.reads += 1
        if self._messages:
            return self._messages.pop(0)
        return {"type": "http.disconnect"}


class RecordingSend:
    """ASGI ``send`` that keeps every message it is given."""

    def __init__(self) -> None:
        self.messages: list[Message] = []

    async def __call__(self, message: Message) -> None:
        self.messages.append(message)

    @property
    def status(self) -> int:
        return self.messages[0]["status"]

    @property
    def body(self) -> bytes:
        return b"".join(
            m.get("body", b"") for m in self.messages if m["type"] == "http.response.body"
        )


def body_messages(*chunks: bytes) -> list[Message]:
    """Split a request body into ``http.request`` messages."""
    if not chunks:
        return [{"type": "http.request", "body": b"", "more_body": False}]
    return [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks)
    ]


def streaming_app(response_messages: list[Message], seen: list[bytes]) -> ASGIApp:
    """Downstream app: reads the whole request body, then sends ``response_messages``."""

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        body = b""
        while True:
            message = await receive()
            body += message.get("body", b"")
            if not message.get("more_body", False):
                break
        seen.append(body)
        for message in response_messages:
            await send(message)

    return app


# ---------------------------------------------------------------------------
# Hypothesis strategies (reusable across property tests)
# ---------------------------------------------------------------------------

# Arbitrary bodies, including invalid UTF-8
binary_bodies = st.binary(min_size=0, max_size=4096)

# The same body split into arbitrary chunk boundaries
chunked_bodies = st.lists(st.binary(min_size=0, max_size=256), min_size=0, max_size=16)

page_sizes = st.integers(min_value=0, max_value=200)
pages = st.integers(min_value=0, max_value=10_000)
