"""Tests for the request pipeline against an in-process mock transport.

No real network I/O happens: every client is built on `httpx.MockTransport`,
whose handler records the request and returns a canned response.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import httpx
from conftest import parse_multipart

from surfaceview.core.contracts.snapshot import FormSnapshot
from surfaceview.core.result import Failure, RequestOutcome, Success
from surfaceview.pipeline.request import RequestPipeline, describe_transport_error
from surfaceview.render.viewport import MemoryViewPort

ENDPOINT = "http://plots.test/draw"
SVG = b"<svg xmlns='http://www.w3.org/2000/svg'></svg>"

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


def _submit(
    handler: Handler,
    snapshot: FormSnapshot,
    viewport: MemoryViewPort | None = None,
) -> RequestOutcome:
    async def scenario() -> RequestOutcome:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            pipeline = RequestPipeline(client, ENDPOINT, viewport=viewport, timeout=5.0)
            return await pipeline.submit(snapshot)

    return asyncio.run(scenario())


def test_request_body_carries_every_field() -> None:
    """All snapshot fields travel as multipart parts with their exact values."""
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["fields"] = parse_multipart(request)
        return httpx.Response(200, content=SVG, headers={"content-type": "image/svg+xml"})

    snap = FormSnapshot.of({"background": "#ff0000", "func": "saddle", "x": "3"})
    _submit(handler, snap)

    assert captured["method"] == "POST"
    assert captured["url"] == ENDPOINT
    assert captured["fields"] == {"background": "#ff0000", "func": "saddle", "x": "3"}


def test_success_returns_payload_with_its_snapshot() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=SVG, headers={"content-type": "image/svg+xml"})

    snap = FormSnapshot.of({"func": "sinc"})
    out = _submit(handler, snap)

    assert isinstance(out, Success)
    assert out.payload == SVG
    assert out.snapshot is snap
    assert out.content_type == "image/svg+xml"


def test_non_2xx_becomes_failure_with_body_text() -> None:
    """A service error surfaces the plain-text body as the failure message."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="bad request")

    out = _submit(handler, FormSnapshot.of({"func": "nope"}))

    assert isinstance(out, Failure)
    assert out.message == "bad request"


def test_server_error_also_collapses_to_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text='parameter "width" value should be an integer\n')

    out = _submit(handler, FormSnapshot.of({"width": "wide"}))
    assert out.unwrap_failure().startswith('parameter "width"')


def test_transport_failure_becomes_failure_with_description() -> None:
    """Connection errors never escape `submit()`."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    out = _submit(handler, FormSnapshot.of({"func": "sinc"}))

    assert isinstance(out, Failure)
    assert "connection refused" in out.message
    assert out.message.startswith("ConnectError")


def test_timeout_becomes_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("", request=request)

    out = _submit(handler, FormSnapshot.of({}))
    assert out.unwrap_failure() == "ReadTimeout"


def test_error_state_cleared_before_request_is_sent() -> None:
    """Step one of every submit hides the previous error."""
    view = MemoryViewPort()
    view.show_error("old failure")
    seen_visible: list[bool] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_visible.append(view.state.error_visible)
        return httpx.Response(503, text="busy")

    out = _submit(handler, FormSnapshot.of({"func": "sinc"}), viewport=view)

    assert seen_visible == [False]
    # The pipeline only clears; showing the new error is the renderer's job.
    assert out.unwrap_failure() == "busy"
    assert view.state.error_visible is False


def test_describe_transport_error_prefers_detail() -> None:
    request = httpx.Request("POST", ENDPOINT)
    assert describe_transport_error(httpx.ConnectError("dns", request=request)) == (
        "ConnectError: dns"
    )
