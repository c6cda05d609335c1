"""Shared fixtures: a manual clock for the debouncer and a multipart decoder."""

from __future__ import annotations

import heapq
import re
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest


@dataclass(order=True)
class _ManualHandle:
    when: float
    seq: int
    callback: Callable[[], object] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimer:
    """Deterministic stand-in for ``loop.call_later``; time moves only on ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[_ManualHandle] = []
        self._seq = 0

    def call_later(self, delay: float, callback: Callable[[], object]) -> _ManualHandle:
        self._seq += 1
        handle = _ManualHandle(self.now + delay, self._seq, callback)
        heapq.heappush(self._queue, handle)
        return handle

    def advance(self, seconds: float) -> None:
        """Run every callback due within the next ``seconds``, in time order."""
        target = self.now + seconds
        while self._queue and self._queue[0].when <= target + 1e-9:
            handle = heapq.heappop(self._queue)
            self.now = handle.when
            if not handle.cancelled:
                handle.callback()
        self.now = target

    @property
    def scheduled(self) -> int:
        return sum(1 for h in self._queue if not h.cancelled)


@pytest.fixture  # type: ignore[misc]
def timer() -> ManualTimer:
    """A fresh manual clock starting at t=0."""
    return ManualTimer()


def parse_multipart(request: httpx.Request) -> dict[str, str]:
    """Decode a ``multipart/form-data`` request body into ``{name: value}``."""
    content_type = request.headers["content-type"]
    assert content_type.startswith("multipart/form-data"), content_type
    boundary = content_type.split("boundary=", 1)[1].strip('"').encode()

    fields: dict[str, str] = {}
    for part in request.read().split(b"--" + boundary):
        part = part.strip(b"\r\n")
        if not part or part.startswith(b"--"):
            continue
        headers, _, value = part.partition(b"\r\n\r\n")
        match = re.search(rb'name="([^"]+)"', headers)
        assert match is not None, headers
        fields[match.group(1).decode()] = value.decode()
    return fields
