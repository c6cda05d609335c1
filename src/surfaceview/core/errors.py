"""Error taxonomy for talking to the image service.

Two failure families exist on the wire:

- `TransportError`: the request never produced an HTTP response
  (connection refused, DNS failure, timeout).
- `ServiceError`: the service answered with a non-2xx status and a plain-text
  body describing the problem.

Both are raised only inside the request pipeline. At its boundary they are
collapsed into a single :class:`~surfaceview.core.result.Failure` carrying the
human-readable message, so nothing downstream needs to tell them apart.
"""

from __future__ import annotations


class SurfaceViewError(RuntimeError):
    """Base class for all SurfaceView errors."""


class TransportError(SurfaceViewError):
    """The request could not be delivered or no response arrived in time."""


class ServiceError(SurfaceViewError):
    """The image service rejected the request with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(body)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        return self.body


__all__ = ["ServiceError", "SurfaceViewError", "TransportError"]
