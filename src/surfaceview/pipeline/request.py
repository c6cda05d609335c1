# -----------------------------------------------------------------------------
# This module issues one draw request per fired trigger and turns whatever
# happens on the wire into a RequestOutcome:
#   - clears the view's error element before sending
#   - POSTs every snapshot field as multipart/form-data, no extra headers
#   - 2xx      → Success(payload bytes, snapshot, content type)
#   - non-2xx  → Failure(response body text)
#   - no reply → Failure(transport error description)
#
# The HTTP client is an injected `httpx.AsyncClient`, so tests can hand in a
# client built on `httpx.MockTransport` and never touch the network. No retry
# is attempted: each trigger stands on its own, and a superseded
# request is allowed to finish. Deciding whether its outcome is still wanted
# is the render controller's job.
# -----------------------------------------------------------------------------
from __future__ import annotations

import httpx

from surfaceview.core.contracts.snapshot import FormSnapshot
from surfaceview.core.errors import ServiceError, TransportError
from surfaceview.core.result import RequestOutcome, failure, success
from surfaceview.core.settings import get_logger
from surfaceview.render.viewport import ViewPort

logger = get_logger("surfaceview.pipeline")


class RequestPipeline:
    """Submit form snapshots to the image service.

    Parameters
    ----------
    client:
        Async HTTP client used for every request. The pipeline does not own
        it; callers close it.
    endpoint:
        Fully-qualified URL of the draw endpoint.
    viewport:
        Optional view whose error element is cleared when a request starts.
    timeout:
        Optional per-request timeout in seconds. ``None`` keeps the client's
        own timeout configuration.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        *,
        viewport: ViewPort | None = None,
        timeout: float | None = None,
    ) -> None:
        self.client = client
        self.endpoint = endpoint
        self.viewport = viewport
        self.timeout = timeout

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    async def submit(self, snapshot: FormSnapshot) -> RequestOutcome:
        """Send ``snapshot`` to the service and return the outcome.

        Never raises for transport or service failures; both are reported as
        :class:`~surfaceview.core.result.Failure` with a readable message.
        """
        if self.viewport is not None:
            self.viewport.clear_error()

        try:
            response = await self._post(snapshot)
        except (TransportError, ServiceError) as exc:
            logger.warning("draw request failed: %s", exc)
            return failure(str(exc))

        content_type = response.headers.get("content-type")
        logger.info(
            "draw request ok: %d bytes, content-type=%s", len(response.content), content_type
        )
        return success(response.content, snapshot, content_type)

    # --------------------------------------------------------------------- #
    # Internal helpers (test seams)
    # --------------------------------------------------------------------- #
    async def _post(self, snapshot: FormSnapshot) -> httpx.Response:
        """POST ``snapshot`` as multipart form data.

        Raises
        ------
        TransportError
            If no HTTP response was received (connection, DNS, timeout).
        ServiceError
            If the service answered with a non-2xx status.
        """
        # (None, value) parts are plain form fields: no filename, no content type.
        parts = {name: (None, value) for name, value in snapshot.items()}
        logger.debug("POST %s fields=%s", self.endpoint, list(parts))

        kwargs: dict[str, float] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        try:
            response = await self.client.post(self.endpoint, files=parts, **kwargs)
        except httpx.RequestError as exc:
            raise TransportError(describe_transport_error(exc)) from exc

        if not response.is_success:
            raise ServiceError(response.status_code, response.text)
        return response


def describe_transport_error(exc: httpx.RequestError) -> str:
    """Return a human-readable description of a transport failure."""
    detail = str(exc).strip()
    kind = type(exc).__name__
    return f"{kind}: {detail}" if detail else kind


__all__ = ["RequestPipeline", "describe_transport_error"]
