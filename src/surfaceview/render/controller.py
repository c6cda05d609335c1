"""
Render controller: applies request outcomes to a view port.

Responsibilities
----------------
- **Success**: materialize the image, point the view at it, paint the
  background and border with the snapshot's ``background`` value, fade the
  saddle hint in or out, and reveal the image and settings panel.
- **Failure**: hide the image and settings panel and show the message.
- **Staleness**: every dispatched request gets a ticket from :meth:`begin`.
  Under the default ``"arrival"`` policy every outcome is rendered in the
  order it arrives, so the last response to arrive wins even when it belongs
  to an older request. The ``"latest"`` policy renders only the outcome
  carrying the most recently dispatched ticket, so a slow, older response
  can no longer overwrite a newer one.

State machine
-------------
``IDLE`` -> ``AWAITING_RESULT`` on :meth:`begin`, back to ``IDLE`` once every
dispatched request has delivered its outcome. Overlapping requests are
allowed; the controller only counts them.
"""

from __future__ import annotations

from enum import Enum

from surfaceview.core.contracts.fields import SADDLE
from surfaceview.core.result import Failure, RequestOutcome, Success, never
from surfaceview.core.settings import RenderPolicy, get_logger

from .artifact import ArtifactStore
from .viewport import ViewPort

SADDLE_HINT_OPACITY = 25
HIDDEN_HINT_OPACITY = 0

logger = get_logger("surfaceview.render")


class RenderState(str, Enum):
    """Lifecycle of the controller with respect to outstanding requests."""

    IDLE = "idle"
    AWAITING_RESULT = "awaiting_result"


def hint_opacity_for(func: str | None) -> int:
    """Return the hint opacity (percent) for the selected surface function."""
    return SADDLE_HINT_OPACITY if func == SADDLE else HIDDEN_HINT_OPACITY


class RenderController:
    """
    Drive a :class:`ViewPort` from :class:`RequestOutcome` values.

    Parameters
    ----------
    viewport:
        The view to mutate. Nothing else in the package writes to it, apart
        from the request pipeline clearing the error element.
    artifacts:
        Store used to turn payloads into displayable references. Defaults to
        inline ``data:`` URIs.
    policy:
        ``"arrival"`` (default) or ``"latest"``; see the module docstring.
    """

    def __init__(
        self,
        viewport: ViewPort,
        *,
        artifacts: ArtifactStore | None = None,
        policy: RenderPolicy = "arrival",
    ) -> None:
        if policy not in ("latest", "arrival"):
            raise ValueError(f"unknown render policy: {policy!r}")
        self.viewport = viewport
        self.artifacts = artifacts or ArtifactStore()
        self.policy: RenderPolicy = policy
        self._last_ticket = 0
        self._in_flight = 0

    @property
    def state(self) -> RenderState:
        return RenderState.AWAITING_RESULT if self._in_flight else RenderState.IDLE

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def last_ticket(self) -> int:
        return self._last_ticket

    def begin(self) -> int:
        """Register a dispatched request and return its ticket."""
        self._last_ticket += 1
        self._in_flight += 1
        return self._last_ticket

    def is_stale(self, ticket: int | None) -> bool:
        """True if an outcome with ``ticket`` must not be rendered."""
        if ticket is None or self.policy == "arrival":
            return False
        return ticket != self._last_ticket

    def on_outcome(self, outcome: RequestOutcome, ticket: int | None = None) -> bool:
        """Apply ``outcome`` to the view.

        Returns
        -------
        bool
            ``True`` if the view was updated, ``False`` if the outcome was
            dropped as stale.
        """
        if ticket is not None and self._in_flight:
            self._in_flight -= 1

        if self.is_stale(ticket):
            logger.info("dropping stale outcome #%s (latest is #%d)", ticket, self._last_ticket)
            return False

        if isinstance(outcome, Success):
            self._render_success(outcome)
        elif isinstance(outcome, Failure):
            self._render_failure(outcome.message)
        else:
            never(f"unknown outcome type: {outcome!r}")
        return True

    # ----- Internals ---------------------------------------------------------
    def _render_success(self, outcome: Success) -> None:
        try:
            ref = self.artifacts.materialize(outcome.payload, outcome.content_type)
        except OSError as exc:
            self._render_failure(f"Could not store image: {exc}")
            return

        snapshot = outcome.snapshot
        view = self.viewport
        view.set_source(ref)
        background = snapshot.get("background")
        if background is not None:
            view.set_colors(background, background)
        view.set_hint_opacity(hint_opacity_for(snapshot.get("func")))
        view.show_artifact()
        view.show_settings()
        logger.info("rendered %d bytes (%s)", len(outcome.payload), outcome.content_type)

    def _render_failure(self, message: str) -> None:
        view = self.viewport
        view.hide_artifact()
        view.hide_settings()
        view.show_error(message)
        logger.warning("render failed: %s", message)


__all__ = ["RenderController", "RenderState", "hint_opacity_for"]
