"""
Viewer: wires form, debouncer, pipeline and renderer together.

This module plays the part of the page script. It is responsible for:
1.  **Startup**: one request fires immediately with whatever the form holds.
2.  **Input**: every form edit is forwarded to the debouncer.
3.  **Triggers**: when the debouncer fires, the snapshot is captured
    synchronously, a ticket is taken from the render controller, and an
    asyncio task sends the request and renders its outcome.
4.  **Shutdown**: pending triggers are dropped, in-flight requests are
    awaited, and the last artifact file is released.

Requests are never cancelled; overlapping tasks are tracked only so that
:meth:`SurfaceViewer.wait_idle` and :meth:`SurfaceViewer.aclose` can await them.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx

from surfaceview.core.contracts.snapshot import FormSnapshot
from surfaceview.core.settings import Settings, get_logger
from surfaceview.form.live import LiveForm
from surfaceview.pipeline.request import RequestPipeline
from surfaceview.render.artifact import ArtifactStore
from surfaceview.render.controller import RenderController
from surfaceview.render.viewport import ViewPort
from surfaceview.scheduler.debounce import DebouncedTask, Timer

logger = get_logger("surfaceview.viewer")


class SurfaceViewer:
    """
    Event-loop bound coordinator for one form and one view.

    Parameters
    ----------
    form:
        The live form whose edits drive requests.
    pipeline:
        Request pipeline used for every trigger.
    controller:
        Render controller that owns the view.
    delay:
        Debounce quiet period in seconds.
    timer:
        Optional timer for the debouncer. Defaults to the running event loop,
        resolved lazily on :meth:`start`.
    """

    def __init__(
        self,
        form: LiveForm,
        pipeline: RequestPipeline,
        controller: RenderController,
        *,
        delay: float = 1.0,
        timer: Timer | None = None,
    ) -> None:
        self.form = form
        self.pipeline = pipeline
        self.controller = controller
        self.delay = delay
        self._timer = timer
        self._debouncer: DebouncedTask | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self.triggers = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        form: LiveForm,
        viewport: ViewPort,
        client: httpx.AsyncClient,
        *,
        timer: Timer | None = None,
    ) -> SurfaceViewer:
        """Build the full stack from configuration."""
        pipeline = RequestPipeline(
            client,
            settings.endpoint,
            viewport=viewport,
            timeout=settings.timeout_seconds,
        )
        controller = RenderController(
            viewport,
            artifacts=ArtifactStore(settings.artifact_dir),
            policy=settings.render_policy,
        )
        return cls(form, pipeline, controller, delay=settings.debounce_seconds, timer=timer)

    # ----- Lifecycle ---------------------------------------------------------
    @property
    def debouncer(self) -> DebouncedTask:
        if self._debouncer is None:
            raise RuntimeError("viewer not started")
        return self._debouncer

    def start(self) -> None:
        """Listen to the form and fire the initial request right away.

        Must be called from inside a running event loop.
        """
        if self._debouncer is not None:
            raise RuntimeError("viewer already started")
        timer = self._timer if self._timer is not None else asyncio.get_running_loop()
        self._debouncer = DebouncedTask(self.trigger, delay=self.delay, timer=timer)
        self._unsubscribe = self.form.subscribe(self._on_input)
        logger.info("viewer started, endpoint=%s", self.pipeline.endpoint)
        self._debouncer.fire_now()

    async def wait_idle(self) -> None:
        """Wait until every request dispatched so far has been rendered."""
        while pending := [task for task in self._tasks if not task.done()]:
            await asyncio.gather(*pending)

    async def aclose(self) -> None:
        """Stop listening, drop pending triggers and finish in-flight requests."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._debouncer is not None:
            self._debouncer.cancel()
        await self.wait_idle()
        self.controller.artifacts.release()

    async def __aenter__(self) -> SurfaceViewer:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ----- Events ------------------------------------------------------------
    def notify_change(self) -> None:
        """Forward a raw input event to the debouncer."""
        self.debouncer.notify_change()

    def trigger(self) -> None:
        """Capture the form and dispatch one request for it."""
        snapshot = self.form.capture_snapshot()
        ticket = self.controller.begin()
        self.triggers += 1
        logger.debug("trigger #%d dispatched with %d fields", ticket, len(snapshot))
        task = asyncio.get_running_loop().create_task(self._fetch_and_render(snapshot, ticket))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _on_input(self, name: str) -> None:
        logger.debug("input on field %r", name)
        self.notify_change()

    async def _fetch_and_render(self, snapshot: FormSnapshot, ticket: int) -> None:
        outcome = await self.pipeline.submit(snapshot)
        self.controller.on_outcome(outcome, ticket=ticket)


__all__ = ["SurfaceViewer"]
