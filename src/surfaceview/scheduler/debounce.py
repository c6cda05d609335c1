"""
Generation-counted debouncer.

A burst of change notifications collapses into one delayed call of the
wrapped action. Each ``notify_change()`` bumps a generation counter and
schedules an expiry callback that remembers the generation it was scheduled
with. When the delay runs out, the callback compares its captured generation
with the current one:

- equal: nothing happened since, so the counter is reset to ``0`` and the
  action runs;
- different: a later notification superseded this one, so it does nothing.

Superseded timers are left to expire on their own; the comparison makes them
harmless. Only the most recent handle is kept so that ``cancel()`` can stop
the one trigger that would still fire; ``cancel()`` also bumps an epoch so
that superseded timers scheduled before it stay inert once the counter
starts again from zero.

The timer is injected. Anything with ``call_later(delay, callback)`` works,
which includes every ``asyncio`` event loop and the manual clock used in the
tests.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from surfaceview.core.settings import get_logger

NEUTRAL_GENERATION = 0

logger = get_logger("surfaceview.scheduler")


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Timer(Protocol):
    """Minimal timer interface; satisfied by ``asyncio.AbstractEventLoop``."""

    def call_later(self, delay: float, callback: Callable[[], object]) -> Cancellable: ...


class DebouncedTask:
    """
    Run ``action`` once, ``delay`` seconds after the last ``notify_change()``.

    Parameters
    ----------
    action:
        Zero-argument callable invoked when a trigger fires.
    delay:
        Quiet period in seconds.
    timer:
        Scheduler used for the delayed expiry callbacks.
    """

    def __init__(self, action: Callable[[], None], *, delay: float, timer: Timer) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self._action = action
        self._delay = delay
        self._timer = timer
        self._generation = NEUTRAL_GENERATION
        self._epoch = 0
        self._handle: Cancellable | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a scheduled trigger has not been superseded or fired."""
        return self._generation != NEUTRAL_GENERATION

    def notify_change(self) -> None:
        """Record a change and (re)start the quiet period."""
        self._generation += 1
        captured, epoch = self._generation, self._epoch
        logger.debug("change noted, generation=%d", captured)
        self._handle = self._timer.call_later(
            self._delay, lambda: self._expire(captured, epoch)
        )

    def fire_now(self) -> None:
        """Run the action immediately, bypassing the quiet period."""
        logger.debug("firing immediately")
        self._action()

    def cancel(self) -> None:
        """Drop every scheduled trigger, including superseded ones."""
        self._epoch += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._generation = NEUTRAL_GENERATION

    def _expire(self, captured: int, epoch: int) -> None:
        if epoch != self._epoch:
            return
        if captured != self._generation:
            logger.debug(
                "trigger for generation %d superseded by %d", captured, self._generation
            )
            return
        self._generation = NEUTRAL_GENERATION
        self._handle = None
        logger.debug("trigger for generation %d fired", captured)
        self._action()


__all__ = ["Cancellable", "DebouncedTask", "NEUTRAL_GENERATION", "Timer"]
