from __future__ import annotations

from .debounce import Cancellable, DebouncedTask, Timer

__all__ = ["Cancellable", "DebouncedTask", "Timer"]
