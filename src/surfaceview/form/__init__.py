from __future__ import annotations

from .live import InputListener, LiveForm

__all__ = ["InputListener", "LiveForm"]
