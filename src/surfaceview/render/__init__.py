from __future__ import annotations

from .artifact import ArtifactStore
from .controller import RenderController, RenderState
from .viewport import ConsoleViewPort, MemoryViewPort, ViewPort, ViewState

__all__ = [
    "ArtifactStore",
    "ConsoleViewPort",
    "MemoryViewPort",
    "RenderController",
    "RenderState",
    "ViewPort",
    "ViewState",
]
