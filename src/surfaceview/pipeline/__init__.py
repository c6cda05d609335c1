from __future__ import annotations

from .request import RequestPipeline

__all__ = ["RequestPipeline"]
