from __future__ import annotations

from .fields import FUNCTIONS, SADDLE, SurfaceFields
from .snapshot import FormSnapshot

__all__ = ["FUNCTIONS", "SADDLE", "FormSnapshot", "SurfaceFields"]
