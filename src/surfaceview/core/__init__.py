"""Core building blocks for SurfaceView.

Settings, the error taxonomy, the request outcome sum type and the data
contracts shared by the form, pipeline and render layers live here.
"""

from __future__ import annotations

__all__ = ["__doc__"]
