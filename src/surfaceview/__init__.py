"""SurfaceView: a debounced client for a surface-plot image service.

Edits to a live form are coalesced by a debouncer, sent to the image service
as multipart form data, and the resulting image is rendered through a
pluggable view port.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
