"""Turn an image payload into a reference a view can display.

This plays the role of ``URL.createObjectURL``. Two modes exist:

- **Directory mode** (``directory`` given): the payload is written to
  ``surface-<n><ext>`` and a ``file://`` URI is returned. The previous file is
  removed at the same time, so at most one rendered image lives on disk.
- **Inline mode** (no directory): a ``data:<type>;base64,...`` URI is returned
  and nothing touches the filesystem.

Usage
-----
>>> store = ArtifactStore()
>>> store.materialize(b"<svg/>", "image/svg+xml")[:26]
'data:image/svg+xml;base64,'
"""

from __future__ import annotations

import base64
from pathlib import Path

from surfaceview.core.settings import get_logger

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_EXTENSIONS: dict[str, str] = {
    "image/svg+xml": ".svg",
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

logger = get_logger("surfaceview.render")


def extension_for(content_type: str | None) -> str:
    """Return a file extension for ``content_type``, ignoring parameters."""
    if not content_type:
        return ".bin"
    media_type = content_type.split(";", 1)[0].strip().lower()
    return _EXTENSIONS.get(media_type, ".bin")


class ArtifactStore:
    """Materialize payloads as displayable references."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory
        self.current: Path | None = None
        self._counter = 0
        if directory is not None:
            directory.mkdir(parents=True, exist_ok=True)

    def materialize(self, payload: bytes, content_type: str | None = None) -> str:
        """Return a URI for ``payload``, replacing the previous artifact."""
        if self.directory is None:
            media_type = (content_type or DEFAULT_CONTENT_TYPE).split(";", 1)[0].strip()
            encoded = base64.b64encode(payload).decode("ascii")
            return f"data:{media_type};base64,{encoded}"

        self._counter += 1
        path = self.directory / f"surface-{self._counter}{extension_for(content_type)}"
        path.write_bytes(payload)
        self.release()
        self.current = path
        logger.debug("materialized %d bytes at %s", len(payload), path)
        return path.resolve().as_uri()

    def release(self) -> None:
        """Remove the current artifact file, if any."""
        if self.current is not None:
            self.current.unlink(missing_ok=True)
            self.current = None


__all__ = ["ArtifactStore", "extension_for"]
