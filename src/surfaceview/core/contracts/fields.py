"""Known form fields of the surface-plot image service and their defaults.

The service accepts a small, fixed parameter set describing the plot canvas,
the sampling grid, the color ramp and the surface function. Anything else is
rejected by the service itself; the client never validates values and only
uses this model to seed a fresh form.

Two fields also drive the client-side view:

- ``background``: applied as the image's background and border color.
- ``func``: when it equals :data:`SADDLE`, a hint is faded in next to the plot.
"""

from __future__ import annotations

from typing import Annotated, Final, Literal

from pydantic import BaseModel, Field

SurfaceFunction = Literal["schaffer", "eggbox", "sinc", "moguls", "saddle"]

FUNCTIONS: Final[tuple[str, ...]] = ("schaffer", "eggbox", "sinc", "moguls", "saddle")
SADDLE: Final[str] = "saddle"

HexColor = Annotated[
    str,
    Field(pattern=r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$", description="CSS hex color"),
]


class SurfaceFields(BaseModel):
    """Default parameter set for a new form."""

    width: int = Field(default=600, gt=0, description="Canvas width in pixels")
    height: int = Field(default=320, gt=0, description="Canvas height in pixels")
    cells: int = Field(default=100, gt=0, description="Number of grid cells per axis")
    xyrange: float = Field(default=30.0, gt=0, description="Axis range (-xyrange..+xyrange)")
    lowest: HexColor = Field(default="#0000ff", description="Color of the lowest points")
    highest: HexColor = Field(default="#ff0000", description="Color of the highest points")
    func: SurfaceFunction = Field(default="schaffer", description="Surface function")
    background: HexColor = Field(default="#ffffff", description="Image background color")

    def to_fields(self) -> dict[str, str]:
        """Return the field values as strings, in declaration order."""
        out: dict[str, str] = {}
        for name, value in self.model_dump().items():
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            out[name] = str(value)
        return out


__all__ = ["FUNCTIONS", "SADDLE", "HexColor", "SurfaceFields", "SurfaceFunction"]
