"""
View port abstraction: everything the renderer is allowed to touch.

The renderer never reaches for ambient UI objects. It receives a
:class:`ViewPort` and drives it through a handful of verbs that mirror the
elements of a browser page:

- the *artifact* (the image, inside its wrapper) with a source and colors,
- the *settings* panel shown next to a successful render,
- the *hint* element whose opacity depends on the selected function,
- the *error* element.

Two implementations ship with the package:

- :class:`MemoryViewPort` keeps a :class:`ViewState` record, which tests and
  headless callers inspect directly.
- :class:`ConsoleViewPort` does the same and reports changes to a terminal
  through ``rich``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel


@runtime_checkable
class ViewPort(Protocol):
    def set_source(self, ref: str) -> None: ...

    def set_colors(self, background: str, border: str) -> None: ...

    def set_hint_opacity(self, pct: int) -> None: ...

    def show_artifact(self) -> None: ...

    def hide_artifact(self) -> None: ...

    def show_settings(self) -> None: ...

    def hide_settings(self) -> None: ...

    def show_error(self, message: str) -> None: ...

    def clear_error(self) -> None: ...


@dataclass(slots=True)
class ViewState:
    """
    Observable state of the view.

    Attributes
    ----------
    source : str | None
        Reference to the displayed image (``file://`` or ``data:`` URI).
    background_color / border_color : str | None
        Colors applied to the image element.
    hint_opacity : int
        Opacity of the hint element, in percent.
    artifact_visible / settings_visible : bool
        Whether the image wrapper and the settings panel are shown.
    error_visible : bool
        Whether the error element is shown.
    error_text : str
        Text content of the error element.
    renders : int
        Number of successful renders applied so far.
    """

    source: str | None = None
    background_color: str | None = None
    border_color: str | None = None
    hint_opacity: int = 0
    artifact_visible: bool = False
    settings_visible: bool = False
    error_visible: bool = False
    error_text: str = ""
    renders: int = 0


class MemoryViewPort:
    """In-memory view port recording every change into :attr:`state`."""

    def __init__(self) -> None:
        self.state = ViewState()

    def set_source(self, ref: str) -> None:
        self.state.source = ref
        self.state.renders += 1

    def set_colors(self, background: str, border: str) -> None:
        self.state.background_color = background
        self.state.border_color = border

    def set_hint_opacity(self, pct: int) -> None:
        self.state.hint_opacity = pct

    def show_artifact(self) -> None:
        self.state.artifact_visible = True

    def hide_artifact(self) -> None:
        self.state.artifact_visible = False

    def show_settings(self) -> None:
        self.state.settings_visible = True

    def hide_settings(self) -> None:
        self.state.settings_visible = False

    def show_error(self, message: str) -> None:
        self.state.error_text = message
        self.state.error_visible = True

    def clear_error(self) -> None:
        self.state.error_visible = False


class ConsoleViewPort(MemoryViewPort):
    """Memory view port that also reports renders and errors on a console."""

    def __init__(self, console: Console | None = None) -> None:
        super().__init__()
        self.console = console or Console()

    def show_artifact(self) -> None:
        super().show_artifact()
        s = self.state
        hint = "  [dim](saddle hint shown)[/dim]" if s.hint_opacity else ""
        image = escape(_shorten(s.source or ""))
        if s.source and s.source.startswith("file:"):
            image = f"[link={s.source}]{image}[/link]"
        self.console.print(
            Panel(
                f"Image: {image}\n"
                f"Background: [bold]{escape(str(s.background_color))}[/bold]{hint}",
                title=f"Render #{s.renders}",
                border_style="green",
            )
        )

    def show_error(self, message: str) -> None:
        super().show_error(message)
        self.console.print(f"[bold red]❌ {escape(message)}[/bold red]")


def _shorten(ref: str, limit: int = 72) -> str:
    """Keep ``data:`` URIs readable on a terminal."""
    return ref if len(ref) <= limit else ref[: limit - 3] + "..."


__all__ = ["ConsoleViewPort", "MemoryViewPort", "ViewPort", "ViewState"]
