"""
Live, mutable form with input-event notification.

This is the Python stand-in for an HTML ``<form>``: an ordered set of named
string fields that the user edits one at a time. Every edit emits an *input
event* to subscribers, exactly like the browser fires ``input`` on each
keystroke, whether or not the value actually changed.

The form is the only source of :class:`FormSnapshot` objects.
``capture_snapshot()`` copies the current values atomically; the snapshot is
then independent of any later edits.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from surfaceview.core.contracts.fields import SurfaceFields
from surfaceview.core.contracts.snapshot import FormSnapshot

InputListener = Callable[[str], None]


class LiveForm:
    """
    Ordered field store that notifies listeners on every edit.

    Attributes
    ----------
    _values : dict[str, str]
        Current field values in insertion order.
    _listeners : list[InputListener]
        Callbacks invoked with the edited field's name.
    """

    def __init__(self, fields: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, str] = {}
        self._listeners: list[InputListener] = []
        for name, value in (fields or {}).items():
            self._values[str(name)] = str(value)

    @classmethod
    def with_defaults(cls, **overrides: Any) -> LiveForm:
        """Create a form seeded from :class:`SurfaceFields`, then apply overrides."""
        values: dict[str, Any] = SurfaceFields().to_fields()
        values.update(overrides)
        return cls(values)

    # ----- Reads -------------------------------------------------------------
    def get(self, name: str, default: str | None = None) -> str | None:
        return self._values.get(name, default)

    def names(self) -> list[str]:
        return list(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def capture_snapshot(self) -> FormSnapshot:
        """Return an immutable copy of every named field as it is right now."""
        return FormSnapshot(entries=tuple(self._values.items()))

    # ----- Edits -------------------------------------------------------------
    def set(self, name: str, value: Any) -> None:
        """Set one field and emit an input event."""
        self._values[name] = str(value)
        self._emit(name)

    def update(self, values: Mapping[str, Any]) -> None:
        """Set several fields; one input event is emitted per field."""
        for name, value in values.items():
            self.set(name, value)

    def remove(self, name: str) -> None:
        """Delete a field and emit an input event. Unknown names are ignored."""
        if self._values.pop(name, None) is not None:
            self._emit(name)

    # ----- Events ------------------------------------------------------------
    def subscribe(self, listener: InputListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, name: str) -> None:
        for listener in list(self._listeners):
            listener(name)


__all__ = ["InputListener", "LiveForm"]
