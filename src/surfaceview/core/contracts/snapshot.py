"""Immutable capture of the form's named values at trigger time.

A snapshot is taken synchronously when a debounced trigger fires and travels
with its request all the way to the renderer. Rendering reads colors and the
selected function from the snapshot, never from the live form, so edits made
while a request is in flight cannot leak into the view of an older image.

Design Notes
------------
- **Immutability**: ``frozen=True``; values are stored as a tuple of pairs.
- **Ordering**: insertion order of the live form is preserved, which keeps the
  multipart body stable and readable in logs.
- **Mapping protocol**: snapshots behave like a read-only ``dict[str, str]``,
  including equality with plain mappings. Two snapshots compare equal only
  when their entries match in order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, eq=False)
class FormSnapshot(Mapping[str, str]):
    """
    Ordered, read-only mapping from field name to field value.

    Attributes
    ----------
    entries : tuple[tuple[str, str], ...]
        ``(name, value)`` pairs in form order. Names are unique.
    """

    entries: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        names = [name for name, _ in self.entries]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate field names in snapshot: {names!r}")

    @classmethod
    def of(cls, values: Mapping[str, object] | Iterable[tuple[str, object]]) -> FormSnapshot:
        """Build a snapshot from a mapping or pairs, coercing values to ``str``."""
        pairs = values.items() if isinstance(values, Mapping) else values
        merged: dict[str, str] = {}
        for name, value in pairs:
            merged[str(name)] = str(value)
        return cls(entries=tuple(merged.items()))

    def __getitem__(self, name: str) -> str:
        for key, value in self.entries:
            if key == name:
                return value
        raise KeyError(name)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FormSnapshot):
            return self.entries == other.entries
        return Mapping.__eq__(self, other)

    def __hash__(self) -> int:
        return hash(self.entries)

    def as_dict(self) -> dict[str, str]:
        """Return a mutable copy, e.g. for building a request body."""
        return dict(self.entries)


__all__ = ["FormSnapshot"]
