"""Typed outcome of one draw request, with explicit success/failure variants.

Motivation
----------
The request pipeline never raises past its own boundary. Instead every fired
trigger produces exactly one :class:`RequestOutcome`, which the renderer
consumes exactly once. This module provides:
- `Success(payload, snapshot, content_type)` / `Failure(message)` variants,
- introspection: `is_success`, `is_failure`,
- unwraps: `unwrap`, `unwrap_failure`, `message_or`,
- a combinator: `map_message` for rewording failures.

Example
-------
>>> from surfaceview.core.contracts.snapshot import FormSnapshot
>>> out = success(b"<svg/>", FormSnapshot.of({"func": "sinc"}), "image/svg+xml")
>>> out.unwrap().payload
b'<svg/>'
>>> failure("bad request").message_or("")
'bad request'
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import NoReturn

from .contracts.snapshot import FormSnapshot


class RequestOutcome:
    """Sum type: either :class:`Success` or :class:`Failure`."""

    __slots__ = ()

    # ----- Introspection -----------------------------------------------------
    def is_success(self) -> bool:
        """Return ``True`` if this is a :class:`Success` value."""
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        """Return ``True`` if this is a :class:`Failure` value."""
        return isinstance(self, Failure)

    # ----- Unwraps -----------------------------------------------------------
    def unwrap(self) -> Success:
        """Return ``self`` narrowed to :class:`Success`, else raise.

        Raises
        ------
        RuntimeError
            If this outcome is a :class:`Failure`; the message is included.
        """
        if isinstance(self, Success):
            return self
        raise RuntimeError(f"Attempted to unwrap Failure: {self!r}")

    def unwrap_failure(self) -> str:
        """Return the failure message if ``Failure``, else raise."""
        if isinstance(self, Failure):
            return self.message
        raise RuntimeError(f"Attempted to unwrap_failure on Success: {self!r}")

    def message_or(self, default: str) -> str:
        """Return the failure message, or ``default`` on success."""
        if isinstance(self, Failure):
            return self.message
        return default

    # ----- Combinators -------------------------------------------------------
    def map_message(self, fn: Callable[[str], str]) -> RequestOutcome:
        """Apply ``fn`` to a failure message; propagate success unchanged."""
        if isinstance(self, Failure):
            return Failure(fn(self.message))
        return self


@dataclass(frozen=True, slots=True)
class Success(RequestOutcome):
    """The service returned an image for ``snapshot``."""

    payload: bytes
    snapshot: FormSnapshot
    content_type: str | None = None

    def __repr__(self) -> str:
        return (
            f"Success(payload=<{len(self.payload)} bytes>, "
            f"content_type={self.content_type!r}, snapshot={self.snapshot.as_dict()!r})"
        )


@dataclass(frozen=True, slots=True)
class Failure(RequestOutcome):
    """The request failed at the transport or service level."""

    message: str


# ----- Convenience constructors ----------------------------------------------
def success(
    payload: bytes, snapshot: FormSnapshot, content_type: str | None = None
) -> RequestOutcome:
    """Construct :class:`Success` typed as the base outcome."""
    return Success(payload=payload, snapshot=snapshot, content_type=content_type)


def failure(message: str) -> RequestOutcome:
    """Construct :class:`Failure` typed as the base outcome."""
    return Failure(message=message)


def never(msg: str) -> NoReturn:
    """Raise a ``RuntimeError(msg)`` to mark a non-returning code path."""
    raise RuntimeError(msg)


__all__ = [
    "Failure",
    "RequestOutcome",
    "Success",
    "failure",
    "never",
    "success",
]
